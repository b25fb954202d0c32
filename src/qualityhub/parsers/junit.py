"""JUnit parser: every ``TEST-*.xml`` file in a results directory."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET

from ..exceptions import MalformedReportError, NoReportsFoundError, ReportNotFoundError
from ..logging_config import get_logger
from ..models import CanonicalRecord, CoverageSummary, TestSummary
from .base import BaseParser

logger = get_logger(__name__)

REPORT_GLOB = "TEST-*.xml"

FLAKY_ELEMENTS = ("flakyFailure", "flakyError")
FLAKY_ATTRIBUTES = ("flaky-failure", "flakyFailure")


@dataclass
class _Totals:
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration_ms: float = 0.0
    flaky: List[str] = field(default_factory=list)


class JUnitParser(BaseParser):
    """Accumulate suite counters across all JUnit XML files in a directory."""

    adapter_name = "junit"

    def parse(self, path: Union[str, Path]) -> CanonicalRecord:
        results_dir = Path(path)
        if not results_dir.is_dir():
            raise ReportNotFoundError(results_dir, "results directory not found")

        xml_files = sorted(p for p in results_dir.glob(REPORT_GLOB) if p.is_file())
        if not xml_files:
            raise NoReportsFoundError(results_dir, REPORT_GLOB)

        totals = _Totals()
        for xml_file in xml_files:
            self._accumulate_file(xml_file, totals)
        logger.info(f"Parsed {len(xml_files)} JUnit report(s) from {results_dir}")

        tests = TestSummary(
            total=totals.total,
            passed=totals.passed,
            failed=totals.failed,
            skipped=totals.skipped,
            duration_ms=int(round(totals.duration_ms)),
            flaky_tests=totals.flaky or None,
        )
        return self._build_record(tests, CoverageSummary())

    def _accumulate_file(self, xml_file: Path, totals: _Totals) -> None:
        try:
            root = SafeET.parse(xml_file, forbid_dtd=False).getroot()
        except ET.ParseError as e:
            raise MalformedReportError(xml_file, f"invalid XML: {e}")
        except DefusedXmlException as e:
            raise MalformedReportError(xml_file, f"unsafe XML construct: {e!r}")

        if root.tag == "testsuites":
            suites = root.findall("testsuite")
        elif root.tag == "testsuite":
            suites = [root]
        else:
            raise MalformedReportError(xml_file, f"unexpected root element <{root.tag}>")

        for suite in suites:
            try:
                tests = int(suite.get("tests") or 0)
                failures = int(suite.get("failures") or 0)
                errors = int(suite.get("errors") or 0)
                skipped = int(suite.get("skipped") or 0)
                seconds = float(suite.get("time") or 0)
            except ValueError as e:
                raise MalformedReportError(xml_file, f"bad testsuite attribute: {e}")

            totals.total += tests
            totals.failed += failures + errors
            totals.skipped += skipped
            totals.passed += tests - failures - errors - skipped
            totals.duration_ms += seconds * 1000

            suite_name = suite.get("name", "")
            for case in suite.findall("testcase"):
                if _is_flaky(case):
                    totals.flaky.append(f"{suite_name}.{case.get('name', '')}")


def _is_flaky(case: ET.Element) -> bool:
    if any(case.find(tag) is not None for tag in FLAKY_ELEMENTS):
        return True
    return any(case.get(attr) is not None for attr in FLAKY_ATTRIBUTES)
