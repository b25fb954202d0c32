"""JaCoCo parser: a single aggregate ``jacoco.xml`` coverage report."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Tuple, Union

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET

from ..exceptions import MalformedReportError, ReportNotFoundError
from ..logging_config import get_logger
from ..models import CanonicalRecord, CoverageSummary, TestSummary, clamp_pct
from .base import BaseParser

logger = get_logger(__name__)

COUNTER_TYPES = ("LINE", "BRANCH", "METHOD", "INSTRUCTION")


def coverage_pct(covered: int, missed: int) -> float:
    """covered / (covered + missed) as a percentage; 0 when nothing was counted."""
    total = covered + missed
    if total <= 0:
        return 0.0
    return clamp_pct(covered / total * 100)


class JacocoParser(BaseParser):
    """Parse report-level counters of a JaCoCo XML report."""

    adapter_name = "jacoco"

    def parse(self, path: Union[str, Path]) -> CanonicalRecord:
        xml_path = Path(path)
        if not xml_path.is_file():
            raise ReportNotFoundError(xml_path, "JaCoCo XML not found")

        try:
            root = SafeET.parse(xml_path, forbid_dtd=False).getroot()
        except ET.ParseError as e:
            raise MalformedReportError(xml_path, f"invalid XML: {e}")
        except DefusedXmlException as e:
            raise MalformedReportError(xml_path, f"unsafe XML construct: {e!r}")

        if root.tag != "report":
            raise MalformedReportError(xml_path, f"expected <report> root, got <{root.tag}>")

        counters = self._read_counters(root, xml_path)
        logger.info(f"Read {len(counters)} JaCoCo counters from {xml_path}")

        def pct(kind: str) -> float:
            return coverage_pct(*counters.get(kind, (0, 0)))

        coverage = CoverageSummary(
            lines=pct("LINE"),
            branches=pct("BRANCH"),
            functions=pct("METHOD"),
            statements=pct("INSTRUCTION"),
        )
        return self._build_record(TestSummary(), coverage)

    def _read_counters(self, root: ET.Element, xml_path: Path) -> Dict[str, Tuple[int, int]]:
        counters: Dict[str, Tuple[int, int]] = {}
        # Only direct children: nested package/class counters are partial sums
        for counter in root.findall("counter"):
            kind = counter.get("type")
            if kind not in COUNTER_TYPES:
                continue
            try:
                covered = int(counter.get("covered", "0"))
                missed = int(counter.get("missed", "0"))
            except ValueError:
                raise MalformedReportError(xml_path, f"non-integer {kind} counter")
            counters[kind] = (covered, missed)
        return counters
