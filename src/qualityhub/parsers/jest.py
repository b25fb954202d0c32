"""Jest parser: ``coverage-summary.json`` plus an optional ``test-results.json``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import MalformedReportError, ReportNotFoundError
from ..logging_config import get_logger
from ..models import CanonicalRecord, CoverageSummary, TestSummary, clamp_pct
from .base import BaseParser

logger = get_logger(__name__)

COVERAGE_SUMMARY_FILE = "coverage-summary.json"
TEST_RESULTS_FILE = "test-results.json"

# Tests slower than this are reported as flaky candidates
SLOW_TEST_THRESHOLD_MS = 5000


class JestParser(BaseParser):
    """Parse a Jest coverage directory into a canonical record."""

    adapter_name = "jest"

    def parse(self, path: Union[str, Path]) -> CanonicalRecord:
        coverage_dir = Path(path)
        summary_path = coverage_dir / COVERAGE_SUMMARY_FILE
        if not summary_path.is_file():
            raise ReportNotFoundError(summary_path, "coverage summary not found")

        summary = _read_json(summary_path)
        coverage = self._extract_coverage(summary, summary_path)

        tests = TestSummary()
        results_path = self.find_test_results(coverage_dir)
        if results_path is not None:
            logger.info(f"Reading test results from {results_path}")
            tests = self._extract_tests(_read_json(results_path), results_path)
        else:
            logger.info(f"No {TEST_RESULTS_FILE} found near {coverage_dir}; coverage only")

        return self._build_record(tests, coverage)

    def search_paths(self, coverage_dir: Path) -> List[Path]:
        """Candidate locations for the test-results file, in priority order."""
        return [
            coverage_dir / TEST_RESULTS_FILE,
            coverage_dir.parent / TEST_RESULTS_FILE,
            self.env.working_dir / TEST_RESULTS_FILE,
        ]

    def find_test_results(self, coverage_dir: Path) -> Optional[Path]:
        return next((p for p in self.search_paths(coverage_dir) if p.is_file()), None)

    def _extract_coverage(self, summary: Any, path: Path) -> CoverageSummary:
        total = summary.get("total") if isinstance(summary, dict) else None
        if not isinstance(total, dict) or not isinstance(total.get("lines"), dict):
            raise MalformedReportError(path, "missing total.lines in coverage summary")

        statements = _pct(total, "statements") if "statements" in total else None
        return CoverageSummary(
            lines=_pct(total, "lines"),
            branches=_pct(total, "branches"),
            functions=_pct(total, "functions"),
            statements=statements,
        )

    def _extract_tests(self, data: Any, path: Path) -> TestSummary:
        if not isinstance(data, dict):
            raise MalformedReportError(path, "test results must be a JSON object")

        suites = data.get("testResults")
        if not isinstance(suites, list):
            suites = []

        duration = 0.0
        flaky: List[str] = []
        for suite in suites:
            if not isinstance(suite, dict):
                continue
            duration += _suite_runtime(suite)
            for test in suite.get("assertionResults") or []:
                if not isinstance(test, dict):
                    continue
                test_duration = test.get("duration")
                if _is_number(test_duration) and test_duration > SLOW_TEST_THRESHOLD_MS:
                    titles = list(test.get("ancestorTitles") or []) + [str(test.get("title", ""))]
                    flaky.append(" > ".join(str(t) for t in titles))

        return TestSummary(
            total=_count(data, "numTotalTests", path),
            passed=_count(data, "numPassedTests", path),
            failed=_count(data, "numFailedTests", path),
            skipped=_count(data, "numPendingTests", path),
            duration_ms=int(round(duration)),
            flaky_tests=flaky or None,
        )


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedReportError(path, f"invalid JSON: {e}")
    except UnicodeDecodeError as e:
        raise MalformedReportError(path, f"not valid UTF-8: {e}")
    except OSError as e:
        raise ReportNotFoundError(path, str(e))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _pct(total: Dict[str, Any], metric: str) -> float:
    # Jest writes "Unknown" when nothing was instrumented
    entry = total.get(metric)
    pct = entry.get("pct") if isinstance(entry, dict) else None
    return clamp_pct(pct) if _is_number(pct) else 0.0


def _count(data: Dict[str, Any], key: str, path: Path) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if not _is_number(value):
        raise MalformedReportError(path, f"{key} must be a number, got {value!r}")
    return int(value)


def _suite_runtime(suite: Dict[str, Any]) -> float:
    perf = suite.get("perfStats")
    if isinstance(perf, dict) and _is_number(perf.get("runtime")) and perf["runtime"]:
        return float(perf["runtime"])
    start, end = suite.get("startTime"), suite.get("endTime")
    if _is_number(start) and _is_number(end) and start and end:
        return float(end - start)
    return 0.0
