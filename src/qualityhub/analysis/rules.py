"""Issue detection rules.

Each rule looks at the current record and, when available, the most relevant
history entry, and yields zero or more issues. Rules run in the fixed order of
``RULES`` and the resulting list keeps that order; it is not sorted by
severity.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional

from ..display import format_duration, percent_change
from ..models import CanonicalRecord, HistoryEntry, Issue, Severity

# ── Thresholds ────────────────────────────────────────────────────
FAILED_CRITICAL = 5  # more failures than this is critical
SKIPPED_WARNING = 5
FLAKY_DETAIL_LIMIT = 3
SLOW_SUITE_MS = 300_000
LINE_CRITICAL_PCT = 50.0
LINE_WARNING_PCT = 70.0
BRANCH_WARNING_PCT = 60.0
COVERAGE_DROP_CRITICAL = -3.0
COVERAGE_DROP_WARNING = -1.0
TESTS_REMOVED_WARNING = -5
BUILD_SLOWDOWN_PCT = 20.0
BUGS_WARNING = 5

Rule = Callable[[CanonicalRecord, Optional[HistoryEntry]], Iterator[Issue]]


def _plural(n: int, word: str, suffix: str = "s") -> str:
    return f"{n} {word}{suffix if n != 1 else ''}"


# ── Tests ─────────────────────────────────────────────────────────


def failed_tests(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    tests = current.tests
    if tests.failed > 0:
        critical = tests.failed > FAILED_CRITICAL
        yield Issue(
            severity=Severity.CRITICAL if critical else Severity.WARNING,
            code="tests_failed",
            icon="🔴" if critical else "🟡",
            message=f"{_plural(tests.failed, 'test')} failed ({tests.pass_rate:.1f}% pass rate)",
        )


def skipped_tests(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    if current.tests.skipped > SKIPPED_WARNING:
        yield Issue(
            severity=Severity.WARNING,
            code="tests_skipped",
            icon="⏭️",
            message=f"{current.tests.skipped} tests skipped",
            detail="High skip count may indicate ignored issues",
        )


def flaky_tests(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    flaky = current.tests.flaky_tests or []
    if flaky:
        yield Issue(
            severity=Severity.WARNING,
            code="flaky_tests",
            icon="🎲",
            message=f"{_plural(len(flaky), 'flaky test')} detected",
            detail=", ".join(flaky[:FLAKY_DETAIL_LIMIT]),
        )


def slow_suite(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    duration = current.tests.duration_ms
    if duration > SLOW_SUITE_MS:
        yield Issue(
            severity=Severity.INFO,
            code="slow_suite",
            icon="🐌",
            message=f"Test suite is slow ({format_duration(duration)})",
            detail="Consider parallelizing or splitting test suites",
        )


# ── Coverage ──────────────────────────────────────────────────────


def line_coverage(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    lines = current.coverage.lines
    if lines < LINE_CRITICAL_PCT:
        yield Issue(
            severity=Severity.CRITICAL,
            code="line_coverage_critical",
            icon="🔴",
            message=f"Line coverage critically low: {lines:.1f}%",
            detail="Minimum recommended: 80%",
        )
    elif lines < LINE_WARNING_PCT:
        yield Issue(
            severity=Severity.WARNING,
            code="line_coverage_low",
            icon="🟡",
            message=f"Line coverage below target: {lines:.1f}%",
            detail="Recommended: 80%+",
        )


def branch_coverage(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    # 0 means the tool did not report branches
    branches = current.coverage.branches
    if 0 < branches < BRANCH_WARNING_PCT:
        yield Issue(
            severity=Severity.WARNING,
            code="branch_coverage_low",
            icon="🔀",
            message=f"Branch coverage low: {branches:.1f}%",
            detail="Many code paths are untested",
        )


# ── Trends (need a previous entry) ────────────────────────────────


def coverage_trend(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    if previous is None:
        return
    line_diff = current.coverage.lines - previous.coverage_lines
    detail = f"{previous.coverage_lines:.1f}% → {current.coverage.lines:.1f}%"
    if line_diff < COVERAGE_DROP_CRITICAL:
        yield Issue(
            severity=Severity.CRITICAL,
            code="coverage_dropped",
            icon="📉",
            message=f"Coverage dropped {abs(line_diff):.1f}% since last run",
            detail=detail,
        )
    elif line_diff < COVERAGE_DROP_WARNING:
        yield Issue(
            severity=Severity.WARNING,
            code="coverage_decreased",
            icon="📉",
            message=f"Coverage decreased {abs(line_diff):.1f}%",
            detail=detail,
        )


def removed_tests(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    if previous is None:
        return
    test_diff = current.tests.total - previous.tests_total
    if test_diff < TESTS_REMOVED_WARNING:
        yield Issue(
            severity=Severity.WARNING,
            code="tests_removed",
            icon="⚠️",
            message=f"{abs(test_diff)} tests removed since last run",
            detail=f"{previous.tests_total} → {current.tests.total}",
        )


def build_slowdown(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    if previous is None or previous.duration_ms <= 0 or current.tests.duration_ms <= 0:
        return
    increase = percent_change(current.tests.duration_ms, previous.duration_ms)
    if increase > BUILD_SLOWDOWN_PCT:
        yield Issue(
            severity=Severity.WARNING,
            code="build_slowed",
            icon="⏱️",
            message=f"Build time increased {increase:.0f}%",
            detail=(
                f"{format_duration(previous.duration_ms)} → "
                f"{format_duration(current.tests.duration_ms)}"
            ),
        )


def new_failures(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    if previous is None:
        return
    if current.tests.failed > previous.tests_failed:
        count = current.tests.failed - previous.tests_failed
        yield Issue(
            severity=Severity.CRITICAL,
            code="new_failures",
            icon="🆕",
            message=f"{_plural(count, 'new test failure')} since last run",
        )


# ── Static analysis ───────────────────────────────────────────────


def code_quality(current: CanonicalRecord, previous: Optional[HistoryEntry]) -> Iterator[Issue]:
    cq = current.code_quality
    if cq is None:
        return
    if cq.vulnerabilities > 0:
        noun = "vulnerability" if cq.vulnerabilities == 1 else "vulnerabilities"
        yield Issue(
            severity=Severity.CRITICAL,
            code="vulnerabilities",
            icon="🛡️",
            message=f"{cq.vulnerabilities} security {noun} found",
        )
    if cq.bugs > BUGS_WARNING:
        yield Issue(
            severity=Severity.WARNING,
            code="static_analysis_bugs",
            icon="🐛",
            message=f"{cq.bugs} bugs detected by static analysis",
        )
    if cq.sonar_gate == "FAILED":
        yield Issue(
            severity=Severity.CRITICAL,
            code="quality_gate_failed",
            icon="🚫",
            message="SonarQube quality gate FAILED",
        )


RULES: List[Rule] = [
    failed_tests,
    skipped_tests,
    flaky_tests,
    slow_suite,
    line_coverage,
    branch_coverage,
    coverage_trend,
    removed_tests,
    build_slowdown,
    new_failures,
    code_quality,
]


def detect_issues(
    current: CanonicalRecord, previous: Optional[HistoryEntry] = None
) -> List[Issue]:
    """Run every rule in order and collect the issues they raise."""
    issues: List[Issue] = []
    for rule in RULES:
        issues.extend(rule(current, previous))
    return issues
