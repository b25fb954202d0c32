"""Risk scoring and deploy decision.

Score starts at 100 (higher is safer) and loses points through independent
deductions. Deductions may overlap: a coverage drop is charged directly and
again through the issues it raises.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..models import CanonicalRecord, Decision, HistoryEntry, Issue, RiskLevel, Severity

MAX_SCORE = 100

# (cap, weight) per deduction
PASS_RATE_PENALTY = (40.0, 4.0)
LINE_COVERAGE_TARGET = 80.0
LINE_COVERAGE_PENALTY = (20.0, 0.5)
BRANCH_COVERAGE_TARGET = 70.0
BRANCH_COVERAGE_PENALTY = (10.0, 0.3)
COVERAGE_DROP_PENALTY = (15.0, 2.0)
ISSUE_PENALTY_CAP = 15.0
CRITICAL_ISSUE_WEIGHT = 5.0
WARNING_ISSUE_WEIGHT = 2.0

BLOCK_BELOW = 40
BLOCK_CRITICAL_BELOW = 60
CAUTION_BELOW = 75


def compute_risk_score(
    current: CanonicalRecord,
    previous: Optional[HistoryEntry],
    issues: Sequence[Issue],
) -> int:
    """Deterministic 0-100 score for ``current``."""
    score = float(MAX_SCORE)
    tests, coverage = current.tests, current.coverage

    # zero tests means no data, not a 0% pass rate
    if tests.total > 0 and tests.pass_rate < 100:
        cap, weight = PASS_RATE_PENALTY
        score -= min(cap, (100 - tests.pass_rate) * weight)

    if coverage.lines < LINE_COVERAGE_TARGET:
        cap, weight = LINE_COVERAGE_PENALTY
        score -= min(cap, (LINE_COVERAGE_TARGET - coverage.lines) * weight)

    if 0 < coverage.branches < BRANCH_COVERAGE_TARGET:
        cap, weight = BRANCH_COVERAGE_PENALTY
        score -= min(cap, (BRANCH_COVERAGE_TARGET - coverage.branches) * weight)

    if previous is not None:
        line_diff = coverage.lines - previous.coverage_lines
        if line_diff < 0:
            cap, weight = COVERAGE_DROP_PENALTY
            score -= min(cap, abs(line_diff) * weight)

    criticals = sum(1 for i in issues if i.severity is Severity.CRITICAL)
    warnings = sum(1 for i in issues if i.severity is Severity.WARNING)
    score -= min(
        ISSUE_PENALTY_CAP,
        criticals * CRITICAL_ISSUE_WEIGHT + warnings * WARNING_ISSUE_WEIGHT,
    )

    return max(0, min(MAX_SCORE, _round_half_up(score)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def risk_level_for(score: int) -> RiskLevel:
    """Display-only bucket for a score."""
    if score >= 85:
        return RiskLevel.LOW
    if score >= 65:
        return RiskLevel.MEDIUM
    if score >= 40:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def decide(score: int, issues: Sequence[Issue]) -> Decision:
    """Map score and issue severities to PROCEED / CAUTION / BLOCK."""
    has_critical = any(i.severity is Severity.CRITICAL for i in issues)
    if score < BLOCK_BELOW or (has_critical and score < BLOCK_CRITICAL_BELOW):
        return Decision.BLOCK
    if score < CAUTION_BELOW or has_critical:
        return Decision.CAUTION
    return Decision.PROCEED
