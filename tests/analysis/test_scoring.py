"""Tests for risk scoring, levels and the deploy decision."""

import pytest

from conftest import make_entry, make_record
from qualityhub.analysis import compute_risk_score, decide, detect_issues, risk_level_for
from qualityhub.models import Decision, Issue, RiskLevel, Severity


def score_of(current, previous=None):
    return compute_risk_score(current, previous, detect_issues(current, previous))


def critical():
    return Issue(severity=Severity.CRITICAL, code="x", icon="🔴", message="critical")


def warning():
    return Issue(severity=Severity.WARNING, code="y", icon="🟡", message="warning")


class TestComputeRiskScore:
    def test_all_clear_is_100(self, record):
        assert score_of(record) == 100

    def test_zero_tests_is_not_penalized(self):
        assert score_of(make_record(total=0, passed=0)) == 100

    def test_single_failure(self):
        # -4 pass rate, -2 warning issue
        assert score_of(make_record(passed=99, failed=1)) == 94

    def test_pass_rate_penalty_capped(self):
        # -40 capped pass rate, -5 critical issue
        assert score_of(make_record(passed=90, failed=10)) == 55

    def test_line_coverage_penalty(self):
        # -10 coverage gap, -2 warning issue
        assert score_of(make_record(lines=60.0)) == 88

    def test_line_coverage_penalty_capped(self):
        # -20 capped gap, -5 critical issue
        assert score_of(make_record(lines=0.0)) == 75

    def test_branch_coverage_penalty(self):
        # -6 branch gap, -2 warning issue
        assert score_of(make_record(branches=50.0)) == 92

    def test_coverage_drop_penalty(self):
        # -10 drop, -5 critical coverage_dropped issue
        assert score_of(make_record(lines=85.0), make_entry(lines=90.0)) == 85

    def test_issue_penalty_capped(self, record):
        issues = [critical() for _ in range(4)] + [warning()]
        assert compute_risk_score(record, None, issues) == 85

    def test_info_issues_are_free(self, record):
        info = Issue(severity=Severity.INFO, code="slow_suite", icon="🐌", message="slow")
        assert compute_risk_score(record, None, [info]) == 100

    def test_rounds_half_up(self):
        # 100 - 1.5 = 98.5
        assert score_of(make_record(lines=77.0)) == 99

    def test_floor_at_zero(self):
        current = make_record(passed=0, failed=100, lines=0.0, branches=10.0)
        assert score_of(current, make_entry(lines=100.0, failed=0)) == 0


class TestRiskLevel:
    @pytest.mark.parametrize(
        "score,level",
        [
            (100, RiskLevel.LOW),
            (85, RiskLevel.LOW),
            (84, RiskLevel.MEDIUM),
            (65, RiskLevel.MEDIUM),
            (64, RiskLevel.HIGH),
            (40, RiskLevel.HIGH),
            (39, RiskLevel.CRITICAL),
            (0, RiskLevel.CRITICAL),
        ],
    )
    def test_buckets(self, score, level):
        assert risk_level_for(score) is level


class TestDecide:
    def test_low_score_blocks(self):
        assert decide(39, []) is Decision.BLOCK

    def test_score_40_without_criticals_is_caution(self):
        assert decide(40, []) is Decision.CAUTION

    def test_critical_below_60_blocks(self):
        assert decide(59, [critical()]) is Decision.BLOCK

    def test_critical_at_60_is_caution(self):
        assert decide(60, [critical()]) is Decision.CAUTION

    def test_critical_always_at_least_caution(self):
        assert decide(100, [critical()]) is Decision.CAUTION

    def test_caution_band(self):
        assert decide(74, [warning()]) is Decision.CAUTION

    def test_proceed(self):
        assert decide(75, [warning()]) is Decision.PROCEED
        assert decide(100, []) is Decision.PROCEED
