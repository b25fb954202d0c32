"""Tests for the analysis engine and history-backed analyzer."""

import json

from conftest import make_entry, make_record
from qualityhub.analysis import RiskAnalyzer, analyze
from qualityhub.history import HistoryStore
from qualityhub.models import Decision, RiskLevel


class TestAnalyze:
    def test_first_run(self, record):
        result = analyze(record)
        assert result.previous is None
        assert result.issues == []
        assert result.risk_score == 100
        assert result.risk_level is RiskLevel.LOW
        assert result.decision is Decision.PROCEED
        assert not result.is_blocking

    def test_coverage_drop_against_previous(self):
        previous = make_entry(lines=90.0)
        result = analyze(make_record(lines=85.0), previous)
        assert result.previous is previous
        assert [i.code for i in result.issues] == ["coverage_dropped"]
        assert result.risk_score == 85
        assert result.risk_level is RiskLevel.LOW
        assert result.decision is Decision.CAUTION
        assert result.critical_count == 1
        assert result.warning_count == 0

    def test_blocking_run(self):
        result = analyze(make_record(passed=80, failed=20, lines=40.0))
        assert result.decision is Decision.BLOCK
        assert result.is_blocking
        assert result.has_critical

    def test_to_dict_keys(self):
        data = analyze(make_record(lines=85.0), make_entry(lines=90.0)).to_dict()
        assert data["riskScore"] == 85
        assert data["riskLevel"] == "LOW"
        assert data["decision"] == "CAUTION"
        assert data["previous"]["coverage"]["lines"] == 90.0
        assert data["issues"][0]["code"] == "coverage_dropped"


class TestRiskAnalyzer:
    def test_saves_each_run(self, history_path):
        store = HistoryStore(history_path)
        analyzer = RiskAnalyzer(store)

        first = analyzer.run(make_record(lines=90.0))
        second = analyzer.run(make_record(lines=85.0))

        assert first.previous is None
        assert second.previous.coverage_lines == 90.0
        assert second.risk_score == 85
        assert [e.risk_score for e in store.load_entries()] == [100, 85]

    def test_no_save(self, history_path):
        store = HistoryStore(history_path)
        RiskAnalyzer(store).run(make_record(), save=False)
        assert not history_path.exists()

    def test_prefers_same_branch(self, history_path):
        history_path.parent.mkdir(parents=True)
        entries = [make_entry(branch="main", lines=70.0), make_entry(branch="dev", lines=95.0)]
        history_path.write_text(json.dumps([e.to_dict() for e in entries]))

        result = RiskAnalyzer(HistoryStore(history_path)).run(make_record(branch="main"), save=False)
        assert result.previous.branch == "main"
        assert result.previous.coverage_lines == 70.0

    def test_write_failure_still_returns_result(self, tmp_path, record):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        result = RiskAnalyzer(HistoryStore(blocker / "history.json")).run(record)
        assert result.risk_score == 100
