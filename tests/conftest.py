"""Shared test fixtures for QualityHub."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

import pytest

from qualityhub.environment import EnvironmentContext
from qualityhub.models import (
    CanonicalRecord,
    CoverageSummary,
    HistoryEntry,
    Project,
    RecordMetadata,
    TestSummary,
)


def make_record(
    total=100,
    passed=100,
    failed=0,
    skipped=0,
    duration_ms=0,
    flaky_tests=None,
    lines=90.0,
    branches=0.0,
    functions=0.0,
    branch="main",
    code_quality=None,
):
    """Build a canonical record with sensible defaults."""
    return CanonicalRecord(
        project=Project(
            name="billing",
            version="1.2.3",
            commit="abcdef1234567890",
            branch=branch,
            timestamp="2025-01-01T12:00:00.000Z",
        ),
        tests=TestSummary(
            total=total,
            passed=passed,
            failed=failed,
            skipped=skipped,
            duration_ms=duration_ms,
            flaky_tests=flaky_tests,
        ),
        coverage=CoverageSummary(lines=lines, branches=branches, functions=functions),
        code_quality=code_quality,
        metadata=RecordMetadata(adapters=["jest"]),
    )


def make_entry(branch="main", lines=90.0, total=100, failed=0, duration_ms=0, commit="c0ffee", score=90):
    """Build a history entry with sensible defaults."""
    return HistoryEntry(
        timestamp="2025-01-01T12:00:00.000Z",
        project="billing",
        branch=branch,
        commit=commit,
        risk_score=score,
        tests_total=total,
        tests_passed=total - failed,
        tests_failed=failed,
        coverage_lines=lines,
        coverage_branches=0.0,
        coverage_functions=0.0,
        duration_ms=duration_ms,
    )


@pytest.fixture
def empty_env(tmp_path):
    """Environment with nothing set and an isolated working directory."""
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    return EnvironmentContext.from_environ({}, cwd=workdir)


@pytest.fixture
def record():
    return make_record()


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / ".qualityhub" / "history.json"
