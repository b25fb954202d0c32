"""Data models for QualityHub.

The canonical record is the single, format-agnostic representation of one
quality report. Every parser produces it and the analysis engine consumes it.
History entries are the reduced projection of a record kept for trend
comparison; issues and analysis results are built fresh on every run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import MalformedReportError

SCHEMA_VERSION = "1.0.0"

PathLike = Union[str, Path]


def clamp_pct(value: float) -> float:
    """Clamp a percentage to [0, 100]."""
    return max(0.0, min(100.0, float(value)))


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Severity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class RiskLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Decision(Enum):
    PROCEED = "PROCEED"
    CAUTION = "CAUTION"
    BLOCK = "BLOCK"


# ── Canonical record ──────────────────────────────────────────────


@dataclass
class Project:
    """Identity of the build that produced a report."""

    name: str
    version: str
    commit: str
    branch: str
    timestamp: str  # ISO-8601, UTC


@dataclass
class TestSummary:
    """Aggregated unit-test outcome."""

    __test__ = False  # not a pytest test class

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration_ms: int = 0
    flaky_tests: Optional[List[str]] = None

    @property
    def pass_rate(self) -> float:
        """Passed / total as a percentage, 0.0 when there are no tests."""
        if self.total <= 0:
            return 0.0
        return self.passed / self.total * 100


@dataclass
class CoverageSummary:
    """Coverage percentages, each in [0, 100]."""

    lines: float = 0.0
    branches: float = 0.0
    functions: float = 0.0
    statements: Optional[float] = None
    diff_coverage: Optional[float] = None


@dataclass
class CodeQuality:
    """Static-analysis summary (e.g. from a SonarQube quality gate)."""

    bugs: int = 0
    vulnerabilities: int = 0
    code_smells: int = 0
    sonar_gate: Optional[str] = None
    security_hotspots: Optional[int] = None
    tech_debt_minutes: Optional[int] = None


@dataclass
class RecordMetadata:
    adapters: List[str] = field(default_factory=list)
    ci_provider: Optional[str] = None
    ci_url: Optional[str] = None


@dataclass
class CanonicalRecord:
    """One normalized quality report."""

    project: Project
    tests: TestSummary
    coverage: CoverageSummary
    code_quality: Optional[CodeQuality] = None
    metadata: Optional[RecordMetadata] = None
    version: str = SCHEMA_VERSION

    @property
    def pass_rate(self) -> float:
        return self.tests.pass_rate

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the ``qa-result.json`` layout, omitting unset optionals."""
        tests: Dict[str, Any] = {
            "total": self.tests.total,
            "passed": self.tests.passed,
            "failed": self.tests.failed,
            "skipped": self.tests.skipped,
            "duration_ms": self.tests.duration_ms,
        }
        if self.tests.flaky_tests:
            tests["flaky_tests"] = list(self.tests.flaky_tests)

        coverage: Dict[str, Any] = {
            "lines": self.coverage.lines,
            "branches": self.coverage.branches,
            "functions": self.coverage.functions,
        }
        if self.coverage.statements is not None:
            coverage["statements"] = self.coverage.statements
        if self.coverage.diff_coverage is not None:
            coverage["diff_coverage"] = self.coverage.diff_coverage

        quality: Dict[str, Any] = {"tests": tests, "coverage": coverage}
        if self.code_quality is not None:
            cq = self.code_quality
            quality["code_quality"] = _drop_none({
                "sonar_gate": cq.sonar_gate,
                "bugs": cq.bugs,
                "vulnerabilities": cq.vulnerabilities,
                "code_smells": cq.code_smells,
                "security_hotspots": cq.security_hotspots,
                "tech_debt_minutes": cq.tech_debt_minutes,
            })

        data: Dict[str, Any] = {
            "version": self.version,
            "project": {
                "name": self.project.name,
                "version": self.project.version,
                "commit": self.project.commit,
                "branch": self.project.branch,
                "timestamp": self.project.timestamp,
            },
            "quality": quality,
        }
        if self.metadata is not None:
            data["metadata"] = _drop_none({
                "ci_provider": self.metadata.ci_provider,
                "ci_url": self.metadata.ci_url,
                "adapters": list(self.metadata.adapters),
            })
        return data

    @classmethod
    def from_dict(cls, data: Any, source: PathLike = "<memory>") -> "CanonicalRecord":
        """Rebuild a record from its JSON layout.

        Raises:
            MalformedReportError: if ``quality.tests`` or ``quality.coverage`` is
                missing, or a field has the wrong type.
        """
        src = Path(source)
        if not isinstance(data, dict):
            raise MalformedReportError(src, "top-level value must be an object")
        quality = data.get("quality")
        if (
            not isinstance(quality, dict)
            or not isinstance(quality.get("tests"), dict)
            or not isinstance(quality.get("coverage"), dict)
        ):
            raise MalformedReportError(src, "missing quality.tests or quality.coverage")

        project_raw = data.get("project") or {}
        if not isinstance(project_raw, dict):
            raise MalformedReportError(src, "project must be an object")

        t = quality["tests"]
        flaky = t.get("flaky_tests")
        if flaky is not None and not isinstance(flaky, list):
            raise MalformedReportError(src, "tests.flaky_tests must be a list")
        tests = TestSummary(
            total=_int(t, "total", src),
            passed=_int(t, "passed", src),
            failed=_int(t, "failed", src),
            skipped=_int(t, "skipped", src),
            duration_ms=_int(t, "duration_ms", src),
            flaky_tests=[str(name) for name in flaky] if flaky else None,
        )

        c = quality["coverage"]
        coverage = CoverageSummary(
            lines=_float(c, "lines", src),
            branches=_float(c, "branches", src),
            functions=_float(c, "functions", src),
            statements=_float(c, "statements", src) if c.get("statements") is not None else None,
            diff_coverage=(
                _float(c, "diff_coverage", src) if c.get("diff_coverage") is not None else None
            ),
        )

        code_quality = None
        cq = quality.get("code_quality")
        if isinstance(cq, dict):
            code_quality = CodeQuality(
                bugs=_int(cq, "bugs", src),
                vulnerabilities=_int(cq, "vulnerabilities", src),
                code_smells=_int(cq, "code_smells", src),
                sonar_gate=cq.get("sonar_gate"),
                security_hotspots=(
                    _int(cq, "security_hotspots", src)
                    if cq.get("security_hotspots") is not None
                    else None
                ),
                tech_debt_minutes=(
                    _int(cq, "tech_debt_minutes", src)
                    if cq.get("tech_debt_minutes") is not None
                    else None
                ),
            )

        metadata = None
        meta = data.get("metadata")
        if isinstance(meta, dict):
            metadata = RecordMetadata(
                adapters=[str(a) for a in meta.get("adapters") or []],
                ci_provider=meta.get("ci_provider"),
                ci_url=meta.get("ci_url"),
            )

        return cls(
            version=str(data.get("version", SCHEMA_VERSION)),
            project=Project(
                name=str(project_raw.get("name", "unknown")),
                version=str(project_raw.get("version", "0.0.0")),
                commit=str(project_raw.get("commit", "unknown")),
                branch=str(project_raw.get("branch", "main")),
                timestamp=str(project_raw.get("timestamp", "")),
            ),
            tests=tests,
            coverage=coverage,
            code_quality=code_quality,
            metadata=metadata,
        )


def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _int(d: Dict[str, Any], key: str, src: Path) -> int:
    value = d.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedReportError(src, f"{key} must be a number, got {value!r}")
    return int(value)


def _float(d: Dict[str, Any], key: str, src: Path) -> float:
    value = d.get(key, 0.0)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedReportError(src, f"{key} must be a number, got {value!r}")
    return float(value)


# ── History ───────────────────────────────────────────────────────


@dataclass
class HistoryEntry:
    """Reduced projection of a past record, persisted for trend comparison."""

    timestamp: str
    project: str
    branch: str
    commit: str
    risk_score: int
    tests_total: int = 0
    tests_passed: int = 0
    tests_failed: int = 0
    coverage_lines: float = 0.0
    coverage_branches: float = 0.0
    coverage_functions: float = 0.0
    duration_ms: int = 0

    @classmethod
    def from_record(cls, record: CanonicalRecord, risk_score: int) -> "HistoryEntry":
        """Project ``record``; a record without a timestamp is stamped now."""
        return cls(
            timestamp=record.project.timestamp or utc_timestamp(),
            project=record.project.name,
            branch=record.project.branch,
            commit=record.project.commit,
            risk_score=risk_score,
            tests_total=record.tests.total,
            tests_passed=record.tests.passed,
            tests_failed=record.tests.failed,
            coverage_lines=record.coverage.lines,
            coverage_branches=record.coverage.branches,
            coverage_functions=record.coverage.functions,
            duration_ms=record.tests.duration_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "project": self.project,
            "branch": self.branch,
            "commit": self.commit,
            "riskScore": self.risk_score,
            "tests": {
                "total": self.tests_total,
                "passed": self.tests_passed,
                "failed": self.tests_failed,
            },
            "coverage": {
                "lines": self.coverage_lines,
                "branches": self.coverage_branches,
                "functions": self.coverage_functions,
            },
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "HistoryEntry":
        """Rebuild an entry; raises KeyError/TypeError/ValueError on bad shape."""
        tests = d.get("tests") or {}
        coverage = d.get("coverage") or {}
        return cls(
            timestamp=str(d["timestamp"]),
            project=str(d.get("project", "")),
            branch=str(d["branch"]),
            commit=str(d.get("commit", "")),
            risk_score=int(d.get("riskScore", 0)),
            tests_total=int(tests.get("total", 0)),
            tests_passed=int(tests.get("passed", 0)),
            tests_failed=int(tests.get("failed", 0)),
            coverage_lines=float(coverage.get("lines", 0.0)),
            coverage_branches=float(coverage.get("branches", 0.0)),
            coverage_functions=float(coverage.get("functions", 0.0)),
            duration_ms=int(d.get("duration_ms", 0)),
        )


# ── Analysis ──────────────────────────────────────────────────────


@dataclass
class Issue:
    """A single problem detected in the current run."""

    severity: Severity
    code: str
    icon: str
    message: str
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "severity": self.severity.value,
            "code": self.code,
            "icon": self.icon,
            "message": self.message,
            "detail": self.detail,
        })


@dataclass
class AnalysisResult:
    """Outcome of one analysis pass."""

    current: CanonicalRecord
    previous: Optional[HistoryEntry]
    issues: List[Issue]
    risk_score: int
    risk_level: RiskLevel
    decision: Decision

    @property
    def critical_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.CRITICAL)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.WARNING)

    @property
    def has_critical(self) -> bool:
        return self.critical_count > 0

    @property
    def is_blocking(self) -> bool:
        return self.decision is Decision.BLOCK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict() if self.previous else None,
            "issues": [i.to_dict() for i in self.issues],
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level.value,
            "decision": self.decision.value,
        }
