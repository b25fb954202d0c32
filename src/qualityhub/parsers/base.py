"""Base parser interface for report adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..environment import EnvironmentContext
from ..models import (
    CanonicalRecord,
    CoverageSummary,
    Project,
    RecordMetadata,
    TestSummary,
    utc_timestamp,
)

DEFAULT_PROJECT_NAME = "unknown"
DEFAULT_PROJECT_VERSION = "0.0.0"
DEFAULT_COMMIT = "unknown"
DEFAULT_BRANCH = "main"


@dataclass(frozen=True)
class ProjectInfo:
    """Caller-supplied identity overrides; ``None`` fields fall through."""

    name: Optional[str] = None
    version: Optional[str] = None
    commit: Optional[str] = None
    branch: Optional[str] = None


class BaseParser(ABC):
    """Abstract base class for report parsers.

    Subclasses set ``adapter_name`` and implement :meth:`parse`, which must
    either return a complete record or raise a ``ParseError``.
    """

    adapter_name: str = ""

    def __init__(
        self,
        project: Optional[ProjectInfo] = None,
        env: Optional[EnvironmentContext] = None,
        default_name: Optional[str] = None,
    ):
        self.env = env if env is not None else EnvironmentContext.from_environ()
        self.default_name = default_name
        self.project = self._resolve_project(project or ProjectInfo())

    @abstractmethod
    def parse(self, path: Union[str, Path]) -> CanonicalRecord:
        """Read the report at ``path`` and return a canonical record."""

    def _resolve_project(self, overrides: ProjectInfo) -> ProjectInfo:
        # explicit value, then environment, then configured default, then fallback
        return ProjectInfo(
            name=(
                overrides.name
                or self.env.package_name
                or self.default_name
                or DEFAULT_PROJECT_NAME
            ),
            version=overrides.version or self.env.package_version or DEFAULT_PROJECT_VERSION,
            commit=overrides.commit or self.env.git_commit or DEFAULT_COMMIT,
            branch=overrides.branch or self.env.git_branch or DEFAULT_BRANCH,
        )

    def _build_record(self, tests: TestSummary, coverage: CoverageSummary) -> CanonicalRecord:
        return CanonicalRecord(
            project=Project(
                name=self.project.name,
                version=self.project.version,
                commit=self.project.commit,
                branch=self.project.branch,
                timestamp=utc_timestamp(),
            ),
            tests=tests,
            coverage=coverage,
            metadata=RecordMetadata(
                adapters=[self.adapter_name],
                ci_provider=self.env.ci_provider,
                ci_url=self.env.ci_url,
            ),
        )
