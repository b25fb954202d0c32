"""Report parsers for QualityHub."""

from enum import Enum
from typing import Optional

from ..environment import EnvironmentContext
from .base import BaseParser, ProjectInfo
from .jacoco import JacocoParser
from .jest import JestParser
from .junit import JUnitParser


class ReportFormat(Enum):
    JEST = "jest"
    JACOCO = "jacoco"
    JUNIT = "junit"


PARSERS = {
    ReportFormat.JEST: JestParser,
    ReportFormat.JACOCO: JacocoParser,
    ReportFormat.JUNIT: JUnitParser,
}


def get_parser(
    fmt,
    project: Optional[ProjectInfo] = None,
    env: Optional[EnvironmentContext] = None,
    default_name: Optional[str] = None,
) -> BaseParser:
    """Get a parser instance by format.

    Args:
        fmt: A ``ReportFormat`` or one of "jest", "jacoco", "junit"
        project: Caller-supplied identity overrides
        env: Environment context (read from the process when omitted)
        default_name: Project name used when neither ``project`` nor ``env`` has one

    Returns:
        Parser instance

    Raises:
        ValueError: If the format is not recognized
    """
    if not isinstance(fmt, ReportFormat):
        try:
            fmt = ReportFormat(str(fmt).lower())
        except ValueError:
            choices = ", ".join(f.value for f in ReportFormat)
            raise ValueError(f"Unknown format: {fmt!r}. Choose from: {choices}")
    return PARSERS[fmt](project=project, env=env, default_name=default_name)


__all__ = [
    "BaseParser",
    "ProjectInfo",
    "ReportFormat",
    "JestParser",
    "JacocoParser",
    "JUnitParser",
    "get_parser",
]
