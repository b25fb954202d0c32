"""Base formatter interface for QualityHub output rendering."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..models import AnalysisResult


@dataclass
class ReportContext:
    """Context passed to formatters alongside the analysis result."""

    history_count: int = 0
    history_location: Optional[str] = None


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: AnalysisResult, context: ReportContext) -> None:
        """Render the result to stdout/stderr as appropriate."""

    @abstractmethod
    def format(self, result: AnalysisResult, context: ReportContext) -> str:
        """Return formatted string representation of the result."""
