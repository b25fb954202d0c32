"""Exception hierarchy for QualityHub."""

from .api import APIError, UploadError
from .base import QualityHubError
from .config import ConfigurationError, InvalidConfigError
from .history import HistoryError, HistoryWriteError
from .parsing import (
    MalformedReportError,
    NoReportsFoundError,
    ParseError,
    ReportNotFoundError,
)

__all__ = [
    "QualityHubError",
    "ParseError",
    "ReportNotFoundError",
    "NoReportsFoundError",
    "MalformedReportError",
    "HistoryError",
    "HistoryWriteError",
    "ConfigurationError",
    "InvalidConfigError",
    "APIError",
    "UploadError",
]
