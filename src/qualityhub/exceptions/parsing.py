"""Report parsing exceptions: missing inputs and unreadable content."""

from pathlib import Path

from .base import QualityHubError


class ParseError(QualityHubError):
    """Base class for errors raised while reading a quality report."""

    pass


class ReportNotFoundError(ParseError):
    """Raised when an expected report file or directory does not exist."""

    def __init__(self, path: Path, reason: str = "file does not exist"):
        super().__init__(
            f"Report not found: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class NoReportsFoundError(ReportNotFoundError):
    """Raised when a results directory holds no file matching the naming convention."""

    def __init__(self, directory: Path, pattern: str):
        super().__init__(directory, reason=f"no files matching {pattern}")
        self.hint = f"Point the parser at the directory holding the {pattern} files"
        self.message = f"No reports matching {pattern} found in: {directory}"
        self.directory = directory
        self.pattern = pattern


class MalformedReportError(ParseError):
    """Raised when a report exists but its content cannot be understood."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Malformed report: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
