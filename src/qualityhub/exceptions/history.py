"""History store exceptions."""

from pathlib import Path

from .base import QualityHubError


class HistoryError(QualityHubError):
    """Base class for history store errors."""

    pass


class HistoryWriteError(HistoryError):
    """Raised when the history log cannot be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write history: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
