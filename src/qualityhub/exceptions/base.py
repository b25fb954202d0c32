"""Root of the QualityHub exception tree."""

from typing import Any, Dict, Mapping, Optional


class QualityHubError(Exception):
    """Base exception for all QualityHub errors.

    Attributes:
        message: One-line summary, e.g. ``Report not found: coverage/``
        details: Context rendered as ``key=value`` pairs (path, reason, ...)
        hint: Suggested next step shown by the CLI below the error
    """

    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        # None values carry no context; everything else is shown as text
        self.details: Dict[str, str] = {
            key: str(value) for key, value in (details or {}).items() if value is not None
        }
        if hint is not None:
            self.hint = hint

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
