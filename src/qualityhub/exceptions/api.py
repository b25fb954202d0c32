"""Exceptions for talking to a QualityHub server."""

from typing import Optional

from .base import QualityHubError


class APIError(QualityHubError):
    """Base class for errors raised by the API client."""

    pass


class UploadError(APIError):
    """Raised when the server cannot be reached or refuses a result."""

    hint = "Check api_endpoint in qualityhub.toml or pass --endpoint"

    def __init__(self, endpoint: str, reason: str, status_code: Optional[int] = None):
        super().__init__(
            f"Upload to {endpoint} failed",
            details={"reason": reason, "status": status_code},
        )
        self.endpoint = endpoint
        self.reason = reason
        self.status_code = status_code
