"""HTTP client for a QualityHub server.

The server ingests canonical records and answers with its own risk verdict:

    POST {endpoint}/api/v1/results   -> IngestResponse
    GET  {endpoint}/api/v1/health    -> {"status": ..., "services": {...}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .exceptions import UploadError
from .logging_config import get_logger

logger = get_logger(__name__)

API_PREFIX = "/api/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass
class IngestResponse:
    """Server verdict for one uploaded record."""

    success: bool
    message: str = ""
    qa_result_id: Optional[str] = None
    risk_score: Optional[int] = None
    risk_status: Optional[str] = None
    decision: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IngestResponse":
        score = data.get("risk_score")
        return cls(
            success=bool(data.get("success", False)),
            message=str(data.get("message", "")),
            qa_result_id=data.get("qa_result_id"),
            risk_score=int(score) if isinstance(score, (int, float)) else None,
            risk_status=data.get("risk_status"),
            decision=data.get("decision"),
        )


class APIClient:
    """Thin synchronous wrapper over ``httpx.Client``.

    Usable as a context manager; ``transport`` lets tests plug in an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._http = httpx.Client(
            base_url=f"{self.endpoint}{API_PREFIX}",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def ingest(self, record: Dict[str, Any]) -> IngestResponse:
        """Upload one canonical record.

        Raises:
            UploadError: On connection failure, a non-2xx status or a
                response body that is not a JSON object.
        """
        logger.info(f"Uploading QA result to {self.endpoint}{API_PREFIX}/results")
        data = self._request("POST", "/results", json=record)
        return IngestResponse.from_dict(data)

    def health_check(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadError(
                self.endpoint,
                f"server answered {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            raise UploadError(self.endpoint, str(e) or type(e).__name__)

        try:
            data = response.json()
        except ValueError:
            raise UploadError(self.endpoint, "response is not JSON", response.status_code)
        if not isinstance(data, dict):
            raise UploadError(self.endpoint, "response is not a JSON object", response.status_code)
        return data
