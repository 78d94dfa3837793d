"""Analysis history API client - implements IHistoryRepository port."""
# mypy: warn-unused-ignores=False

from typing import Any, List, Optional

import httpx
import structlog
from circuitbreaker import CircuitBreakerError, circuit
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.analysis.entities.analysis_result import AnalysisResult
from domain.analysis.errors import HistoryError
from infrastructure.config import get_history_api_base_url, get_http_timeout_s
from infrastructure.history.models import HistoryRow
from metrics.analysis import time_request

logger = structlog.get_logger(__name__)

HISTORY_PATH = "/analysis-history"


class HttpHistoryClient:
    """
    Remote analysis history, one record list per user (the user's e-mail).

    Example:
        >>> async with HttpHistoryClient() as history:
        ...     await history.save("me@example.com", result)
        ...     latest = await history.list("me@example.com", limit=5)
    """

    def __init__(self, base_url: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        self.url = (base_url or get_history_api_base_url()).rstrip("/") + HISTORY_PATH
        self.timeout_s = timeout_s if timeout_s is not None else get_http_timeout_s()
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpHistoryClient":
        self._session = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s))
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.aclose()

    async def save(self, user_id: str, result: AnalysisResult) -> None:
        body = HistoryRow.from_result(user_id, result).to_wire()
        with time_request("history"):
            await self._send("POST", "Failed to save analysis history", json=body)
        logger.info("history_saved", analysis_id=result.id)

    async def list(self, user_id: str, limit: int = 10, offset: int = 0) -> List[AnalysisResult]:
        """
        Fetch a page of the user's history.

        Raises:
            HistoryError: Non-2xx answer, transport failure or malformed rows
        """
        params = {"user_id": user_id, "limit": limit, "offset": offset}
        with time_request("history"):
            response = await self._send("GET", "Failed to fetch analysis history", params=params)
            try:
                rows = [HistoryRow.model_validate(row) for row in response.json()]
            except (ValueError, TypeError, ValidationError) as e:
                raise HistoryError("Malformed analysis history response") from e
        logger.info("history_fetched", count=len(rows), limit=limit, offset=offset)
        return [row.to_result() for row in rows]

    async def delete(self, user_id: str, analysis_id: str) -> None:
        params = {"id": analysis_id, "user_id": user_id}
        with time_request("history"):
            await self._send("DELETE", "Failed to delete analysis history", params=params)
        logger.info("history_deleted", analysis_id=analysis_id)

    async def _send(self, method: str, failure_message: str, **kwargs: Any) -> httpx.Response:
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")
        try:
            response = await self._request(method, **kwargs)
        except (httpx.TransportError, CircuitBreakerError) as e:
            logger.error("history_transport_error", method=method, error=str(e))
            raise HistoryError(failure_message) from e

        if response.status_code >= 400:
            logger.warning(
                "history_request_failed",
                method=method,
                status=response.status_code,
                body=response.text[:200],
            )
            raise HistoryError(f"{failure_message}: {response.status_code}")
        return response

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=httpx.TransportError,
        name="analysis_history",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        assert self._session is not None
        return await self._session.request(method, self.url, **kwargs)
