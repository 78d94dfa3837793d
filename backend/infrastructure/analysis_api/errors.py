"""Translation of httpx failures into analysis domain errors."""

from typing import Optional

import httpx

from domain.analysis.errors import (
    AnalysisNetworkError,
    AnalysisServiceError,
    AnalysisTimeoutError,
)


def error_detail(response: httpx.Response) -> Optional[str]:
    """
    Best-effort message from an error response.

    JSON bodies with an "error" (or "message") key give that value,
    anything else the raw text.
    """
    try:
        data = response.json()
    except ValueError:
        text = response.text.strip()
        return text or None
    if isinstance(data, dict):
        for key in ("error", "message", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def status_error(response: httpx.Response, message: str) -> AnalysisServiceError:
    detail = error_detail(response)
    full_message = f"{message}: {detail}" if detail else message
    return AnalysisServiceError(full_message, status_code=response.status_code, detail=detail)


def transport_error(exc: httpx.TransportError, endpoint: str) -> AnalysisServiceError:
    if isinstance(exc, httpx.TimeoutException):
        return AnalysisTimeoutError(f"{endpoint} request timed out")
    return AnalysisNetworkError(f"{endpoint} unreachable: {exc}")
