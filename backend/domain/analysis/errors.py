"""Exceptions for the analysis bounded context.

The parsers never raise on content: malformed text degrades field by field.
These exceptions cover the remote endpoints (transport, HTTP status, payload
shape) and are raised by the infrastructure clients.
"""

from __future__ import annotations

from typing import Optional


class AnalysisDomainError(Exception):
    """Base exception for the analysis domain."""

    pass


class AnalysisServiceError(AnalysisDomainError):
    """
    Remote analysis service failed.

    Attributes:
        status_code: HTTP status when the server answered, None otherwise
        detail: Best-effort message extracted from the response body

    Example:
        >>> raise AnalysisServiceError(
        ...     "API request failed with status 502", status_code=502
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class AnalysisTimeoutError(AnalysisServiceError):
    """Request to the analysis service timed out."""

    pass


class AnalysisNetworkError(AnalysisServiceError):
    """Connection to the analysis service could not be established."""

    pass


class AnalysisResponseError(AnalysisServiceError):
    """
    Service answered but the payload is unusable.

    Raised when:
    - Body is empty or not JSON where JSON is expected
    - Required key (e.g. "analysis") is missing
    - Server reports success=false
    """

    pass


class HistoryError(AnalysisDomainError):
    """Saving, listing or deleting analysis history failed."""

    pass


class InvalidImageError(AnalysisDomainError):
    """Image input could not be turned into base64 data."""

    pass
