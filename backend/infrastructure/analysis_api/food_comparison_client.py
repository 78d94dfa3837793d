"""Food comparison API client - implements IFoodComparisonProvider port.

Compares a "before" and an "after" photo of the same plate and returns the
model's description of what was eaten. Failures are raised with messages
meant to be shown to the user as-is.
"""
# mypy: warn-unused-ignores=False

import base64
import os
from pathlib import Path
from typing import Any, Dict, Optional

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

from domain.analysis.errors import (
    AnalysisNetworkError,
    AnalysisResponseError,
    AnalysisServiceError,
    AnalysisTimeoutError,
    InvalidImageError,
)
from infrastructure.analysis_api.models import FoodComparisonRequest, FoodComparisonResponse
from infrastructure.config import get_comparison_timeout_s, get_food_comparison_api_url
from metrics.analysis import time_request

logger = structlog.get_logger(__name__)

SERVER_ERROR_MESSAGE = "Server error: Please try again later"
TIMEOUT_MESSAGE = "Request timeout: Please check your internet connection"
NETWORK_ERROR_MESSAGE = "Network error: Please check your internet connection"
EMPTY_RESPONSE_MESSAGE = "Empty response from server"
GENERIC_SERVER_MESSAGE = "Server returned an error"
INVALID_FORMAT_MESSAGE = "Invalid response format from server"

# Shorter strings cannot be a photo; treat them as paths.
_MIN_RAW_BASE64_LENGTH = 100


def image_to_base64(image: str) -> str:
    """
    Normalize an image reference to bare base64.

    Accepted forms:
    - data URI ("data:image/jpeg;base64,...")
    - raw base64 (long string without a URI scheme)
    - local path or file:// URI, read from disk

    Raises:
        InvalidImageError: Unsupported scheme or unreadable file

    Example:
        >>> image_to_base64("data:image/jpeg;base64,QUJD")
        'QUJD'
    """
    if image.startswith("data:"):
        _, _, payload = image.partition(",")
        if not payload:
            raise InvalidImageError("Data URI without payload")
        return payload

    if image.startswith("file://"):
        return _read_file(image[len("file://"):])
    if "://" in image:
        raise InvalidImageError(f"Unsupported image URI scheme: {image.split('://', 1)[0]}")

    if len(image) <= _MIN_RAW_BASE64_LENGTH or os.path.isfile(image):
        return _read_file(image)
    return image


def _read_file(path: str) -> str:
    try:
        return base64.b64encode(Path(path).read_bytes()).decode("ascii")
    except OSError as e:
        raise InvalidImageError(
            "Failed to process image. Please try again with a different image."
        ) from e


class FoodComparisonClient:
    """
    Food comparison endpoint client.

    Example:
        >>> async with FoodComparisonClient() as client:
        ...     text = await client.compare(before_b64, after_b64)
    """

    def __init__(self, api_url: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        self.api_url = api_url or get_food_comparison_api_url()
        self.timeout_s = timeout_s if timeout_s is not None else get_comparison_timeout_s()
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "FoodComparisonClient":
        self._session = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            headers={
                "Accept": "application/json",
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
            },
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.aclose()

    async def compare(self, before_image: str, after_image: str) -> str:
        """
        Compare two photos of the same plate.

        Args:
            before_image: Photo before eating (data URI, base64 or path)
            after_image: Photo after eating (same forms)

        Returns:
            Comparison text

        Raises:
            InvalidImageError: Missing or unreadable image
            AnalysisTimeoutError: Request timed out
            AnalysisNetworkError: Endpoint unreachable
            AnalysisServiceError: Server error (message from the server when given)
            AnalysisResponseError: success=false or no analysis in the answer
        """
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")
        if not before_image or not after_image:
            raise InvalidImageError("Both before and after images are required")

        request = FoodComparisonRequest(
            before_image=image_to_base64(before_image),
            after_image=image_to_base64(after_image),
        )
        logger.info(
            "food_comparison_started",
            before_length=len(request.before_image),
            after_length=len(request.after_image),
        )

        with time_request("food_comparison"):
            try:
                response = await self._post(request.to_wire())
            except httpx.TimeoutException as e:
                raise AnalysisTimeoutError(TIMEOUT_MESSAGE) from e
            except httpx.TransportError as e:
                raise AnalysisNetworkError(NETWORK_ERROR_MESSAGE) from e
            except CircuitBreakerError as e:
                raise AnalysisNetworkError(NETWORK_ERROR_MESSAGE) from e

            analysis = self._read_analysis(response)

        logger.info("food_comparison_completed", analysis_length=len(analysis))
        return analysis

    def _read_analysis(self, response: httpx.Response) -> str:
        status = response.status_code
        if status >= 500:
            detail = _json_error(response)
            logger.warning("food_comparison_server_error", status=status, detail=detail)
            if detail:
                raise AnalysisServiceError(detail, status_code=status, detail=detail)
            if status == 500:
                raise AnalysisServiceError(SERVER_ERROR_MESSAGE, status_code=status)
            raise AnalysisServiceError(f"Request failed with status code {status}", status_code=status)

        try:
            data = response.json()
        except ValueError as e:
            raise AnalysisResponseError(INVALID_FORMAT_MESSAGE, status_code=status) from e
        if not data:
            raise AnalysisResponseError(EMPTY_RESPONSE_MESSAGE, status_code=status)

        try:
            payload = FoodComparisonResponse.model_validate(data)
        except ValidationError as e:
            raise AnalysisResponseError(INVALID_FORMAT_MESSAGE, status_code=status) from e

        if payload.success is False:
            message = payload.error or GENERIC_SERVER_MESSAGE
            raise AnalysisResponseError(message, status_code=status, detail=payload.error)
        if payload.analysis:
            return payload.analysis
        raise AnalysisResponseError(INVALID_FORMAT_MESSAGE, status_code=status)

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=httpx.TransportError,
        name="food_comparison",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        # Connection failures only; a timed-out comparison is not resent.
        retry=retry_if_exception_type(httpx.ConnectError),
        reraise=True,
    )
    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        assert self._session is not None
        return await self._session.post(self.api_url, json=body)


def _json_error(response: httpx.Response) -> Optional[str]:
    """"error" key of a JSON body; plain-text 500 pages are ignored."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return None
