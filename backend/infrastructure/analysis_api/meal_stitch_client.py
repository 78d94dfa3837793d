"""Meal-stitch API client - implements IMealStitchProvider port.

A meal photographed in several shots is analyzed item by item
(`POST {base}/llm-{n}`), then the parsed items are summarized in one
synthesis (`POST {base}/summarize`).
"""
# mypy: warn-unused-ignores=False

import json
from typing import Any, Dict, List, Optional

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

from domain.analysis.entities.parsed_analysis import MealStitchItem, ParsedAnalysis
from domain.analysis.errors import AnalysisNetworkError, AnalysisResponseError
from domain.analysis.factories.analysis_result_factory import to_image_data_uri
from domain.analysis.parsing.stitch_parser import parse_stitch_analysis
from infrastructure.analysis_api.calculator_client import ANALYSIS_REQUEST_TYPE
from infrastructure.analysis_api.errors import status_error, transport_error
from infrastructure.analysis_api.models import ChatRequest, ItemAnalysisResponse, SummaryResponse
from infrastructure.config import get_http_timeout_s, get_meal_stitch_base_url
from metrics.analysis import time_request

logger = structlog.get_logger(__name__)


def build_summary_request(items: List[ParsedAnalysis]) -> Dict[str, Any]:
    """Items travel as a JSON string inside `responses.items`."""
    return {"responses": {"items": json.dumps([item.to_summary_item() for item in items])}}


class MealStitchClient:
    """
    Meal-stitch endpoints client.

    Example:
        >>> async with MealStitchClient() as client:
        ...     first = await client.analyze_item(photo_1, 1)
        ...     second = await client.analyze_item(photo_2, 2)
        ...     synthesis = await client.summarize([first.parsed, second.parsed])
    """

    def __init__(self, base_url: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        self.base_url = (base_url or get_meal_stitch_base_url()).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else get_http_timeout_s()
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "MealStitchClient":
        self._session = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            headers={"Accept": "application/json"},
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.aclose()

    async def analyze_item(self, image_base64: str, item_number: int) -> MealStitchItem:
        """
        Analyze the photo of one item.

        Args:
            image_base64: JPEG as raw base64 or data URI
            item_number: 1-based position of the item in the meal

        Returns:
            MealStitchItem with raw analysis text and parsed fields

        Raises:
            AnalysisServiceError: Non-2xx answer or transport failure
            AnalysisResponseError: Answer without an "analysis" text
        """
        if item_number < 1:
            raise ValueError(f"item_number must be >= 1, got {item_number}")

        url = f"{self.base_url}/llm-{item_number}"
        payload = {"type": ANALYSIS_REQUEST_TYPE, "image": to_image_data_uri(image_base64)}
        body = ChatRequest.for_payload(payload).to_wire()

        logger.info("meal_stitch_item_started", item_number=item_number)
        with time_request("meal_stitch"):
            data = await self._request(url, body, f"Failed to analyze item {item_number}")
            try:
                response = ItemAnalysisResponse.model_validate(data)
            except ValidationError as e:
                raise AnalysisResponseError(
                    f"Invalid analysis response for item {item_number}"
                ) from e

        parsed = parse_stitch_analysis(response.analysis)
        logger.info(
            "meal_stitch_item_completed",
            item_number=item_number,
            category=parsed.category,
        )
        return MealStitchItem(
            item_number=item_number,
            analysis=response.analysis,
            parsed=parsed,
            status=response.status,
            timestamp=response.timestamp,
        )

    async def summarize(self, items: List[ParsedAnalysis]) -> str:
        """
        Summarize the parsed items of a meal.

        Raises:
            AnalysisServiceError: Non-2xx answer or transport failure
            AnalysisResponseError: Answer without a "synthesis" text
        """
        url = f"{self.base_url}/summarize"
        logger.info("meal_stitch_summary_started", items=len(items))
        with time_request("summarize"):
            data = await self._request(url, build_summary_request(items), "Failed to summarize meal analysis")
            try:
                response = SummaryResponse.model_validate(data)
            except ValidationError as e:
                raise AnalysisResponseError("Invalid summary response") from e
        return response.synthesis

    async def _request(self, url: str, body: Dict[str, Any], failure_message: str) -> Any:
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")
        try:
            response = await self._post(url, body)
        except httpx.TransportError as e:
            logger.error("meal_stitch_transport_error", url=url, error=str(e))
            raise transport_error(e, "Meal stitch API") from e
        except CircuitBreakerError as e:
            raise AnalysisNetworkError("Meal stitch API temporarily unavailable") from e

        if response.status_code >= 400:
            logger.warning("meal_stitch_request_failed", url=url, status=response.status_code)
            raise status_error(response, failure_message)
        try:
            return response.json()
        except ValueError as e:
            raise AnalysisResponseError(f"{failure_message}: response is not JSON") from e

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=httpx.TransportError,
        name="meal_stitch",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _post(self, url: str, body: Dict[str, Any]) -> httpx.Response:
        assert self._session is not None
        return await self._session.post(url, json=body)
