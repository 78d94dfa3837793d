"""Calculator API client - implements IAnalysisProvider port.

Sends one meal photo (plus the user's medications) to the analysis
endpoint and demultiplexes the pseudo-SSE answer into analysis text and
medication alerts. Parsing of the text is left to the domain layer.

Key Features:
- Chat-style request envelope with the JSON request embedded as content
- Circuit breaker (5 transport failures → 60s open)
- Retry on transport errors (3 attempts, exponential backoff)
- Body fully buffered before demultiplexing
"""
# mypy: warn-unused-ignores=False

import uuid
from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog
from circuitbreaker import CircuitBreakerError, circuit
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.analysis.entities.medication import Medication
from domain.analysis.errors import AnalysisNetworkError
from domain.analysis.streaming.alert_channel import ChannelOutput, MedicationAlertChannel
from infrastructure.analysis_api.errors import status_error, transport_error
from infrastructure.analysis_api.models import ChatRequest
from infrastructure.config import get_analysis_api_url, get_http_timeout_s
from metrics.analysis import record_medication_alerts, time_request

logger = structlog.get_logger(__name__)

ENDPOINT = "analysis"
ANALYSIS_REQUEST_TYPE = "analysis_request"


def strip_base64_prefix(image: str) -> str:
    """Drop a "data:image/...;base64," header, keeping the payload only."""
    if "base64," in image:
        return image.split("base64,", 1)[1]
    return image


def build_analysis_request(
    image_base64: str,
    medications: Optional[Sequence[Medication]] = None,
    message_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Request body for the calculator endpoint.

    Example:
        >>> body = build_analysis_request("abc", message_id="m1")
        >>> body["messages"][0]["id"]
        'm1'
    """
    payload = {
        "type": ANALYSIS_REQUEST_TYPE,
        "image": strip_base64_prefix(image_base64),
        "medications": [m.to_request_payload() for m in medications or ()],
    }
    return ChatRequest.for_payload(payload, message_id or uuid.uuid4().hex[:13]).to_wire()


class CalculatorClient:
    """
    Analysis endpoint client implementing IAnalysisProvider port.

    Example:
        >>> async with CalculatorClient() as client:
        ...     output = await client.analyze_image(image_base64)
        ...     print(output.medication_alerts)
    """

    def __init__(self, api_url: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        self.api_url = api_url or get_analysis_api_url()
        self.timeout_s = timeout_s if timeout_s is not None else get_http_timeout_s()
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "CalculatorClient":
        self._session = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s))
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.aclose()

    async def analyze_image(
        self,
        image_base64: str,
        medications: Optional[List[Medication]] = None,
    ) -> ChannelOutput:
        """
        Analyze one photo.

        Implements IAnalysisProvider.analyze_image() port.

        Args:
            image_base64: JPEG as raw base64 or data URI
            medications: Medications to check for interactions

        Returns:
            ChannelOutput with the analysis text and the medication alerts

        Raises:
            AnalysisTimeoutError: Request timed out (after retries)
            AnalysisNetworkError: Endpoint unreachable (after retries)
            AnalysisServiceError: Non-2xx answer
        """
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")

        body = build_analysis_request(image_base64, medications)
        logger.info(
            "analysis_request_started",
            url=self.api_url,
            medications=len(medications or ()),
        )

        with time_request(ENDPOINT):
            try:
                text = await self._post(body)
            except httpx.TransportError as e:
                logger.error("analysis_request_transport_error", error=str(e))
                raise transport_error(e, "Analysis API") from e
            except CircuitBreakerError as e:
                logger.error("analysis_circuit_open", error=str(e))
                raise AnalysisNetworkError("Analysis API temporarily unavailable") from e

        channel = MedicationAlertChannel()
        channel.feed_body(text)
        output = channel.output()

        alerts = len(output.medication_alerts or ())
        record_medication_alerts(alerts)
        logger.info(
            "analysis_request_completed",
            body_length=len(text),
            analysis_length=len(output.analysis),
            medication_alerts=alerts,
        )
        return output

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=httpx.TransportError,
        name="analysis_calculator",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _post(self, body: Dict[str, Any]) -> str:
        assert self._session is not None
        response = await self._session.post(self.api_url, json=body)
        if response.status_code >= 400:
            logger.warning("analysis_request_failed", status=response.status_code)
            raise status_error(response, f"API request failed with status {response.status_code}")
        return str(response.text)
