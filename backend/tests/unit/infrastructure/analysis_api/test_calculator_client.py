"""Unit tests for CalculatorClient.

Tests focus on:
- Request envelope (image prefix stripping, medications)
- Demultiplexing of the pseudo-SSE body
- Error mapping (HTTP status, timeout, network)

These are UNIT tests with a mocked httpx session.
"""

import json
from typing import Any, List
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from domain.analysis.entities.medication import Medication
from domain.analysis.errors import (
    AnalysisNetworkError,
    AnalysisServiceError,
    AnalysisTimeoutError,
)
from infrastructure.analysis_api.calculator_client import (
    CalculatorClient,
    build_analysis_request,
    strip_base64_prefix,
)
from metrics.analysis import snapshot


def sse_body(chunks: List[Any]) -> str:
    lines = [f"data: {json.dumps({'type': t, 'content': c})}" for t, c in chunks]
    return "\n".join(lines + ["data: [DONE]", ""])


def make_response(status_code: int = 200, text: str = "", payload: Any = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if payload is None:
        response.json = MagicMock(side_effect=ValueError("not json"))
    else:
        response.json = MagicMock(return_value=payload)
    return response


@pytest.fixture
def calculator_client() -> CalculatorClient:
    """Client with mocked HTTP session (no context manager in tests)."""
    client = CalculatorClient(api_url="https://example.test/api/calculator", timeout_s=5.0)
    client._session = AsyncMock()
    return client


class TestBuildAnalysisRequest:
    """Test request envelope."""

    def test_envelope(self) -> None:
        """Test JSON request embedded in the user message."""
        medication = Medication(
            id="m1",
            name="Warfarin",
            dosage="5mg",
            frequency="daily",
            time_of_day=["morning"],
        )
        body = build_analysis_request("data:image/jpeg;base64,QUJD", [medication], message_id="abc")

        message = body["messages"][0]
        assert message["role"] == "user"
        assert message["id"] == "abc"

        content = json.loads(message["content"])
        assert content["type"] == "analysis_request"
        assert content["image"] == "QUJD"
        assert content["medications"] == [
            {
                "id": "m1",
                "name": "Warfarin",
                "dosage": "5mg",
                "frequency": "daily",
                "timeOfDay": ["morning"],
                "notes": "",
            }
        ]

    def test_generated_message_id(self) -> None:
        """Test an id is generated when not given."""
        body = build_analysis_request("QUJD")
        assert body["messages"][0]["id"]
        assert json.loads(body["messages"][0]["content"])["medications"] == []

    def test_strip_prefix(self) -> None:
        assert strip_base64_prefix("data:image/png;base64,xyz") == "xyz"
        assert strip_base64_prefix("xyz") == "xyz"


class TestAnalyzeImage:
    """Test analyze_image method."""

    @pytest.mark.asyncio
    async def test_success_splits_alerts(self, calculator_client: CalculatorClient) -> None:
        """Test analysis text and alerts are separated."""
        body = sse_body(
            [
                ("content", "Category: Mixed\n"),
                ("separator", "MEDICATION_ALERT_START"),
                ("medication_alert", "Vitamin K affects warfarin"),
                ("separator", "MEDICATION_ALERT_END"),
                ("content", "Calories: 450"),
            ]
        )
        calculator_client._session.post = AsyncMock(return_value=make_response(text=body))

        output = await calculator_client.analyze_image("QUJD")

        assert output.analysis == "Category: Mixed\nCalories: 450"
        assert output.medication_alerts == ["Vitamin K affects warfarin"]

        call = calculator_client._session.post.call_args
        assert call.args[0] == "https://example.test/api/calculator"
        assert "messages" in call.kwargs["json"]

        counters = snapshot()["counters"]
        assert any(
            c["name"] == "analysis_requests_total" and c["tags"]["status"] == "completed"
            for c in counters
        )
        assert any(
            c["name"] == "analysis_medication_alerts_total" and c["value"] == 1 for c in counters
        )

    @pytest.mark.asyncio
    async def test_empty_body(self, calculator_client: CalculatorClient) -> None:
        """Test empty body yields empty analysis and no alerts."""
        calculator_client._session.post = AsyncMock(return_value=make_response(text=""))

        output = await calculator_client.analyze_image("QUJD")

        assert output.analysis == ""
        assert output.medication_alerts is None

    @pytest.mark.asyncio
    async def test_http_error(self, calculator_client: CalculatorClient) -> None:
        """Test non-2xx status raises with status code and detail."""
        calculator_client._session.post = AsyncMock(
            return_value=make_response(status_code=502, text="upstream down")
        )

        with pytest.raises(AnalysisServiceError) as exc_info:
            await calculator_client.analyze_image("QUJD")

        assert exc_info.value.status_code == 502
        assert exc_info.value.detail == "upstream down"
        assert "502" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_mapped(self, calculator_client: CalculatorClient) -> None:
        """Test transport timeout becomes AnalysisTimeoutError."""
        calculator_client._post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(AnalysisTimeoutError):
            await calculator_client.analyze_image("QUJD")

    @pytest.mark.asyncio
    async def test_network_error_mapped(self, calculator_client: CalculatorClient) -> None:
        """Test connection failure becomes AnalysisNetworkError."""
        calculator_client._post = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(AnalysisNetworkError):
            await calculator_client.analyze_image("QUJD")

    @pytest.mark.asyncio
    async def test_requires_session(self) -> None:
        """Test use outside the context manager."""
        client = CalculatorClient(api_url="https://example.test")
        with pytest.raises(RuntimeError):
            await client.analyze_image("QUJD")
