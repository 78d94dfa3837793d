"""Unit tests for MealStitchClient."""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from domain.analysis.entities.parsed_analysis import ParsedAnalysis
from domain.analysis.errors import AnalysisResponseError, AnalysisServiceError
from infrastructure.analysis_api.meal_stitch_client import MealStitchClient, build_summary_request


def make_response(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if payload is None:
        response.json = MagicMock(side_effect=ValueError("not json"))
    else:
        response.json = MagicMock(return_value=payload)
    return response


@pytest.fixture
def stitch_client() -> MealStitchClient:
    client = MealStitchClient(base_url="https://stitch.test/api/", timeout_s=5.0)
    client._session = AsyncMock()
    return client


class TestAnalyzeItem:
    """Test analyze_item method."""

    @pytest.mark.asyncio
    async def test_success(self, stitch_client: MealStitchClient) -> None:
        """Test item endpoint call and parsing."""
        stitch_client._session.post = AsyncMock(
            return_value=make_response(
                payload={
                    "status": "success",
                    "analysis": "Category: Mixed\nConfidence: 70\nImageIndex: 3",
                    "timestamp": "2024-05-01T12:00:00Z",
                }
            )
        )

        item = await stitch_client.analyze_item("QUJD", 3)

        assert item.item_number == 3
        assert item.status == "success"
        assert item.parsed.category == "Mixed"
        assert item.parsed.confidence == "70"
        assert item.parsed.image_index == 3

        call = stitch_client._session.post.call_args
        assert call.args[0] == "https://stitch.test/api/llm-3"
        message = call.kwargs["json"]["messages"][0]
        assert "id" not in message
        content = json.loads(message["content"])
        assert content == {"type": "analysis_request", "image": "data:image/jpeg;base64,QUJD"}

    @pytest.mark.asyncio
    async def test_http_error(self, stitch_client: MealStitchClient) -> None:
        """Test non-2xx status."""
        stitch_client._session.post = AsyncMock(
            return_value=make_response(status_code=500, payload={"error": "model overloaded"})
        )

        with pytest.raises(AnalysisServiceError) as exc_info:
            await stitch_client.analyze_item("QUJD", 1)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "model overloaded"
        assert str(exc_info.value).startswith("Failed to analyze item 1")

    @pytest.mark.asyncio
    async def test_missing_analysis(self, stitch_client: MealStitchClient) -> None:
        """Test answer without analysis text."""
        stitch_client._session.post = AsyncMock(return_value=make_response(payload={"status": "ok"}))

        with pytest.raises(AnalysisResponseError):
            await stitch_client.analyze_item("QUJD", 1)

    @pytest.mark.asyncio
    async def test_invalid_item_number(self, stitch_client: MealStitchClient) -> None:
        """Test item numbers start at 1."""
        with pytest.raises(ValueError):
            await stitch_client.analyze_item("QUJD", 0)


class TestSummarize:
    """Test summarize method."""

    @pytest.mark.asyncio
    async def test_success(self, stitch_client: MealStitchClient) -> None:
        """Test synthesis is returned and items are JSON-encoded."""
        stitch_client._session.post = AsyncMock(
            return_value=make_response(payload={"status": "success", "synthesis": "Balanced meal"})
        )
        items = [ParsedAnalysis(category="Mixed"), ParsedAnalysis(category="Borderline")]

        synthesis = await stitch_client.summarize(items)

        assert synthesis == "Balanced meal"
        call = stitch_client._session.post.call_args
        assert call.args[0] == "https://stitch.test/api/summarize"
        encoded = call.kwargs["json"]["responses"]["items"]
        assert [i["category"] for i in json.loads(encoded)] == ["Mixed", "Borderline"]

    @pytest.mark.asyncio
    async def test_non_json_answer(self, stitch_client: MealStitchClient) -> None:
        """Test HTML error page with 200 status."""
        stitch_client._session.post = AsyncMock(return_value=make_response(text="<html>"))

        with pytest.raises(AnalysisResponseError):
            await stitch_client.summarize([ParsedAnalysis()])

    def test_build_summary_request(self) -> None:
        body = build_summary_request([ParsedAnalysis(items_identified="Rice")])
        assert isinstance(body["responses"]["items"], str)
        assert json.loads(body["responses"]["items"])[0]["itemsIdentified"] == "Rice"
