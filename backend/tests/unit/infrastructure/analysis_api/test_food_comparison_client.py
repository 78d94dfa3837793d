"""Unit tests for FoodComparisonClient."""

import base64
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from domain.analysis.errors import (
    AnalysisNetworkError,
    AnalysisResponseError,
    AnalysisServiceError,
    AnalysisTimeoutError,
    InvalidImageError,
)
from infrastructure.analysis_api.food_comparison_client import (
    NETWORK_ERROR_MESSAGE,
    SERVER_ERROR_MESSAGE,
    TIMEOUT_MESSAGE,
    FoodComparisonClient,
    image_to_base64,
)

RAW_IMAGE = "A" * 200


def make_response(status_code: int = 200, payload: Any = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = ""
    if payload is None:
        response.json = MagicMock(side_effect=ValueError("not json"))
    else:
        response.json = MagicMock(return_value=payload)
    return response


@pytest.fixture
def comparison_client() -> FoodComparisonClient:
    client = FoodComparisonClient(api_url="https://compare.test/api", timeout_s=5.0)
    client._session = AsyncMock()
    return client


class TestImageToBase64:
    """Test image normalization."""

    def test_data_uri(self) -> None:
        assert image_to_base64("data:image/jpeg;base64,QUJD") == "QUJD"

    def test_raw_base64(self) -> None:
        assert image_to_base64(RAW_IMAGE) == RAW_IMAGE

    def test_local_file(self, tmp_path: Path) -> None:
        """Test path and file:// URI are read from disk."""
        photo = tmp_path / "plate.jpg"
        photo.write_bytes(b"jpeg-bytes")
        expected = base64.b64encode(b"jpeg-bytes").decode("ascii")

        assert image_to_base64(str(photo)) == expected
        assert image_to_base64(f"file://{photo}") == expected

    def test_missing_file(self) -> None:
        with pytest.raises(InvalidImageError):
            image_to_base64("no-such-photo.jpg")

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(InvalidImageError):
            image_to_base64("ph://asset/123")


class TestCompare:
    """Test compare method and error mapping."""

    @pytest.mark.asyncio
    async def test_success(self, comparison_client: FoodComparisonClient) -> None:
        comparison_client._session.post = AsyncMock(
            return_value=make_response(payload={"success": True, "analysis": "Ate half the pasta"})
        )

        text = await comparison_client.compare(RAW_IMAGE, "data:image/jpeg;base64,QUJD")

        assert text == "Ate half the pasta"
        body = comparison_client._session.post.call_args.kwargs["json"]
        assert body == {"beforeImage": RAW_IMAGE, "afterImage": "QUJD"}

    @pytest.mark.asyncio
    async def test_success_false(self, comparison_client: FoodComparisonClient) -> None:
        """Test server-reported failure carries its message."""
        comparison_client._session.post = AsyncMock(
            return_value=make_response(payload={"success": False, "error": "No food detected"})
        )

        with pytest.raises(AnalysisResponseError, match="No food detected"):
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

    @pytest.mark.asyncio
    async def test_success_false_without_message(self, comparison_client: FoodComparisonClient) -> None:
        comparison_client._session.post = AsyncMock(
            return_value=make_response(payload={"success": False})
        )

        with pytest.raises(AnalysisResponseError, match="Server returned an error"):
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

    @pytest.mark.asyncio
    async def test_missing_analysis(self, comparison_client: FoodComparisonClient) -> None:
        comparison_client._session.post = AsyncMock(
            return_value=make_response(payload={"success": True})
        )

        with pytest.raises(AnalysisResponseError, match="Invalid response format from server"):
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

    @pytest.mark.asyncio
    async def test_server_error_500(self, comparison_client: FoodComparisonClient) -> None:
        comparison_client._session.post = AsyncMock(return_value=make_response(status_code=500))

        with pytest.raises(AnalysisServiceError) as exc_info:
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

        assert str(exc_info.value) == SERVER_ERROR_MESSAGE
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_server_error_with_json_message(self, comparison_client: FoodComparisonClient) -> None:
        """Test JSON error body wins over the generic message."""
        comparison_client._session.post = AsyncMock(
            return_value=make_response(status_code=500, payload={"error": "Vision model failed"})
        )

        with pytest.raises(AnalysisServiceError, match="Vision model failed"):
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

    @pytest.mark.asyncio
    async def test_timeout(self, comparison_client: FoodComparisonClient) -> None:
        comparison_client._post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(AnalysisTimeoutError) as exc_info:
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

        assert str(exc_info.value) == TIMEOUT_MESSAGE

    @pytest.mark.asyncio
    async def test_network_error(self, comparison_client: FoodComparisonClient) -> None:
        comparison_client._post = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(AnalysisNetworkError) as exc_info:
            await comparison_client.compare(RAW_IMAGE, RAW_IMAGE)

        assert str(exc_info.value) == NETWORK_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_missing_image(self, comparison_client: FoodComparisonClient) -> None:
        with pytest.raises(InvalidImageError):
            await comparison_client.compare("", RAW_IMAGE)
