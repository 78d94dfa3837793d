"""Unit tests for CompareFoodCommand and handler."""

import pytest
from unittest.mock import AsyncMock

from application.analysis.commands.compare_food import (
    COMPARISON_ERROR_TITLE,
    MISSING_IMAGES_TITLE,
    CompareFoodCommand,
    CompareFoodCommandHandler,
)
from domain.analysis.errors import AnalysisTimeoutError
from infrastructure.alerts.sinks import RecordingAlertSink


@pytest.fixture
def mock_provider():
    provider = AsyncMock()
    provider.compare.return_value = "About 60% of the plate was eaten"
    return provider


@pytest.fixture
def alert_sink():
    return RecordingAlertSink()


@pytest.fixture
def handler(mock_provider, alert_sink):
    return CompareFoodCommandHandler(mock_provider, alert_sink)


class TestCompareFoodCommandHandler:
    """Test CompareFoodCommandHandler."""

    @pytest.mark.asyncio
    async def test_compare_success(self, handler, mock_provider, alert_sink):
        text = await handler.handle(CompareFoodCommand(before_image="b", after_image="a"))

        assert text == "About 60% of the plate was eaten"
        mock_provider.compare.assert_called_once_with("b", "a")
        assert alert_sink.alerts == []

    @pytest.mark.asyncio
    async def test_missing_image(self, handler, mock_provider, alert_sink):
        with pytest.raises(ValueError):
            await handler.handle(CompareFoodCommand(before_image="b", after_image=""))

        assert alert_sink.titles() == [MISSING_IMAGES_TITLE]
        mock_provider.compare.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_alert_uses_client_message(self, handler, mock_provider, alert_sink):
        message = "Request timeout: Please check your internet connection"
        mock_provider.compare.side_effect = AnalysisTimeoutError(message)

        with pytest.raises(AnalysisTimeoutError):
            await handler.handle(CompareFoodCommand(before_image="b", after_image="a"))

        assert alert_sink.titles() == [COMPARISON_ERROR_TITLE]
        assert alert_sink.messages() == [message]
