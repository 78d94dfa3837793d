"""Summarize meal command and handler."""

from dataclasses import dataclass
from typing import Tuple
import logging

from domain.analysis.entities.parsed_analysis import MealStitchItem
from domain.analysis.errors import AnalysisDomainError
from domain.analysis.ports.alert_sink import IAlertSink
from domain.analysis.ports.analysis_provider import IMealStitchProvider

logger = logging.getLogger(__name__)

SUMMARY_ERROR_TITLE = "Summary Error"
SUMMARY_FAILED_MESSAGE = "Failed to summarize the meal analysis. Please try again."


@dataclass(frozen=True)
class SummarizeMealCommand:
    """Command: Synthesize the analyzed items of a meal."""

    items: Tuple[MealStitchItem, ...]


class SummarizeMealCommandHandler:
    """Handler for SummarizeMealCommand."""

    def __init__(self, provider: IMealStitchProvider, alert_sink: IAlertSink):
        self._provider = provider
        self._alert_sink = alert_sink

    async def handle(self, command: SummarizeMealCommand) -> str:
        """
        Return the synthesis text.

        Raises:
            ValueError: No items to summarize
            AnalysisServiceError: Endpoint failure (after the alert is shown)
        """
        if not command.items:
            raise ValueError("Cannot summarize a meal with no analyzed items")

        logger.info("Summarizing meal", extra={"items": len(command.items)})
        try:
            return await self._provider.summarize([item.parsed for item in command.items])
        except AnalysisDomainError as e:
            logger.error("Meal summary failed", extra={"error": str(e)})
            self._alert_sink.show_alert(SUMMARY_ERROR_TITLE, SUMMARY_FAILED_MESSAGE)
            raise
