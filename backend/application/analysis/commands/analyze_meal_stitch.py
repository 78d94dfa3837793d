"""Analyze meal stitch command and handler.

A meal photographed in several shots: every available photo is analyzed
concurrently by the per-item endpoint.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from domain.analysis.entities.parsed_analysis import MealStitchItem
from domain.analysis.errors import AnalysisDomainError
from domain.analysis.ports.alert_sink import IAlertSink
from domain.analysis.ports.analysis_provider import IMealStitchProvider

logger = logging.getLogger(__name__)

ANALYSIS_ERROR_TITLE = "Analysis Error"
MEAL_FAILED_MESSAGE = "Failed to analyze the complete meal. Please try again."


def item_failed_message(item_number: int) -> str:
    return f"Failed to analyze item {item_number}. Please try again."


@dataclass(frozen=True)
class AnalyzeMealStitchCommand:
    """
    Command: Analyze the photos of a multi-item meal.

    Attributes:
        images: One slot per item; None for a slot without a photo
        item_count: Number of slots to consider (defaults to len(images))
    """

    images: Tuple[Optional[str], ...]
    item_count: Optional[int] = None


class AnalyzeMealStitchCommandHandler:
    """Handler for AnalyzeMealStitchCommand."""

    def __init__(self, provider: IMealStitchProvider, alert_sink: IAlertSink):
        self._provider = provider
        self._alert_sink = alert_sink

    async def handle(self, command: AnalyzeMealStitchCommand) -> List[MealStitchItem]:
        """
        Analyze every filled slot.

        Items are numbered by slot position starting at 1, so an empty slot
        leaves a gap in the numbering. Results come back in slot order.

        Raises:
            AnalysisServiceError: First item failure, after both the item
                alert and the meal alert are shown
        """
        count = command.item_count if command.item_count is not None else len(command.images)
        slots = [
            (index + 1, image)
            for index, image in enumerate(command.images[:count])
            if image
        ]

        logger.info(
            "Analyzing meal stitch",
            extra={"slots": count, "images": len(slots)},
        )

        try:
            items = await asyncio.gather(
                *(self._analyze_item(image, number) for number, image in slots)
            )
        except AnalysisDomainError:
            self._alert_sink.show_alert(ANALYSIS_ERROR_TITLE, MEAL_FAILED_MESSAGE)
            raise

        return list(items)

    async def _analyze_item(self, image: str, item_number: int) -> MealStitchItem:
        try:
            return await self._provider.analyze_item(image, item_number)
        except AnalysisDomainError as e:
            logger.error(
                "Meal stitch item failed",
                extra={"item_number": item_number, "error": str(e)},
            )
            self._alert_sink.show_alert(ANALYSIS_ERROR_TITLE, item_failed_message(item_number))
            raise
