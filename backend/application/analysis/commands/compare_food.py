"""Compare food command and handler (before/after photos of a plate)."""

from dataclasses import dataclass
import logging

from domain.analysis.errors import AnalysisDomainError
from domain.analysis.ports.alert_sink import IAlertSink
from domain.analysis.ports.analysis_provider import IFoodComparisonProvider

logger = logging.getLogger(__name__)

COMPARISON_ERROR_TITLE = "Analysis Error"
COMPARISON_FALLBACK_MESSAGE = "Failed to analyze images. Please try again."
MISSING_IMAGES_TITLE = "Missing Images"
MISSING_IMAGES_MESSAGE = "Please upload both before and after images to analyze the difference."


@dataclass(frozen=True)
class CompareFoodCommand:
    before_image: str
    after_image: str


class CompareFoodCommandHandler:
    """Handler for CompareFoodCommand."""

    def __init__(self, provider: IFoodComparisonProvider, alert_sink: IAlertSink):
        self._provider = provider
        self._alert_sink = alert_sink

    async def handle(self, command: CompareFoodCommand) -> str:
        """
        Return the comparison text.

        The alert carries the client's message, which is already worded
        for the user.

        Raises:
            ValueError: A photo is missing
            InvalidImageError: A photo is unreadable
            AnalysisServiceError: Endpoint failure
        """
        if not command.before_image or not command.after_image:
            self._alert_sink.show_alert(MISSING_IMAGES_TITLE, MISSING_IMAGES_MESSAGE)
            raise ValueError("Both before and after images are required")

        try:
            return await self._provider.compare(command.before_image, command.after_image)
        except AnalysisDomainError as e:
            logger.error("Food comparison failed", extra={"error": str(e)})
            self._alert_sink.show_alert(COMPARISON_ERROR_TITLE, str(e) or COMPARISON_FALLBACK_MESSAGE)
            raise
