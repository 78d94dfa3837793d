"""Analyze image command and handler.

Single-photo flow:
1. Send the photo (and medications) to the analysis endpoint
2. Parse the analysis text, attach the streamed medication alerts
3. Build the AnalysisResult and, for signed-in users, save it to history
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
import logging

from domain.analysis.entities.analysis_result import (
    NO_ANALYSIS_TEXT,
    PARSE_FAILED_TEXT,
    AnalysisResult,
    ParsedResponse,
)
from domain.analysis.entities.medication import Medication
from domain.analysis.errors import AnalysisDomainError, HistoryError
from domain.analysis.factories.analysis_result_factory import AnalysisResultFactory
from domain.analysis.parsing.response_parser import ResponseParser
from domain.analysis.ports.alert_sink import IAlertSink
from domain.analysis.ports.analysis_provider import IAnalysisProvider
from metrics.analysis import record_parse_outcome

from ..history_service import AnalysisHistoryService

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_TITLE = "Error"
ANALYSIS_FAILED_MESSAGE = "Failed to analyze image. Please try again."


@dataclass(frozen=True)
class AnalyzeImageCommand:
    """
    Command: Analyze one meal photo.

    Attributes:
        image_base64: JPEG as raw base64 or data URI
        medications: Medications to check for interactions
        user_id: Signed-in user; when set the result is saved to history
    """

    image_base64: str
    medications: Tuple[Medication, ...] = field(default_factory=tuple)
    user_id: Optional[str] = None


def _parse_outcome(parsed: ParsedResponse) -> str:
    if parsed.analysis == NO_ANALYSIS_TEXT:
        return "empty"
    if parsed.analysis == PARSE_FAILED_TEXT:
        return "failed"
    return "parsed"


class AnalyzeImageCommandHandler:
    """Handler for AnalyzeImageCommand."""

    def __init__(
        self,
        provider: IAnalysisProvider,
        alert_sink: IAlertSink,
        parser: Optional[ResponseParser] = None,
        history: Optional[AnalysisHistoryService] = None,
    ):
        """
        Initialize handler.

        Args:
            provider: Analysis endpoint port
            alert_sink: Destination of user-facing failure alerts
            parser: Response parser (default vocabulary when omitted)
            history: History store; results are not saved when omitted
        """
        self._provider = provider
        self._alert_sink = alert_sink
        self._parser = parser or ResponseParser()
        self._history = history

    async def handle(self, command: AnalyzeImageCommand) -> AnalysisResult:
        """
        Execute image analysis.

        A failed history save is logged and does not fail the analysis.

        Raises:
            AnalysisServiceError: Endpoint failure (after the alert is shown)
        """
        logger.info(
            "Analyzing image",
            extra={
                "medications": len(command.medications),
                "user_id": command.user_id,
            },
        )

        try:
            output = await self._provider.analyze_image(
                command.image_base64, list(command.medications)
            )
        except AnalysisDomainError as e:
            logger.error("Image analysis failed", extra={"error": str(e)})
            self._alert_sink.show_alert(ANALYSIS_FAILED_TITLE, ANALYSIS_FAILED_MESSAGE)
            raise

        parsed = self._parser.parse(output.analysis)
        parsed.medication_alerts = output.medication_alerts
        record_parse_outcome(_parse_outcome(parsed))

        result = AnalysisResultFactory.from_parsed_response(
            parsed,
            image_base64=command.image_base64,
            medications=command.medications,
        )

        logger.info(
            "Image analyzed",
            extra={
                "analysis_id": result.id,
                "category": result.category.value,
                "confidence": result.confidence,
                "medication_alerts": len(result.medication_alerts or ()),
            },
        )

        if command.user_id and self._history is not None:
            try:
                await self._history.add_analysis(result, command.user_id)
            except HistoryError as e:
                logger.warning(
                    "Analysis not saved to history",
                    extra={"analysis_id": result.id, "error": str(e)},
                )

        return result
