"""Ports for the remote analysis endpoints.

The domain only needs the raw text (or JSON payloads) the endpoints produce;
parsing stays in the domain layer.
"""

from typing import List, Optional, Protocol

from domain.analysis.entities.medication import Medication
from domain.analysis.entities.parsed_analysis import MealStitchItem, ParsedAnalysis
from domain.analysis.streaming.alert_channel import ChannelOutput


class IAnalysisProvider(Protocol):
    """Single-image analysis endpoint (streamed pseudo-SSE body)."""

    async def analyze_image(
        self,
        image_base64: str,
        medications: Optional[List[Medication]] = None,
    ) -> ChannelOutput:
        """
        Send one photo and return the demultiplexed stream.

        Raises:
            AnalysisServiceError: On transport failures or non-2xx status
        """
        ...


class IMealStitchProvider(Protocol):
    """Per-item analysis and summarization endpoints of the meal-stitch flow."""

    async def analyze_item(self, image_base64: str, item_number: int) -> MealStitchItem:
        """
        Analyze the photo of item `item_number` (1-based).

        Raises:
            AnalysisServiceError: On transport failures or non-2xx status
        """
        ...

    async def summarize(self, items: List[ParsedAnalysis]) -> str:
        """Return the synthesis text for the whole meal."""
        ...


class IFoodComparisonProvider(Protocol):
    """Before/after comparison endpoint."""

    async def compare(self, before_image: str, after_image: str) -> str:
        """
        Return the comparison text.

        Raises:
            AnalysisServiceError: With a user-facing message
        """
        ...
