"""Per-item record of the meal-stitch flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(slots=True)
class ParsedAnalysis:
    """
    Fields extracted from one meal-stitch item analysis.

    Values stay as the model wrote them (category and confidence included):
    they are shown verbatim and forwarded to the summarization endpoint.
    """

    category: Optional[str] = None
    confidence: Optional[str] = None
    items_identified: Optional[str] = None
    caloric_content: Optional[str] = None
    macronutrients: Optional[str] = None
    processing_level: Optional[str] = None
    nutritional_profile: Optional[str] = None
    health_implications: Optional[str] = None
    portion_considerations: Optional[str] = None
    image_index: Optional[int] = None

    def to_summary_item(self) -> Dict[str, Any]:
        """Payload shape expected by the summarization endpoint."""
        return {
            "category": self.category,
            "itemsIdentified": self.items_identified,
            "caloricContent": self.caloric_content,
            "macronutrients": self.macronutrients,
            "processingLevel": self.processing_level,
            "nutritionalProfile": self.nutritional_profile,
            "healthImplications": self.health_implications,
            "portionConsiderations": self.portion_considerations,
        }


@dataclass(frozen=True)
class MealStitchItem:
    """One analyzed photo of a multi-photo meal."""

    item_number: int
    analysis: str
    parsed: ParsedAnalysis
    status: Optional[str] = None
    timestamp: Optional[str] = None
