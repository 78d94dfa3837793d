"""Nutrition analysis records.

`ParsedResponse` is what the response parser extracts from one raw analysis
text. `AnalysisResult` is the record handed to the UI and to the history
store; it adds identity, image and display fields on top of the same
nutrition facts.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from domain.analysis.entities.health_category import HealthCategory
from domain.analysis.entities.medication import MedicationInteraction
from domain.analysis.parsing.category import normalize_category

NO_ANALYSIS_TEXT = "No analysis available"
PARSE_FAILED_TEXT = "Failed to parse analysis. Please try again."


@dataclass
class NutritionFacts:
    """
    Optional nutrition values and free-text sections of one analysis.

    Numbers are grams for macros, kcal for calories and whatever unit the
    model used for micronutrients. A value is None when its line is missing
    or unparseable (NaN never reaches this record).
    """

    # Free-text sections
    dish_name: Optional[str] = None
    items_identified: Optional[str] = None
    caloric_content: Optional[str] = None
    macronutrients: Optional[str] = None
    processing_level: Optional[str] = None
    nutritional_profile: Optional[str] = None
    health_implications: Optional[str] = None

    # Macronutrients
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    fiber: Optional[float] = None

    # Vitamins
    vitamin_a: Optional[float] = None
    vitamin_c: Optional[float] = None
    vitamin_d: Optional[float] = None
    vitamin_e: Optional[float] = None
    vitamin_k: Optional[float] = None
    vitamin_b1: Optional[float] = None
    vitamin_b2: Optional[float] = None
    vitamin_b3: Optional[float] = None
    vitamin_b6: Optional[float] = None
    vitamin_b12: Optional[float] = None
    folate: Optional[float] = None

    # Minerals
    calcium: Optional[float] = None
    iron: Optional[float] = None
    magnesium: Optional[float] = None
    phosphorus: Optional[float] = None
    potassium: Optional[float] = None
    sodium: Optional[float] = None
    zinc: Optional[float] = None
    copper: Optional[float] = None
    manganese: Optional[float] = None
    selenium: Optional[float] = None

    def nutrition_dict(self) -> Dict[str, Any]:
        """Nutrition fields only, keyed by attribute name."""
        return {name: getattr(self, name) for name in NutritionFacts.__dataclass_fields__}


@dataclass
class ParsedResponse(NutritionFacts):
    """
    Output of the response parser for one analysis text.

    `category` is the raw label as written by the model; use
    `health_category` for the normalized value.
    """

    category: str = HealthCategory.UNKNOWN.value
    confidence: float = 0.0
    analysis: str = NO_ANALYSIS_TEXT
    medication_alerts: Optional[List[str]] = None

    @classmethod
    def empty(cls) -> "ParsedResponse":
        """Sentinel for an empty response body."""
        return cls()

    @classmethod
    def failed(cls) -> "ParsedResponse":
        """Sentinel for a parse that blew up unexpectedly."""
        return cls(analysis=PARSE_FAILED_TEXT)

    @property
    def health_category(self) -> HealthCategory:
        return normalize_category(self.category)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class AnalysisResult(NutritionFacts):
    """
    Analysis record consumed by the UI and the history store.

    Created fresh per API response. The only mutation allowed after
    construction is appending medication alerts while a stream is consumed.

    Example:
        >>> result = AnalysisResult(
        ...     category=HealthCategory.MIXED,
        ...     confidence=72.5,
        ...     calories=450.0,
        ... )
        >>> result.category.value
        'Mixed'
    """

    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    image_uri: str = ""
    items: List[str] = field(default_factory=list)
    description: str = ""
    category: HealthCategory = HealthCategory.UNKNOWN
    confidence: float = 0.0
    timestamp: int = field(default_factory=_now_ms)
    medications: Optional[List[str]] = None
    interactions: Optional[List[MedicationInteraction]] = None
    medication_alerts: Optional[List[str]] = None
    full_response: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data
