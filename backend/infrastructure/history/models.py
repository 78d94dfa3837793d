"""Row model of the analysis history endpoint (snake_case columns)."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from domain.analysis.entities.analysis_result import AnalysisResult, NutritionFacts
from domain.analysis.entities.health_category import HealthCategory
from domain.analysis.parsing.category import normalize_category

# Stored rounded to whole grams/kcal; missing values read back as 0.
ROUNDED_FIELDS = ("calories", "protein", "carbs", "fats", "fiber")

_NUTRITION_FIELDS = tuple(NutritionFacts.__dataclass_fields__)


def round_half_up(value: Optional[float]) -> float:
    """
    Round to the nearest integer, halves away from zero for positives.

    Example:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(None)
        0.0
    """
    return float(math.floor((value or 0) + 0.5))


class HistoryRow(BaseModel):
    """
    One row of `/api/analysis-history`.

    Nutrition columns share their names with NutritionFacts attributes.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: Optional[str] = None
    image_uri: Optional[str] = None
    category: Optional[str] = None
    confidence: Optional[float] = None
    description: Optional[str] = None
    medication_alerts: Optional[List[str]] = None
    created_at: Optional[datetime] = None

    dish_name: Optional[str] = None
    items_identified: Optional[str] = None
    caloric_content: Optional[str] = None
    macronutrients: Optional[str] = None
    processing_level: Optional[str] = None
    nutritional_profile: Optional[str] = None
    health_implications: Optional[str] = None

    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    fiber: Optional[float] = None
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

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v: Any) -> Any:
        """Database ids come back as integers."""
        if isinstance(v, int):
            return str(v)
        return v

    @classmethod
    def from_result(cls, user_id: str, result: AnalysisResult) -> HistoryRow:
        nutrition = result.nutrition_dict()
        return cls(
            id=result.id,
            user_id=user_id,
            image_uri=result.image_uri,
            category=result.category.value,
            confidence=result.confidence,
            description=result.description,
            medication_alerts=result.medication_alerts,
            **nutrition,
        )

    def to_wire(self) -> Dict[str, Any]:
        """POST body; `created_at` is set by the server."""
        return self.model_dump(exclude={"created_at"}, mode="json")

    def to_result(self) -> AnalysisResult:
        nutrition = {name: getattr(self, name) for name in _NUTRITION_FIELDS}
        for name in ROUNDED_FIELDS:
            nutrition[name] = round_half_up(nutrition[name])

        extra: Dict[str, Any] = {}
        if self.created_at is not None:
            extra["timestamp"] = int(self.created_at.timestamp() * 1000)

        return AnalysisResult(
            id=self.id,
            image_uri=self.image_uri or "",
            description=self.description or "",
            category=_to_category(self.category),
            confidence=self.confidence or 0.0,
            medication_alerts=self.medication_alerts,
            **nutrition,
            **extra,
        )


def _to_category(raw: Optional[str]) -> HealthCategory:
    try:
        return HealthCategory(raw)
    except ValueError:
        return normalize_category(raw)
