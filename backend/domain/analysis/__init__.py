"""Analysis domain - parsing of LLM nutrition analyses and related records.

The inference endpoints answer with section-labeled free text
("Category: ...", "Macronutrients: ...", nutrient lines). This package turns
that text into typed records and keeps the label vocabulary in one place.
"""

from domain.analysis.entities.analysis_result import AnalysisResult, ParsedResponse
from domain.analysis.entities.health_category import HealthCategory
from domain.analysis.entities.medication import Medication, MedicationInteraction
from domain.analysis.entities.parsed_analysis import MealStitchItem, ParsedAnalysis
from domain.analysis.parsing.category import normalize_category
from domain.analysis.parsing.response_parser import ResponseParser, parse_analysis_text
from domain.analysis.parsing.stitch_parser import parse_stitch_analysis
from domain.analysis.streaming.alert_channel import MedicationAlertChannel

__all__ = [
    "AnalysisResult",
    "HealthCategory",
    "ParsedResponse",
    "ParsedAnalysis",
    "MealStitchItem",
    "Medication",
    "MedicationInteraction",
    "normalize_category",
    "ResponseParser",
    "parse_analysis_text",
    "parse_stitch_analysis",
    "MedicationAlertChannel",
]
