"""Unit tests for AnalysisResultFactory."""

from domain.analysis.entities.analysis_result import ParsedResponse
from domain.analysis.entities.health_category import HealthCategory
from domain.analysis.entities.medication import Medication
from domain.analysis.factories.analysis_result_factory import (
    AnalysisResultFactory,
    extract_bullet_items,
    to_image_data_uri,
)
from domain.analysis.parsing.response_parser import parse_analysis_text


ANALYSIS = """Dish Name: Veggie Bowl
Category: Clearly Healthy
Confidence: 88
• Quinoa
• Chickpeas
Calories: 520
Protein: 20g
Carbohydrates: 70g"""


class TestFromParsedResponse:
    """Test AnalysisResult construction."""

    def test_builds_display_fields(self) -> None:
        """Test dish name, items and description."""
        result = AnalysisResultFactory.from_parsed_response(parse_analysis_text(ANALYSIS), "abc")

        assert result.dish_name == "Veggie Bowl"
        assert result.items == ["Quinoa", "Chickpeas"]
        assert result.description.startswith("Category: Clearly Healthy")
        assert "Dish Name" not in result.description
        assert result.full_response == ANALYSIS

    def test_copies_nutrition(self) -> None:
        """Test category, confidence and nutrients."""
        result = AnalysisResultFactory.from_parsed_response(parse_analysis_text(ANALYSIS), "abc")

        assert result.category is HealthCategory.CLEARLY_HEALTHY
        assert result.confidence == 88.0
        assert result.calories == 520.0
        assert result.protein == 20.0
        assert result.macronutrients == "Protein: 20g\nCarbohydrates: 70g"

    def test_caloric_content_fallback(self) -> None:
        """Test "<n> calories" when no Caloric Content section."""
        result = AnalysisResultFactory.from_parsed_response(parse_analysis_text(ANALYSIS), "abc")
        assert result.caloric_content == "520 calories"

    def test_image_uri(self) -> None:
        """Test raw base64 is wrapped into a data URI."""
        result = AnalysisResultFactory.from_parsed_response(parse_analysis_text(ANALYSIS), "abc")
        assert result.image_uri == "data:image/jpeg;base64,abc"

    def test_medications_and_alerts(self) -> None:
        """Test medication names and alerts are carried."""
        parsed = parse_analysis_text(ANALYSIS)
        parsed.medication_alerts = ["Avoid grapefruit"]
        medication = Medication(id="1", name="Atorvastatin", dosage="10mg", frequency="daily")

        result = AnalysisResultFactory.from_parsed_response(parsed, "abc", [medication])

        assert result.medications == ["Atorvastatin"]
        assert result.medication_alerts == ["Avoid grapefruit"]

    def test_empty_sentinel(self) -> None:
        """Test the empty-body sentinel still gives a valid record."""
        result = AnalysisResultFactory.from_parsed_response(ParsedResponse.empty())

        assert result.category is HealthCategory.UNKNOWN
        assert result.confidence == 0.0
        assert result.items == []
        assert result.image_uri == ""
        assert result.medication_alerts is None

    def test_to_dict_uses_category_value(self) -> None:
        """Test serialization of the enum."""
        result = AnalysisResultFactory.from_parsed_response(parse_analysis_text(ANALYSIS), "abc")
        assert result.to_dict()["category"] == "Clearly Healthy"


class TestHelpers:
    """Test module helpers."""

    def test_data_uri_unchanged(self) -> None:
        assert to_image_data_uri("data:image/png;base64,xyz") == "data:image/png;base64,xyz"

    def test_bullet_items(self) -> None:
        assert extract_bullet_items("  • Rice\nno bullet\n•Beans") == ["Rice", "Beans"]
