"""Parser for the section-labeled nutrition analysis text.

The analysis endpoint answers with free text produced by an LLM, e.g.::

    Dish Name: Chicken Caesar Salad
    Category: Mixed
    Confidence: 72.5
    Caloric Content: 450 kcal
    Items Identified:
    • Romaine lettuce
    • Grilled chicken
    Protein: 32g
    Vitamin B12: 0.6

Sections are extracted independently of each other, nutrient lines are
classified through the label vocabulary, and every field degrades to None on
its own. The parser is pure: the same text always gives the same record.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from domain.analysis.entities.analysis_result import NutritionFacts, ParsedResponse
from domain.analysis.parsing.macronutrients import build_macronutrient_summary
from domain.analysis.parsing.numeric_extractor import extract_numeric, first_number
from domain.analysis.parsing.section_extractor import extract_section
from domain.analysis.parsing.vocabulary import DEFAULT_VOCABULARY, LabelVocabulary

logger = logging.getLogger(__name__)

_NUTRITION_FIELDS = frozenset(NutritionFacts.__dataclass_fields__)


class ResponseParser:
    """
    Turns one analysis text into a ParsedResponse.

    Example:
        >>> parser = ResponseParser()
        >>> parsed = parser.parse("Category: Mixed\\nConfidence: 72.5\\nCalories: 450\\n")
        >>> (parsed.category, parsed.confidence, parsed.calories)
        ('Mixed', 72.5, 450.0)
    """

    def __init__(self, vocabulary: LabelVocabulary = DEFAULT_VOCABULARY) -> None:
        self.vocabulary = vocabulary

    def parse(self, content: Optional[str]) -> ParsedResponse:
        """
        Parse an analysis text.

        Never raises: an empty body gives the "No analysis available"
        sentinel, an unexpected failure the "Failed to parse" sentinel.
        """
        if not content or not content.strip():
            logger.warning("Empty content received from analysis service")
            return ParsedResponse.empty()

        try:
            return self._parse(content)
        except Exception:
            logger.exception(
                "Analysis parsing failed",
                extra={"content_length": len(content)},
            )
            return ParsedResponse.failed()

    def _parse(self, content: str) -> ParsedResponse:
        lines = content.split("\n")
        claimed = self.vocabulary.classify(lines)

        sections = self._extract_sections(content)
        numbers = self._extract_numbers(claimed)

        category = sections.pop("category", None) or "Unknown"
        confidence = first_number(sections.pop("confidence", None)) or 0.0

        if numbers.get("calories") is None:
            numbers["calories"] = first_number(sections.get("caloric_content"))

        if not sections.get("macronutrients"):
            sections["macronutrients"] = build_macronutrient_summary(
                protein=numbers.get("protein"),
                carbs=numbers.get("carbs"),
                fats=numbers.get("fats"),
                fiber=numbers.get("fiber"),
            )

        fields = {
            name: value
            for name, value in {**sections, **numbers}.items()
            if name in _NUTRITION_FIELDS
        }

        logger.debug(
            "Analysis parsed",
            extra={
                "content_length": len(content),
                "sections": sorted(k for k, v in sections.items() if v),
                "nutrients": sorted(k for k, v in numbers.items() if v is not None),
            },
        )

        return ParsedResponse(
            category=category,
            confidence=confidence,
            analysis=content.strip() or ParsedResponse.empty().analysis,
            **fields,
        )

    def _extract_sections(self, content: str) -> Dict[str, Optional[str]]:
        return {
            section.field: extract_section(
                content,
                section.label,
                multiline=section.multiline,
                vocabulary=self.vocabulary,
            )
            for section in self.vocabulary.sections
        }

    def _extract_numbers(self, claimed: Dict[str, List[str]]) -> Dict[str, Optional[float]]:
        numbers: Dict[str, Optional[float]] = {}
        for nutrient in self.vocabulary.nutrients:
            numbers[nutrient.field] = extract_numeric(claimed.get(nutrient.field, ()), nutrient.aliases)
        return numbers


_default_parser = ResponseParser()


def parse_analysis_text(content: Optional[str]) -> ParsedResponse:
    """Parse with the default vocabulary."""
    return _default_parser.parse(content)
