"""Parser for meal-stitch item analyses (non-streaming endpoint)."""

from __future__ import annotations

from typing import Optional

from domain.analysis.entities.parsed_analysis import ParsedAnalysis
from domain.analysis.parsing.numeric_extractor import parse_number
from domain.analysis.parsing.section_extractor import extract_section
from domain.analysis.parsing.vocabulary import DEFAULT_VOCABULARY, LabelVocabulary

_STITCH_TEXT_FIELDS = (
    "category",
    "confidence",
    "items_identified",
    "caloric_content",
    "macronutrients",
    "processing_level",
    "nutritional_profile",
    "health_implications",
    "portion_considerations",
)


def parse_stitch_analysis(
    analysis: Optional[str],
    vocabulary: LabelVocabulary = DEFAULT_VOCABULARY,
) -> ParsedAnalysis:
    """
    Extract the meal-stitch fields from one item analysis.

    Same section rules as the main parser; values are kept as text except
    `image_index`.

    Example:
        >>> parsed = parse_stitch_analysis("Category: Borderline\\nImageIndex: 2")
        >>> (parsed.category, parsed.image_index)
        ('Borderline', 2)
    """
    if not analysis:
        return ParsedAnalysis()

    values = {}
    for field in _STITCH_TEXT_FIELDS:
        section = vocabulary.section(field)
        values[field] = extract_section(
            analysis,
            section.label,
            multiline=section.multiline,
            vocabulary=vocabulary,
        )

    index_label = vocabulary.section("image_index")
    raw_index = extract_section(analysis, index_label.label, multiline=False, vocabulary=vocabulary)
    index_value = parse_number(raw_index)
    image_index = int(index_value) if index_value is not None else None

    return ParsedAnalysis(image_index=image_index, **values)
