"""Label vocabulary of the analysis text format.

The inference endpoints are prompted to answer with lines such as
"Category: Mixed" or "Vitamin B12: 2.4". Every label the parsers know about
lives in this table, so a change in the upstream prompt is a change here.

Line classification follows table order: sections first, then nutrients.
A section claims any line carrying its marker; a nutrient claims only
"Label: value" lines whose label names one of its aliases. So
"Health Implications: high in sodium" never feeds `sodium`, prose such as
"Rich in protein and iron" feeds nothing, and "Vitamin B12: 2" never feeds
`vitamin_b1`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from domain.analysis.parsing.numeric_extractor import split_label

_HEADER_RE = re.compile(r"^[A-Z][a-z]+:")


@dataclass(frozen=True)
class SectionLabel:
    """Label introducing a free-text section."""

    field: str
    label: str
    multiline: bool = True

    @property
    def marker(self) -> str:
        return f"{self.label.lower()}:"


@dataclass(frozen=True)
class NutrientLabel:
    """Single-line numeric field recognized by any of its aliases."""

    field: str
    aliases: Tuple[str, ...]

    def matches(self, label: str) -> bool:
        """True if a lowercased label names one of the aliases."""
        return any(alias in label for alias in self.aliases)


SECTION_LABELS: Tuple[SectionLabel, ...] = (
    SectionLabel("category", "Category", multiline=False),
    SectionLabel("confidence", "Confidence", multiline=False),
    SectionLabel("dish_name", "Dish Name", multiline=False),
    SectionLabel("caloric_content", "Caloric Content", multiline=False),
    SectionLabel("items_identified", "Items Identified"),
    SectionLabel("macronutrients", "Macronutrients"),
    SectionLabel("processing_level", "Processing Level"),
    SectionLabel("nutritional_profile", "Nutritional Profile"),
    SectionLabel("health_implications", "Health Implications"),
    SectionLabel("portion_considerations", "Portion Considerations"),
    SectionLabel("image_index", "ImageIndex", multiline=False),
)

NUTRIENT_LABELS: Tuple[NutrientLabel, ...] = (
    NutrientLabel("calories", ("calories",)),
    NutrientLabel("protein", ("protein",)),
    NutrientLabel("carbs", ("carbohydrate", "carbs")),
    NutrientLabel("fats", ("fat",)),
    NutrientLabel("fiber", ("fiber", "fibre")),
    NutrientLabel("vitamin_a", ("vitamin a",)),
    NutrientLabel("vitamin_c", ("vitamin c",)),
    NutrientLabel("vitamin_d", ("vitamin d",)),
    NutrientLabel("vitamin_e", ("vitamin e",)),
    NutrientLabel("vitamin_k", ("vitamin k",)),
    NutrientLabel("vitamin_b12", ("vitamin b12", "cobalamin")),
    NutrientLabel("vitamin_b1", ("vitamin b1", "thiamine")),
    NutrientLabel("vitamin_b2", ("vitamin b2", "riboflavin")),
    NutrientLabel("vitamin_b3", ("vitamin b3", "niacin")),
    NutrientLabel("vitamin_b6", ("vitamin b6", "pyridoxine")),
    NutrientLabel("folate", ("folate", "folic acid")),
    NutrientLabel("calcium", ("calcium",)),
    NutrientLabel("iron", ("iron",)),
    NutrientLabel("magnesium", ("magnesium",)),
    NutrientLabel("phosphorus", ("phosphorus",)),
    NutrientLabel("potassium", ("potassium",)),
    NutrientLabel("sodium", ("sodium",)),
    NutrientLabel("zinc", ("zinc",)),
    NutrientLabel("copper", ("copper",)),
    NutrientLabel("manganese", ("manganese",)),
    NutrientLabel("selenium", ("selenium",)),
)


class LabelVocabulary:
    """
    Ordered label table shared by the response parsers.

    Example:
        >>> vocab = LabelVocabulary()
        >>> vocab.section("macronutrients").label
        'Macronutrients'
        >>> vocab.classify(["Fats: 12g", "Vitamin B12: 2"])["vitamin_b12"]
        ['Vitamin B12: 2']
    """

    def __init__(
        self,
        sections: Iterable[SectionLabel] = SECTION_LABELS,
        nutrients: Iterable[NutrientLabel] = NUTRIENT_LABELS,
    ) -> None:
        self.sections: Tuple[SectionLabel, ...] = tuple(sections)
        self.nutrients: Tuple[NutrientLabel, ...] = tuple(nutrients)
        self._sections_by_field: Dict[str, SectionLabel] = {
            s.field: s for s in self.sections
        }

    def section(self, field: str) -> SectionLabel:
        return self._sections_by_field[field]

    def is_section_header(self, line: str) -> bool:
        """True if a trimmed line opens a new section."""
        if _HEADER_RE.match(line):
            return True
        lowered = line.lower()
        return any(lowered.startswith(s.marker) for s in self.sections)

    def claim(self, line: str) -> Optional[str]:
        """Field claiming a line, or None if no rule matches."""
        lowered = line.strip().lower()
        if not lowered:
            return None
        for section in self.sections:
            if section.marker in lowered:
                return section.field
        parts = split_label(lowered)
        if parts is None:
            return None
        for nutrient in self.nutrients:
            if nutrient.matches(parts[0]):
                return nutrient.field
        return None

    def classify(self, lines: Iterable[str]) -> Dict[str, List[str]]:
        """Group trimmed lines by the field that claims them, in text order."""
        claimed: Dict[str, List[str]] = {}
        for line in lines:
            field = self.claim(line)
            if field is not None:
                claimed.setdefault(field, []).append(line.strip())
        return claimed


DEFAULT_VOCABULARY = LabelVocabulary()
