"""Factory for AnalysisResult records.

Builds the UI-facing record from a ParsedResponse: display fields (dish
name, bullet items, description) are derived from the raw analysis text,
nutrition values are copied from the parser output.
"""

import re
from typing import List, Optional, Sequence

from domain.analysis.entities.analysis_result import AnalysisResult, ParsedResponse
from domain.analysis.entities.medication import Medication
from domain.analysis.parsing.macronutrients import format_amount

IMAGE_DATA_URI_PREFIX = "data:image/jpeg;base64,"
BULLET = "•"

_DISH_NAME_RE = re.compile(r"Dish Name:[ \t]*(.+)")
_DISH_NAME_LINE_RE = re.compile(r"Dish Name:[ \t]*.+\n?")


def to_image_data_uri(image_base64: str) -> str:
    """Prefix raw base64 JPEG data; data URIs are returned unchanged."""
    if image_base64.startswith("data:"):
        return image_base64
    return f"{IMAGE_DATA_URI_PREFIX}{image_base64}"


def extract_bullet_items(text: str) -> List[str]:
    """Lines starting with "•", without the bullet."""
    return [
        line.strip().replace(BULLET, "", 1).strip()
        for line in text.split("\n")
        if line.strip().startswith(BULLET)
    ]


class AnalysisResultFactory:
    """Factory for creating AnalysisResult records."""

    @staticmethod
    def from_parsed_response(
        parsed: ParsedResponse,
        image_base64: str = "",
        medications: Optional[Sequence[Medication]] = None,
        full_response: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Create an AnalysisResult from parser output.

        Args:
            parsed: Output of ResponseParser.parse()
            image_base64: Photo sent for analysis (raw base64 or data URI)
            medications: Medications sent along with the request
            full_response: Raw analysis text; defaults to parsed.analysis

        Returns:
            New AnalysisResult with a fresh id and timestamp

        Example:
            >>> parsed = ParsedResponse(
            ...     category="Mixed", confidence=72.5, calories=450.0,
            ...     analysis="Dish Name: Caesar Salad\\n• Lettuce",
            ... )
            >>> result = AnalysisResultFactory.from_parsed_response(parsed, "abc")
            >>> (result.dish_name, result.items, result.caloric_content)
            ('Caesar Salad', ['Lettuce'], '450 calories')
        """
        text = full_response if full_response is not None else parsed.analysis

        dish_name = parsed.dish_name
        if dish_name is None:
            match = _DISH_NAME_RE.search(text)
            dish_name = match.group(1).strip() if match else None

        caloric_content = parsed.caloric_content
        if caloric_content is None and parsed.calories:
            caloric_content = f"{format_amount(parsed.calories)} calories"

        nutrition = parsed.nutrition_dict()
        nutrition.update(dish_name=dish_name, caloric_content=caloric_content)

        return AnalysisResult(
            image_uri=to_image_data_uri(image_base64) if image_base64 else "",
            items=extract_bullet_items(text),
            description=_DISH_NAME_LINE_RE.sub("", text, count=1),
            category=parsed.health_category,
            confidence=parsed.confidence,
            medications=[m.name for m in medications] if medications else None,
            medication_alerts=list(parsed.medication_alerts) if parsed.medication_alerts else None,
            full_response=text,
            **nutrition,
        )
