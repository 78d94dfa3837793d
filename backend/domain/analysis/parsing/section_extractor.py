"""Extraction of labeled free-text sections."""

from __future__ import annotations

import re
from typing import List, Optional

from domain.analysis.parsing.vocabulary import DEFAULT_VOCABULARY, LabelVocabulary


def extract_section(
    text: str,
    label: str,
    *,
    multiline: bool = True,
    vocabulary: LabelVocabulary = DEFAULT_VOCABULARY,
) -> Optional[str]:
    """
    Return the text of the section introduced by `label`.

    The first line containing "<label>:" (case-insensitive, anywhere in the
    line) starts the section; what follows the label on that line is kept.
    Following lines are appended until a blank line or a new section header.
    A sentence ending in "Macronutrients:" also starts a section.

    Args:
        text: Full analysis text
        label: Label without colon, e.g. "Health Implications"
        multiline: When False only the label line is read
        vocabulary: Table used to recognize section headers

    Returns:
        Trimmed section text (lines joined with newlines), None when the
        label is absent or the section is empty

    Example:
        >>> extract_section("Macronutrients:\\n- Protein 20g\\n\\nOther", "Macronutrients")
        '- Protein 20g'
    """
    if not text:
        return None

    pattern = re.compile(re.escape(f"{label}:"), re.IGNORECASE)
    lines = text.split("\n")

    for index, line in enumerate(lines):
        stripped = line.strip()
        match = pattern.search(stripped)
        if match is None:
            continue

        collected: List[str] = [stripped[match.end():].strip()]
        if multiline:
            for following in lines[index + 1:]:
                candidate = following.strip()
                if not candidate or vocabulary.is_section_header(candidate):
                    break
                collected.append(candidate)

        section = "\n".join(part for part in collected if part).strip()
        return section or None

    return None
