"""Numeric value extraction from "Label: value" lines."""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional, Tuple, Union

# Leading float, the way the model writes it ("20g", "2.4 mcg", "-1e3").
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_FIRST_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")


def _drop_thousands_separators(text: str) -> str:
    return _THOUSANDS_RE.sub("", text)


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    Parse the numeric prefix of `text`.

    Returns None instead of NaN when no number leads the text.

    Example:
        >>> parse_number(" 20g")
        20.0
        >>> parse_number("1,200 mg")
        1200.0
        >>> parse_number("about 20") is None
        True
    """
    if text is None:
        return None
    match = _LEADING_NUMBER_RE.match(_drop_thousands_separators(text.strip()))
    if match is None:
        return None
    value = float(match.group(0))
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def first_number(text: Optional[str]) -> Optional[float]:
    """First integer or decimal token anywhere in `text`."""
    if not text:
        return None
    match = _FIRST_NUMBER_RE.search(_drop_thousands_separators(text))
    return float(match.group(0)) if match else None


def split_label(line: str) -> Optional[Tuple[str, str]]:
    """
    Split a "Label: value" line into its lowercased label and raw value.

    Returns None for lines without a colon or with an empty label.

    Example:
        >>> split_label("Vitamin B12: 2.4 mcg")
        ('vitamin b12', ' 2.4 mcg')
    """
    label, sep, value = line.strip().partition(":")
    label = label.strip().lower()
    if not sep or not label:
        return None
    return label, value


def extract_numeric(text: Union[str, Iterable[str]], aliases: Iterable[str]) -> Optional[float]:
    """
    Numeric value of the first "Label: value" line whose label names an alias.

    Aliases are matched case-insensitively against the label only, so prose
    such as "Rich in protein and iron" is never read. Among labeled lines
    the first match wins: a malformed value there yields None.

    Example:
        >>> extract_numeric("Rich in thiamine\\nThiamine: 0.3 mg", ["vitamin b1", "thiamine"])
        0.3
    """
    lines = text.split("\n") if isinstance(text, str) else text
    lowered_aliases = [alias.lower() for alias in aliases]
    for line in lines:
        parts = split_label(line)
        if parts is None:
            continue
        label, value = parts
        if any(alias in label for alias in lowered_aliases):
            return parse_number(value)
    return None
