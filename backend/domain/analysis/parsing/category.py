"""Mapping of free-text category labels to HealthCategory."""

from __future__ import annotations

from typing import Optional, Tuple

from domain.analysis.entities.health_category import HealthCategory

# "unhealthy" contains "healthy": it has to be tested first.
_CATEGORY_KEYWORDS: Tuple[Tuple[str, HealthCategory], ...] = (
    ("unhealthy", HealthCategory.CLEARLY_UNHEALTHY),
    ("borderline", HealthCategory.BORDERLINE),
    ("mixed", HealthCategory.MIXED),
    ("healthy", HealthCategory.CLEARLY_HEALTHY),
)


def normalize_category(raw: Optional[str]) -> HealthCategory:
    """
    Map a raw category label to the fixed enumeration.

    Plain substring containment on the lowercased, trimmed label; no fuzzy
    matching.

    Example:
        >>> normalize_category("This dish is Clearly Unhealthy")
        <HealthCategory.CLEARLY_UNHEALTHY: 'Clearly Unhealthy'>
        >>> normalize_category("healthy option").value
        'Clearly Healthy'
        >>> normalize_category("totally ambiguous").value
        'Unknown'
    """
    if not raw:
        return HealthCategory.UNKNOWN
    normalized = raw.strip().lower()
    for keyword, category in _CATEGORY_KEYWORDS:
        if keyword in normalized:
            return category
    return HealthCategory.UNKNOWN
