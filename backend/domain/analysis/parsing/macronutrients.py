"""Macronutrient summary rebuilt from individual values."""

from __future__ import annotations

from typing import Optional


def format_amount(value: float) -> str:
    """Render 20.0 as "20" and 20.5 as "20.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_macronutrient_summary(
    protein: Optional[float] = None,
    carbs: Optional[float] = None,
    fats: Optional[float] = None,
    fiber: Optional[float] = None,
) -> Optional[str]:
    """
    Build a "Macronutrients" text when the model omitted the section.

    One "<Label>: <value>g" line per known value, always in the order
    Protein, Carbohydrates, Fats, Fiber.

    Example:
        >>> build_macronutrient_summary(protein=20.0, carbs=30.0)
        'Protein: 20g\\nCarbohydrates: 30g'
        >>> build_macronutrient_summary() is None
        True
    """
    parts = (
        ("Protein", protein),
        ("Carbohydrates", carbs),
        ("Fats", fats),
        ("Fiber", fiber),
    )
    lines = [f"{label}: {format_amount(value)}g" for label, value in parts if value is not None]
    return "\n".join(lines) or None
