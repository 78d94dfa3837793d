"""CQRS commands for the analysis domain."""

from .analyze_image import AnalyzeImageCommand, AnalyzeImageCommandHandler
from .analyze_meal_stitch import AnalyzeMealStitchCommand, AnalyzeMealStitchCommandHandler
from .compare_food import CompareFoodCommand, CompareFoodCommandHandler
from .summarize_meal import SummarizeMealCommand, SummarizeMealCommandHandler

__all__ = [
    "AnalyzeImageCommand",
    "AnalyzeImageCommandHandler",
    "AnalyzeMealStitchCommand",
    "AnalyzeMealStitchCommandHandler",
    "CompareFoodCommand",
    "CompareFoodCommandHandler",
    "SummarizeMealCommand",
    "SummarizeMealCommandHandler",
]
