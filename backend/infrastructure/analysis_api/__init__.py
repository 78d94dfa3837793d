"""HTTP clients of the remote analysis endpoints."""

from infrastructure.analysis_api.calculator_client import CalculatorClient
from infrastructure.analysis_api.food_comparison_client import FoodComparisonClient
from infrastructure.analysis_api.meal_stitch_client import MealStitchClient

__all__ = [
    "CalculatorClient",
    "FoodComparisonClient",
    "MealStitchClient",
]
