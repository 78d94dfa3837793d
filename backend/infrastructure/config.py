"""Configuration of the analysis endpoints.

Values come from environment variables; a `.env` file next to the backend
is loaded once on import. Defaults point at the production endpoints.

Example .env:
    ANALYSIS_API_URL=https://feature1-food.vercel.app/api/calculator
    HTTP_TIMEOUT_S=60
    LOG_LEVEL=DEBUG
    HISTORY_BACKEND=http
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_ANALYSIS_API_URL = "https://feature1-food.vercel.app/api/calculator"
DEFAULT_MEAL_STITCH_BASE_URL = "https://image-stitch.vercel.app/api"
DEFAULT_FOOD_COMPARISON_API_URL = "https://food-stage-2.vercel.app/api/food-analysis"
DEFAULT_HISTORY_API_BASE_URL = "https://food-app-backend-psi-eosin.vercel.app/api"


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def get_analysis_api_url() -> str:
    return os.getenv("ANALYSIS_API_URL", DEFAULT_ANALYSIS_API_URL)


def get_meal_stitch_base_url() -> str:
    """Base URL of the per-item (`/llm-{n}`) and `/summarize` endpoints."""
    return os.getenv("MEAL_STITCH_BASE_URL", DEFAULT_MEAL_STITCH_BASE_URL).rstrip("/")


def get_food_comparison_api_url() -> str:
    return os.getenv("FOOD_COMPARISON_API_URL", DEFAULT_FOOD_COMPARISON_API_URL)


def get_history_api_base_url() -> str:
    return os.getenv("HISTORY_API_BASE_URL", DEFAULT_HISTORY_API_BASE_URL).rstrip("/")


def get_http_timeout_s() -> float:
    """Timeout for the analysis, meal-stitch and history endpoints."""
    return _get_float("HTTP_TIMEOUT_S", 60.0)


def get_comparison_timeout_s() -> float:
    """
    Timeout for the food comparison endpoint.

    Two full images per request: defaults to 120 seconds.
    """
    return _get_float("COMPARISON_TIMEOUT_S", 120.0)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_history_backend() -> str:
    """History storage: "http" for the history endpoint, "memory" otherwise."""
    return os.getenv("HISTORY_BACKEND", "memory").lower()
