"""Health classification enum."""

from enum import Enum


class HealthCategory(str, Enum):
    """Fixed health classification shown to the user."""

    CLEARLY_HEALTHY = "Clearly Healthy"
    BORDERLINE = "Borderline"
    MIXED = "Mixed"
    CLEARLY_UNHEALTHY = "Clearly Unhealthy"
    UNKNOWN = "Unknown"
