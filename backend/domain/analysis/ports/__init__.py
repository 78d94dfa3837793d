"""Analysis domain ports (interfaces)."""

from domain.analysis.ports.alert_sink import IAlertSink
from domain.analysis.ports.analysis_provider import (
    IAnalysisProvider,
    IFoodComparisonProvider,
    IMealStitchProvider,
)
from domain.analysis.ports.history_repository import IHistoryRepository

__all__ = [
    "IAlertSink",
    "IAnalysisProvider",
    "IFoodComparisonProvider",
    "IMealStitchProvider",
    "IHistoryRepository",
]
