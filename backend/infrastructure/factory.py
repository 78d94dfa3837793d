"""Composition root of the analysis layer.

Wires the endpoint clients, the history repository and the alert sink into
the application handlers. Clients are entered as async context managers and
closed when the block exits.

Usage:
    from infrastructure.factory import create_analysis_services

    async with create_analysis_services() as services:
        result = await services.analyze_image.handle(AnalyzeImageCommand(image_base64=b64))

Environment: see `infrastructure.config` (HISTORY_BACKEND selects the
history storage).
"""

from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import structlog

from application.analysis.commands.analyze_image import AnalyzeImageCommandHandler
from application.analysis.commands.analyze_meal_stitch import AnalyzeMealStitchCommandHandler
from application.analysis.commands.compare_food import CompareFoodCommandHandler
from application.analysis.commands.summarize_meal import SummarizeMealCommandHandler
from application.analysis.history_service import AnalysisHistoryService
from domain.analysis.ports.alert_sink import IAlertSink
from domain.analysis.ports.history_repository import IHistoryRepository
from infrastructure.alerts.sinks import LoggingAlertSink
from infrastructure.analysis_api.calculator_client import CalculatorClient
from infrastructure.analysis_api.food_comparison_client import FoodComparisonClient
from infrastructure.analysis_api.meal_stitch_client import MealStitchClient
from infrastructure.config import get_history_backend
from infrastructure.history.http_history_client import HttpHistoryClient
from infrastructure.history.in_memory_history_repository import InMemoryHistoryRepository
from infrastructure.logging_config import configure_logging

logger = structlog.get_logger(__name__)


@dataclass
class AnalysisServices:
    analyze_image: AnalyzeImageCommandHandler
    analyze_meal_stitch: AnalyzeMealStitchCommandHandler
    summarize_meal: SummarizeMealCommandHandler
    compare_food: CompareFoodCommandHandler
    history: AnalysisHistoryService


def create_history_repository() -> IHistoryRepository:
    """Create the history repository based on HISTORY_BACKEND.

    Values:
        - "http": remote history endpoint (HISTORY_API_BASE_URL)
        - "memory": in-process storage (default)
    """
    backend = get_history_backend()
    if backend == "http":
        return HttpHistoryClient()
    if backend == "memory":
        return InMemoryHistoryRepository()
    raise ValueError(f"HISTORY_BACKEND must be 'http' or 'memory', got {backend!r}")


@asynccontextmanager
async def create_analysis_services(
    alert_sink: Optional[IAlertSink] = None,
    *,
    setup_logging: bool = True,
) -> AsyncIterator[AnalysisServices]:
    """
    Build every handler with open client sessions.

    Args:
        alert_sink: Where user-facing alerts go, LoggingAlertSink when omitted
        setup_logging: Configure logging and structlog from LOG_LEVEL first
    """
    if setup_logging:
        configure_logging()

    sink = alert_sink or LoggingAlertSink()
    repository = create_history_repository()

    async with AsyncExitStack() as stack:
        calculator = await stack.enter_async_context(CalculatorClient())
        stitch = await stack.enter_async_context(MealStitchClient())
        comparison = await stack.enter_async_context(FoodComparisonClient())
        if isinstance(repository, HttpHistoryClient):
            await stack.enter_async_context(repository)

        history = AnalysisHistoryService(repository)
        services = AnalysisServices(
            analyze_image=AnalyzeImageCommandHandler(calculator, sink, history=history),
            analyze_meal_stitch=AnalyzeMealStitchCommandHandler(stitch, sink),
            summarize_meal=SummarizeMealCommandHandler(stitch, sink),
            compare_food=CompareFoodCommandHandler(comparison, sink),
            history=history,
        )
        logger.info(
            "analysis_services_ready",
            analysis_url=calculator.api_url,
            meal_stitch_url=stitch.base_url,
            history_backend=type(repository).__name__,
        )
        yield services
