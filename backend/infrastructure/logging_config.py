"""Logging setup for scripts and services using the analysis layer."""

import logging
from typing import Optional

import structlog

from infrastructure.config import get_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure stdlib logging and structlog.

    Domain and application modules log through `logging` with `extra=`;
    HTTP clients log key-value events through structlog. Both end up on
    stderr at the same level.
    """
    resolved = (level or get_log_level()).upper()
    numeric_level = getattr(logging, resolved, logging.INFO)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )
