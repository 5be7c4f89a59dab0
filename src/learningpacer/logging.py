"""
Structured logging configuration using structlog.

Human-readable logs while working on the course tooling,
JSON logs when the viewer runs anywhere else.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from learningpacer.config import settings


def configure_logging() -> None:
    """Configure structlog for the application."""

    is_dev = settings.environment == "development"

    # Shared processors for all environments
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if is_dev:
        # Development: colorful, human-readable output
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        # Production: JSON output for log aggregation
        processors = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    # Log to stderr so CLI output on stdout stays clean
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Also configure standard library logging for third-party libs
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.getLevelName(settings.log_level.upper()),
    )

    # Streamlit is chatty at INFO
    logging.getLogger("streamlit").setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger instance with optional initial context.

    Args:
        name: Optional logger name (typically __name__)
        **initial_context: Key-value pairs to bind to all log messages

    Returns:
        Configured structlog logger

    Example:
        logger = get_logger(__name__, component="matching")
        logger.debug("material_matched", title="ELEC3120 Textbook")
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
