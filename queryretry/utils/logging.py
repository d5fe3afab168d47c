"""Structured logging configuration.

Pipeline stages log through structlog so every entry is a set of key/value
pairs. Production deployments render JSON lines for log aggregation;
interactive terminals get the console renderer with rich tracebacks.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", json_format: Optional[bool] = None) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None to pick JSON
            when stdout is not a terminal
    """
    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.set_exc_info)
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.rich_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None, **initial_values: Any) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name, bound as ``logger_name``
        **initial_values: Extra key/value pairs bound to every entry

    Returns:
        A structlog bound logger
    """
    if name is not None:
        initial_values["logger_name"] = name
    return structlog.get_logger(**initial_values)
