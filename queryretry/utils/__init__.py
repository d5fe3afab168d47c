"""Utility modules for the query retry pipeline.

This package contains structured logging setup and Prometheus metric
helpers shared by pipeline stages.
"""

from .logging import configure_logging, get_logger
from .metrics import HistogramLike, default_retries_histogram, new_retries_histogram

__all__ = [
    "configure_logging",
    "get_logger",
    "HistogramLike",
    "default_retries_histogram",
    "new_retries_histogram",
]
