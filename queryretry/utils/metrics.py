"""Prometheus metrics for the retry middleware."""

import threading
from typing import Optional, Protocol

from prometheus_client import REGISTRY, CollectorRegistry, Histogram

RETRIES_NAMESPACE = "cortex"
RETRIES_NAME = "query_frontend_retries"
RETRIES_HELP = "Number of times a request is retried."
RETRIES_BUCKETS = (0, 1, 2, 3, 4, 5)

_default_lock = threading.Lock()
_default_histogram: Optional[Histogram] = None


class HistogramLike(Protocol):
    """The slice of the histogram API the retry middleware relies upon."""

    def observe(self, amount: float) -> None:
        ...


def new_retries_histogram(registry: Optional[CollectorRegistry] = REGISTRY) -> Histogram:
    """Create and register the retries histogram.

    Args:
        registry: Registry to register with; None leaves it unregistered

    Returns:
        Histogram observing one zero-based attempt index per attempt
    """
    return Histogram(
        RETRIES_NAME,
        RETRIES_HELP,
        namespace=RETRIES_NAMESPACE,
        buckets=RETRIES_BUCKETS,
        registry=registry,
    )


def default_retries_histogram() -> Histogram:
    """Return the process-wide retries histogram, registering it on first use."""
    global _default_histogram
    with _default_lock:
        if _default_histogram is None:
            _default_histogram = new_retries_histogram(REGISTRY)
        return _default_histogram
