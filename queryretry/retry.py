"""Bounded retry middleware.

Retries a request against the next handler in the pipeline when it fails
with a server error (5xx) or with an error that carries no status code at
all. Any other coded error is raised straight away. Retries are immediate.
"""

from typing import Any, Optional

from .context import Context
from .exceptions import MaxRetriesExceededError, status_code_from_error
from .handler import Handler, Middleware, MiddlewareFunc
from .models import QueryRequest, QueryResponse
from .utils.logging import get_logger
from .utils.metrics import HistogramLike, default_retries_histogram


def is_retryable(exception: BaseException) -> bool:
    """Check if an exception should trigger another attempt.

    Args:
        exception: Exception raised by the next handler

    Returns:
        True for uncoded errors and 5xx-class coded errors, False otherwise
    """
    status_code, ok = status_code_from_error(exception)
    return not ok or status_code // 100 == 5


class RetryMiddleware:
    """Handler that retries the next handler up to ``max_retries`` times."""

    def __init__(
        self,
        next_handler: Handler,
        max_retries: int,
        logger: Optional[Any] = None,
        retries: Optional[HistogramLike] = None,
    ) -> None:
        """Initialize the retry stage.

        Args:
            next_handler: Handler to call on every attempt
            max_retries: Maximum number of attempts per request
            logger: structlog logger for failed attempts
            retries: Histogram receiving the zero-based attempt index
        """
        self.next_handler = next_handler
        self.max_retries = max_retries
        self.logger = logger if logger is not None else get_logger(__name__)
        self.retries = retries if retries is not None else default_retries_histogram()

    def do(self, ctx: Context, request: QueryRequest) -> QueryResponse:
        """Execute the request, retrying retryable failures.

        Args:
            ctx: Call context, forwarded unchanged
            request: Request, forwarded unchanged

        Returns:
            The first successful response

        Raises:
            Exception: The first non-retryable error, or the last retryable
                one once the budget is spent
            MaxRetriesExceededError: If the budget allowed no attempt
        """
        last_exception: Optional[Exception] = None

        for tries in range(self.max_retries):
            self._observe(tries)

            try:
                return self.next_handler.do(ctx, request)
            except Exception as e:
                if not is_retryable(e):
                    raise

                last_exception = e
                self._log("error", "error processing request", **{"try": tries, "err": str(e)})

        if last_exception is not None:
            raise last_exception

        raise MaxRetriesExceededError(self.max_retries)

    def _observe(self, tries: int) -> None:
        try:
            self.retries.observe(float(tries))
        except Exception:
            self._log("warning", "failed to record retry metric", exc_info=True, **{"try": tries})

    def _log(self, level: str, event: str, **fields: Any) -> None:
        try:
            getattr(self.logger, level)(event, **fields)
        except Exception:
            # A broken log sink never changes the outcome of a request.
            pass


def new_retry_middleware(
    logger: Optional[Any],
    max_retries: int,
    retries: Optional[HistogramLike] = None,
) -> Middleware:
    """Create a middleware that retries requests failing with 5xx or uncoded errors.

    Args:
        logger: structlog logger for failed attempts, None for the package logger
        max_retries: Maximum number of attempts per request
        retries: Histogram for attempt indexes, None for the process default

    Returns:
        Middleware wrapping a handler in a RetryMiddleware
    """
    def wrap(next_handler: Handler) -> Handler:
        return RetryMiddleware(
            next_handler,
            max_retries,
            logger=logger,
            retries=retries,
        )

    return MiddlewareFunc(wrap)
