"""Query retry middleware package.

A bounded-retry stage for query-serving pipelines. Handlers that fail with
server errors or uncoded (transport) errors are retried a fixed number of
times; client errors are returned immediately.
"""

__version__ = "0.1.0"
__description__ = "Bounded retry middleware for query-serving pipelines"

# Re-export main classes for convenience
from .context import Context, background
from .handler import (
    Handler,
    HandlerFunc,
    Middleware,
    MiddlewareFunc,
    merge_middlewares,
    build_pipeline,
)
from .retry import RetryMiddleware, new_retry_middleware, is_retryable
from .client import HTTPHandler
from .config import (
    RetrySettings,
    load_settings,
    apply_logging,
    build_http_pipeline,
    build_retry_middleware,
)
from .models import QueryRequest, QueryResponse
from .exceptions import (
    QueryRetryError,
    ConfigError,
    CancelledError,
    DeadlineExceededError,
    APIError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    RateLimitError,
    MaxRetriesExceededError,
    errorf,
    status_code_from_error,
)

__all__ = [
    "__version__",
    "__description__",
    "Context",
    "background",
    "Handler",
    "HandlerFunc",
    "Middleware",
    "MiddlewareFunc",
    "merge_middlewares",
    "build_pipeline",
    "RetryMiddleware",
    "new_retry_middleware",
    "is_retryable",
    "HTTPHandler",
    "RetrySettings",
    "load_settings",
    "apply_logging",
    "build_http_pipeline",
    "build_retry_middleware",
    "QueryRequest",
    "QueryResponse",
    "QueryRetryError",
    "ConfigError",
    "CancelledError",
    "DeadlineExceededError",
    "APIError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "RateLimitError",
    "MaxRetriesExceededError",
    "errorf",
    "status_code_from_error",
]
