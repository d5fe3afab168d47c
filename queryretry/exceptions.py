"""Exception classes for the query retry pipeline.

This module defines the exception hierarchy raised by pipeline handlers,
along with the status-code convention used to classify them: an error is
"coded" when it carries an integer HTTP-style status code, and "uncoded"
otherwise (transport failures, cancellations, programming errors).
"""

from typing import Optional, Dict, Any, Tuple

import requests


class QueryRetryError(Exception):
    """Base exception class for all query retry errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(QueryRetryError):
    """Exception raised for configuration-related errors."""
    pass


class CancelledError(QueryRetryError):
    """Exception raised when the call context was cancelled."""

    def __init__(self, message: str = "context canceled", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class DeadlineExceededError(QueryRetryError):
    """Exception raised when the call context deadline has passed."""

    def __init__(self, message: str = "context deadline exceeded", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class APIError(QueryRetryError):
    """Base exception for errors carrying an HTTP-style response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code, None when the error is uncoded
            response_data: Raw response data from the backend
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


class BadRequestError(APIError):
    """Exception raised for 400 Bad Request and 422 errors."""
    pass


class UnauthorizedError(APIError):
    """Exception raised for 401 Unauthorized errors."""
    pass


class ForbiddenError(APIError):
    """Exception raised for 403 Forbidden errors."""
    pass


class NotFoundError(APIError):
    """Exception raised for 404 Not Found errors."""
    pass


class ServerError(APIError):
    """Exception raised for 5xx server errors."""
    pass


class RateLimitError(APIError):
    """Exception raised for 429 Rate Limit errors."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[int] = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            retry_after: Seconds the backend asked us to wait
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class MaxRetriesExceededError(ServerError):
    """Exception raised when a retry budget allowed no attempt at all."""

    def __init__(self, max_retries: int) -> None:
        """Initialize the exception.

        Args:
            max_retries: The configured retry budget
        """
        super().__init__(
            f"Query failed after {max_retries} retries.",
            status_code=500,
        )
        self.max_retries = max_retries


_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    422: BadRequestError,
    429: RateLimitError,
}


def errorf(status_code: int, fmt: str, *args: Any, **kwargs: Any) -> APIError:
    """Build the coded error matching a status code.

    Args:
        status_code: HTTP status code to encode
        fmt: printf-style message format
        *args: Format arguments
        **kwargs: Extra keyword arguments for the exception class

    Returns:
        An APIError subclass instance carrying ``status_code``
    """
    message = fmt % args if args else fmt
    if status_code // 100 == 5:
        error_cls = ServerError
    else:
        error_cls = _STATUS_ERRORS.get(status_code, APIError)
    return error_cls(message, status_code=status_code, **kwargs)


def status_code_from_error(exception: BaseException) -> Tuple[int, bool]:
    """Extract the status code carried by an exception, if any.

    Any exception exposing an integer ``status_code`` attribute counts as
    coded, as does a ``requests.HTTPError`` that carries its response.

    Args:
        exception: Exception to inspect

    Returns:
        ``(status_code, True)`` for coded errors, ``(0, False)`` otherwise
    """
    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        return status_code, True

    if isinstance(exception, requests.HTTPError) and exception.response is not None:
        return exception.response.status_code, True

    return 0, False
