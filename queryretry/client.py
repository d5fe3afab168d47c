"""HTTP terminal handler for a Prometheus-style query API.

This module provides the handler at the bottom of a pipeline: it sends the
request to a backend over HTTP and converts error responses into the coded
exception hierarchy so upstream stages can classify them.
"""

from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from .context import Context
from .exceptions import RateLimitError, errorf
from .models import QueryRequest, QueryResponse
from .utils.logging import get_logger

logger = get_logger(__name__)


class HTTPHandler:
    """Handler that executes queries against a backend over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the HTTP handler.

        Args:
            base_url: Backend base URL
            timeout: Default request timeout in seconds
            session: Session to use; a pooled one is created when None
        """
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout

        if session is None:
            session = requests.Session()
            self._configure_session(session)
        self.session = session

    def _configure_session(self, session: requests.Session) -> None:
        """Mount a pooled adapter with transport-level retries disabled."""
        adapter = HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=20)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

    def _request_timeout(self, ctx: Context, request: QueryRequest) -> float:
        candidates = [self.timeout]
        if request.timeout is not None:
            candidates.append(request.timeout)
        remaining = ctx.remaining()
        if remaining is not None:
            candidates.append(remaining)
        return min(candidates)

    def _handle_response(self, response: requests.Response) -> QueryResponse:
        """Convert an HTTP response into a QueryResponse or a coded error.

        Args:
            response: Response object

        Returns:
            Parsed query response

        Raises:
            APIError: For any non-2xx status
        """
        body: Dict[str, Any] = {}
        try:
            body = response.json()
        except ValueError:
            pass
        if not isinstance(body, dict):
            body = {}

        if response.status_code >= 400:
            message = body.get("error") or f"{response.status_code} {response.reason}"

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                raise RateLimitError(
                    message,
                    status_code=response.status_code,
                    response_data=body,
                    retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                )

            raise errorf(response.status_code, "%s", message, response_data=body)

        return QueryResponse.model_validate(body)

    def do(self, ctx: Context, request: QueryRequest) -> QueryResponse:
        """Send the request to the backend.

        Args:
            ctx: Call context; checked before sending and bounds the timeout
            request: Query to execute

        Returns:
            Parsed query response

        Raises:
            CancelledError: If the context was cancelled
            DeadlineExceededError: If the context deadline has passed
            APIError: For error responses from the backend
            requests.RequestException: For transport failures
        """
        ctx.check()

        url = f"{self.base_url}{request.path}"
        logger.debug("sending query", url=url, query=request.query)

        response = self.session.get(
            url,
            params=request.to_params(),
            timeout=self._request_timeout(ctx, request),
        )

        logger.debug("received response", url=url, status=response.status_code)
        return self._handle_response(response)
