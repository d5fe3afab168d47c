"""Handler and middleware abstractions.

Every pipeline stage is a ``Handler``: it takes a call context and a
request, and either returns a response or raises. A ``Middleware`` wraps a
handler to produce a decorated handler, so stages can be stacked without
knowing each other's concrete types.
"""

from functools import reduce
from typing import Callable, Iterable, Protocol

from .context import Context
from .models import QueryRequest, QueryResponse


class Handler(Protocol):
    """A stage that executes a request."""

    def do(self, ctx: Context, request: QueryRequest) -> QueryResponse:
        """Execute the request.

        Implementations must be safe to call repeatedly with the same
        request and signal failure by raising.
        """
        ...


class Middleware(Protocol):
    """A factory producing a decorated handler from a handler."""

    def wrap(self, next_handler: Handler) -> Handler:
        ...


class HandlerFunc:
    """Adapter that lets a plain callable act as a Handler."""

    def __init__(self, fn: Callable[[Context, QueryRequest], QueryResponse]) -> None:
        self._fn = fn

    def do(self, ctx: Context, request: QueryRequest) -> QueryResponse:
        return self._fn(ctx, request)


class MiddlewareFunc:
    """Adapter that lets a plain callable act as a Middleware."""

    def __init__(self, fn: Callable[[Handler], Handler]) -> None:
        self._fn = fn

    def wrap(self, next_handler: Handler) -> Handler:
        return self._fn(next_handler)


def merge_middlewares(*middlewares: Middleware) -> Middleware:
    """Combine middlewares into one.

    The first middleware becomes the outermost stage, so a request passes
    through them in the order given.

    Args:
        *middlewares: Middlewares to combine

    Returns:
        A single middleware applying all of them
    """
    def wrap(next_handler: Handler) -> Handler:
        return reduce(
            lambda handler, middleware: middleware.wrap(handler),
            reversed(middlewares),
            next_handler,
        )

    return MiddlewareFunc(wrap)


def build_pipeline(terminal: Handler, middlewares: Iterable[Middleware]) -> Handler:
    """Fold middlewares over a terminal handler.

    Args:
        terminal: The handler that actually executes requests
        middlewares: Stages to stack on top, outermost first

    Returns:
        The assembled pipeline entry point
    """
    return merge_middlewares(*middlewares).wrap(terminal)
