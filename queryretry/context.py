"""Call context threaded through every pipeline stage.

A context carries a cancellation signal and an optional deadline. Stages
pass it along unchanged; terminal handlers are expected to honour it.
"""

import threading
import time
from typing import Optional

from .exceptions import CancelledError, DeadlineExceededError, QueryRetryError


class Context:
    """Cancellation and deadline carrier for a single incoming request."""

    def __init__(self, deadline: Optional[float] = None) -> None:
        """Initialize the context.

        Args:
            deadline: Absolute deadline on the ``time.monotonic()`` clock,
                or None for no deadline
        """
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Create a context that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Signal cancellation to every stage holding this context."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> Optional[QueryRetryError]:
        """Return the reason this context is done, or None if it is live."""
        if self._cancelled.is_set():
            return CancelledError()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceededError()
        return None

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline.

        Raises:
            CancelledError: If ``cancel()`` was called
            DeadlineExceededError: If the deadline has passed
        """
        error = self.err()
        if error is not None:
            raise error


def background() -> Context:
    """Return a fresh context that is never cancelled and has no deadline."""
    return Context()
