"""Deadline and cancellation context for database calls.

Every network call made on behalf of a caller checks its ``CallContext``
before the request goes out. A response that has already arrived is
always returned, so a committed write is never reported as cancelled. The
request timeout handed to the transport is capped to whatever is left of
the deadline.
"""

import threading
import time

from .errors import DeadlineExceededError, RequestCancelledError


class CallContext:
    """Cancellation flag plus an optional absolute deadline.

    Safe to share between threads: one thread may call ``cancel()`` while
    another is blocked in a request.
    """

    def __init__(self, deadline: float | None = None):
        """Initialize context.

        Args:
            deadline: Absolute ``time.monotonic()`` value, or None for no deadline
        """
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "CallContext":
        """Context that never expires and is only cancelled explicitly."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CallContext":
        """Context whose deadline is ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline.

        Raises:
            RequestCancelledError: If ``cancel()`` was called
            DeadlineExceededError: If the deadline has passed
        """
        if self.cancelled:
            raise RequestCancelledError("context cancelled")
        if self.expired:
            raise DeadlineExceededError("context deadline exceeded")

    def timeout(self, default: float | None) -> float | None:
        """Per-request timeout: ``default`` capped to the remaining deadline."""
        remaining = self.remaining()
        if remaining is None:
            return default
        if default is None:
            return remaining
        return min(default, remaining)
