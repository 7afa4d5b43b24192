"""Tests for CallContext deadline and cancellation handling."""

import threading
import time

import pytest

from rtdb.context import CallContext
from rtdb.errors import DeadlineExceededError, RequestCancelledError


class TestCallContext:
    """Test deadline and cancellation."""

    def test_background_never_expires(self):
        """Test context without a deadline."""
        ctx = CallContext.background()
        assert ctx.remaining() is None
        assert not ctx.expired
        ctx.check()
        assert ctx.timeout(5.0) == 5.0

    def test_cancel(self):
        """Test explicit cancellation."""
        ctx = CallContext.background()
        ctx.cancel()
        assert ctx.cancelled
        with pytest.raises(RequestCancelledError):
            ctx.check()

    def test_cancel_from_another_thread(self):
        """Test cancellation from another thread."""
        ctx = CallContext.background()
        t = threading.Thread(target=ctx.cancel)
        t.start()
        t.join()
        assert ctx.cancelled

    def test_deadline_passed(self):
        """Test an expired deadline."""
        ctx = CallContext(deadline=time.monotonic() - 1)
        assert ctx.expired
        assert ctx.remaining() == 0.0
        with pytest.raises(DeadlineExceededError):
            ctx.check()

    def test_timeout_capped_by_deadline(self):
        """Test timeout capping."""
        ctx = CallContext.with_timeout(2.0)
        assert ctx.timeout(30.0) <= 2.0
        assert ctx.timeout(0.5) == 0.5
        assert 0 < ctx.timeout(None) <= 2.0
