"""Tests for fgp.task.context cancellation tree."""

import threading
import time

import pytest

from fgp.task.context import (
    Canceled,
    ContextError,
    DeadlineExceeded,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
)


class TestBackground:
    """Test the root context."""

    def test_never_fired(self):
        ctx = background()
        assert ctx.err() is None
        assert ctx.done() is False
        assert ctx.deadline is None
        assert ctx.remaining() is None

    def test_singleton(self):
        assert background() is background()

    def test_wait_times_out(self):
        assert background().wait(0.01) is False


class TestCancel:
    """Test explicit cancellation."""

    def test_cancel_fires(self):
        ctx = with_cancel(background())
        assert ctx.err() is None
        ctx.cancel()
        assert ctx.done()
        assert isinstance(ctx.err(), Canceled)
        assert isinstance(ctx.err(), ContextError)

    def test_cancel_is_idempotent(self):
        ctx = with_cancel(background())
        ctx.cancel()
        first = ctx.err()
        ctx.cancel()
        ctx.cancel(ValueError("later"))
        assert ctx.err() is first

    def test_cancel_with_cause(self):
        cause = ValueError("shutdown")
        ctx = with_cancel(background())
        ctx.cancel(cause)
        assert ctx.err() is cause

    def test_context_manager_releases(self):
        with with_cancel(background()) as ctx:
            assert not ctx.done()
        assert ctx.done()

    def test_wait_wakes_on_cancel(self):
        ctx = with_cancel(background())
        threading.Timer(0.02, ctx.cancel).start()
        start = time.monotonic()
        assert ctx.wait(5.0) is True
        assert time.monotonic() - start < 2.0


class TestTree:
    """Test propagation between parents and children."""

    def test_parent_fires_children_with_same_error(self):
        parent = with_cancel(background())
        child = with_cancel(parent)
        grandchild = with_cancel(child)
        parent.cancel()
        assert child.err() is parent.err()
        assert grandchild.err() is parent.err()

    def test_child_does_not_fire_parent_or_siblings(self):
        parent = with_cancel(background())
        child = with_cancel(parent)
        sibling = with_cancel(parent)
        child.cancel()
        assert parent.err() is None
        assert sibling.err() is None
        parent.cancel()

    def test_child_of_fired_parent_fires_immediately(self):
        parent = with_cancel(background())
        parent.cancel()
        child = with_cancel(parent)
        assert child.err() is parent.err()

    def test_released_child_detaches(self):
        parent = with_cancel(background())
        with with_cancel(parent):
            pass
        assert parent._children == set()
        parent.cancel()


class TestDeadlines:
    """Test with_timeout and with_deadline."""

    def test_timeout_fires(self):
        ctx = with_timeout(background(), 0.02)
        assert ctx.wait(5.0)
        assert isinstance(ctx.err(), DeadlineExceeded)
        assert isinstance(ctx.err(), TimeoutError)

    def test_past_deadline_fires_immediately(self):
        ctx = with_deadline(background(), time.monotonic() - 1)
        assert isinstance(ctx.err(), DeadlineExceeded)

    def test_cancel_before_deadline_wins(self):
        ctx = with_timeout(background(), 5.0)
        ctx.cancel()
        assert isinstance(ctx.err(), Canceled)

    def test_child_inherits_sooner_parent_deadline(self):
        with with_timeout(background(), 0.5) as parent:
            with with_timeout(parent, 10.0) as child:
                assert child.deadline == parent.deadline
            with with_cancel(parent) as plain:
                assert plain.deadline == parent.deadline

    def test_child_deadline_can_be_tighter(self):
        with with_timeout(background(), 10.0) as parent:
            with with_timeout(parent, 0.02) as child:
                assert child.wait(5.0)
                assert isinstance(child.err(), DeadlineExceeded)
            assert parent.err() is None

    def test_parent_deadline_propagates(self):
        parent = with_timeout(background(), 0.02)
        child = with_cancel(parent)
        assert child.wait(5.0)
        assert child.err() is parent.err()


class TestDoneCallbacks:
    """Test add_done_callback."""

    def test_called_once_on_fire(self):
        calls = []
        ctx = with_cancel(background())
        ctx.add_done_callback(calls.append)
        ctx.cancel()
        ctx.cancel()
        assert calls == [ctx]

    def test_called_immediately_when_already_fired(self):
        calls = []
        ctx = with_cancel(background())
        ctx.cancel()
        ctx.add_done_callback(calls.append)
        assert calls == [ctx]

    def test_called_when_parent_fires(self):
        calls = []
        parent = with_cancel(background())
        child = with_cancel(parent)
        child.add_done_callback(lambda c: calls.append(c.err()))
        parent.cancel()
        assert calls == [parent.err()]


@pytest.mark.slow
class TestConcurrentFiring:
    """Test that concurrent triggers resolve to a single error."""

    def test_many_cancellers_one_error(self):
        ctx = with_cancel(background())
        barrier = threading.Barrier(8)
        errors = [ValueError(str(i)) for i in range(8)]

        def fire(err):
            barrier.wait()
            ctx.cancel(err)

        threads = [threading.Thread(target=fire, args=(err,)) for err in errors]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert ctx.err() in errors
