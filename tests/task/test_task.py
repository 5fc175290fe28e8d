"""Tests for fgp.task.task: constructors, sequential combinators, bracket, attempt."""

import pytest

from fgp.core.errors import NilError, PanicError, is_error
from fgp.core.result import Err, Ok
from fgp.task import (
    Canceled,
    Task,
    attempt,
    background,
    bracket,
    fail,
    from_fn,
    pure,
    sequence,
    with_cancel,
)


class TestConstructors:
    """Test from_fn, pure, fail."""

    def test_pure_on_live_context(self, bg):
        assert pure(42).run(bg) == Ok(42)

    def test_run_defaults_to_background(self):
        assert pure("x").run() == Ok("x")
        assert pure("x")() == Ok("x")

    def test_pure_on_canceled_context(self, canceled_ctx):
        assert pure(42).run(canceled_ctx) == Err(canceled_ctx.err())

    def test_from_fn_skips_logic_when_canceled(self, canceled_ctx, counter):
        task = from_fn(lambda ctx: Ok(counter.increment()))
        result = task.run(canceled_ctx)
        assert result.error is canceled_ctx.err()
        assert counter.count == 0

    def test_from_fn_receives_context(self, live_ctx):
        seen = []
        from_fn(lambda ctx: Ok(seen.append(ctx))).run(live_ctx)
        assert seen == [live_ctx]

    def test_classmethod_from_fn(self, canceled_ctx):
        assert Task.from_fn(lambda ctx: Ok(1)).run(canceled_ctx).is_err()

    def test_tasks_are_rerunnable(self, bg, counter):
        task = from_fn(lambda ctx: Ok(counter.increment()))
        assert task.run(bg) == Ok(1)
        assert task.run(bg) == Ok(2)

    def test_fail(self, bg):
        error = ValueError("bad")
        assert fail(error).run(bg) == Err(error)

    def test_fail_none_uses_placeholder(self, bg):
        result = fail(None).run(bg)
        assert isinstance(result.error, NilError)

    def test_fail_cancellation_precedence(self, canceled_ctx):
        assert fail(ValueError("bad")).run(canceled_ctx).error is canceled_ctx.err()

    def test_task_is_immutable(self):
        task = pure(1)
        with pytest.raises(Exception):
            task.fn = lambda ctx: Ok(2)


class TestMapAndFlatMap:
    """Test map, flat_map, chain."""

    def test_map(self, bg):
        assert pure(2).map(lambda n: n + 1).run(bg) == Ok(3)

    def test_map_skips_on_failure(self, bg):
        calls = []
        error = ValueError("bad")
        assert fail(error).map(calls.append).run(bg) == Err(error)
        assert calls == []

    def test_map_cancellation_wins(self):
        """A context canceled while the source ran beats its value."""
        ctx = with_cancel(background())

        def cancel_then_succeed(c):
            ctx.cancel()
            return Ok(1)

        calls = []
        result = Task(cancel_then_succeed).map(calls.append).run(ctx)
        assert result.error is ctx.err()
        assert calls == []

    def test_flat_map_cancellation_wins(self):
        """The continuation is not built once the context has fired."""
        ctx = with_cancel(background())

        def cancel_then_succeed(c):
            ctx.cancel()
            return Ok(1)

        calls = []

        def continuation(n):
            calls.append(n)
            return Task(lambda c: Ok(n + 1))

        result = Task(cancel_then_succeed).flat_map(continuation).run(ctx)
        assert result.error is ctx.err()
        assert calls == []

    def test_flat_map(self, bg):
        assert pure(3).flat_map(lambda n: pure(n * 2)).run(bg) == Ok(6)
        assert pure(3).chain(lambda n: pure(n * 2)).run(bg) == Ok(6)

    def test_flat_map_error_from_second_stage(self, bg):
        error = KeyError("k")
        assert pure(1).flat_map(lambda n: fail(error)).run(bg) == Err(error)

    def test_flat_map_shares_context(self, live_ctx):
        seen = []
        task = from_fn(lambda ctx: Ok(seen.append(ctx))).flat_map(
            lambda _: from_fn(lambda ctx: Ok(seen.append(ctx)))
        )
        task.run(live_ctx)
        assert seen == [live_ctx, live_ctx]


class TestObservers:
    """Test tap, tap_err, ensure."""

    def test_tap(self, bg):
        seen = []
        assert pure(5).tap(seen.append).run(bg) == Ok(5)
        assert seen == [5]

    def test_tap_err(self, bg):
        seen = []
        error = ValueError("x")
        assert fail(error).tap(seen.append).tap_err(seen.append).run(bg) == Err(error)
        assert seen == [error]

    def test_ensure_runs_on_success_and_failure(self, bg):
        cleanups = []
        pure(1).ensure(lambda: cleanups.append("ok")).run(bg)
        fail(ValueError("x")).ensure(lambda: cleanups.append("err")).run(bg)
        assert cleanups == ["ok", "err"]

    def test_ensure_runs_when_task_raises(self, bg):
        cleanups = []

        def explode(ctx):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            Task(explode).ensure(lambda: cleanups.append("done")).run(bg)
        assert cleanups == ["done"]


class TestBracket:
    """Test bracket resource safety."""

    def test_release_always_called(self, bg):
        released = []

        def release(ctx, resource, use_err):
            released.append((resource, use_err))
            return None

        assert bracket(pure("conn"), lambda r: pure(r.upper()), release).run(bg) == Ok("CONN")
        assert released == [("conn", None)]

    def test_release_sees_use_error(self, bg):
        released = []
        use_err = ValueError("use")

        def release(ctx, resource, err):
            released.append(err)
            return None

        assert bracket(pure("conn"), lambda r: fail(use_err), release).run(bg) == Err(use_err)
        assert released == [use_err]

    def test_release_runs_when_use_raises(self, bg):
        released = []

        def explode(ctx):
            raise RuntimeError("driver crashed")

        def release(ctx, resource, use_err):
            released.append((resource, use_err))
            return None

        with pytest.raises(RuntimeError, match="driver crashed"):
            bracket(pure("conn"), lambda r: Task(explode), release).run(bg)
        assert len(released) == 1
        resource, use_err = released[0]
        assert resource == "conn"
        assert isinstance(use_err, RuntimeError)

    def test_acquire_failure_skips_use_and_release(self, bg):
        calls = []
        error = OSError("no conn")
        result = bracket(
            fail(error),
            lambda r: calls.append("use") or pure(r),
            lambda ctx, r, e: calls.append("release"),
        ).run(bg)
        assert result == Err(error)
        assert calls == []

    def test_release_failure_only(self, bg):
        release_err = OSError("close failed")
        result = bracket(pure(1), lambda r: pure(r), lambda ctx, r, e: release_err).run(bg)
        assert result == Err(release_err)

    def test_both_fail_joined(self, bg):
        use_err, release_err = ValueError("use"), OSError("release")
        result = bracket(pure(1), lambda r: fail(use_err), lambda ctx, r, e: release_err).run(bg)
        assert isinstance(result.error, ExceptionGroup)
        assert is_error(result.error, use_err)
        assert is_error(result.error, release_err)


class TestSequence:
    """Test sequential batches."""

    def test_preserves_order(self, bg):
        assert sequence([pure(1), pure(2), pure(3)]).run(bg) == Ok([1, 2, 3])

    def test_empty(self, bg):
        assert sequence([]).run(bg) == Ok([])

    def test_first_failure_aborts(self, bg, counter):
        error = ValueError("second")
        tasks = [
            from_fn(lambda ctx: Ok(counter.increment())),
            fail(error),
            from_fn(lambda ctx: Ok(counter.increment())),
        ]
        assert sequence(tasks).run(bg) == Err(error)
        assert counter.count == 1

    def test_stops_after_task_cancels(self, counter):
        ctx = with_cancel(background())

        def cancel_and_succeed(c):
            counter.increment()
            ctx.cancel()
            return Ok(None)

        tasks = [Task(cancel_and_succeed), from_fn(lambda c: Ok(counter.increment()))]
        result = sequence(tasks).run(ctx)
        assert isinstance(result.error, Canceled)
        assert counter.count == 1


class TestAttempt:
    """Test fault containment."""

    def test_converts_exception(self, bg):
        cause = RuntimeError("kaboom")

        def explode(ctx):
            raise cause

        result = attempt(Task(explode)).run(bg)
        assert isinstance(result.error, PanicError)
        assert "kaboom" in str(result.error)
        assert result.error.cause is cause
        assert result.error.__cause__ is cause

    def test_fluent_form(self, bg):
        result = Task(lambda ctx: 1 / 0).attempt().run(bg)
        assert isinstance(result.error, PanicError)
        assert str(result.error).startswith("task: panic recovered:")

    def test_passes_through_outcomes(self, bg):
        error = ValueError("domain")
        assert attempt(pure(1)).run(bg) == Ok(1)
        assert attempt(fail(error)).run(bg) == Err(error)

    def test_does_not_catch_keyboard_interrupt(self, bg):
        def interrupt(ctx):
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            attempt(Task(interrupt)).run(bg)
