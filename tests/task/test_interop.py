"""Tests for lifting Result and Option into tasks and back."""

from fgp.core.errors import MissingValueError
from fgp.core.option import Nothing, Some
from fgp.core.result import Err, Ok
from fgp.task import (
    DeadlineExceeded,
    Task,
    background,
    delay,
    fail,
    from_option,
    from_result,
    pure,
    timeout,
    to_result_task,
    with_cancel,
)


class TestFromResult:
    """Test from_result."""

    def test_lifts_ok_and_err(self, bg):
        error = ValueError("bad")
        assert from_result(Ok(1)).run(bg) == Ok(1)
        assert from_result(Err(error)).run(bg) == Err(error)

    def test_cancellation_precedence(self, canceled_ctx):
        assert from_result(Ok(1)).run(canceled_ctx).error is canceled_ctx.err()


class TestFromOption:
    """Test from_option."""

    def test_some(self, bg):
        assert from_option(Some("v")).run(bg) == Ok("v")

    def test_nothing_default_error(self, bg):
        result = from_option(Nothing()).run(bg)
        assert isinstance(result.error, MissingValueError)

    def test_nothing_with_factory(self, bg):
        error = KeyError("user")
        assert from_option(Nothing(), lambda: error).run(bg) == Err(error)

    def test_factory_returning_none(self, bg):
        result = from_option(Nothing(), lambda: None).run(bg)
        assert isinstance(result.error, MissingValueError)

    def test_cancellation_precedence(self, canceled_ctx):
        assert from_option(Some(1)).run(canceled_ctx).error is canceled_ctx.err()


class TestToResultTask:
    """Test to_result_task."""

    def test_success(self, bg):
        assert to_result_task(pure(3)).run(bg) == Ok(Ok(3))

    def test_domain_failure_becomes_value(self, bg):
        error = ValueError("domain")
        assert to_result_task(fail(error)).run(bg) == Ok(Err(error))

    def test_cancellation_stays_failure(self, canceled_ctx):
        result = fail(ValueError("domain")).to_result_task().run(canceled_ctx)
        assert result == Err(canceled_ctx.err())

    def test_canceled_during_run(self):
        ctx = with_cancel(background())

        def cancel_midway(c):
            ctx.cancel()
            return Err(c.err())

        result = to_result_task(Task(cancel_midway)).run(ctx)
        assert result.error is ctx.err()

    def test_inner_deadline_is_a_domain_failure(self, bg):
        """A timeout on an inner child context is not the caller's cancellation."""
        result = to_result_task(timeout(delay(10.0), 0.02)).run(bg)
        match result:
            case Ok(Err(error)):
                assert isinstance(error, DeadlineExceeded)
            case _:
                raise AssertionError(f"unexpected {result!r}")
