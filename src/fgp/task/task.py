"""
Task: a suspended, cancellable computation.

A ``Task[T]`` wraps a function ``Context -> Result[T]``. Nothing happens until
it is run; running it twice runs the logic twice. Tasks hold no mutable state,
so one value can be shared between threads and composed freely.

Manifesto:
    - **Suspended:** building a task performs no work
    - **Cancellation first:** every constructor and combinator checks the
      context at its boundaries, and a fired context wins over a value
    - **Errors are values:** running a task returns ``Ok``/``Err``; nothing
      is raised across the contract except by code the caller wrote
    - **One recovery boundary:** only ``attempt`` converts raised exceptions

Architecture:
    ::

        from_fn / pure / fail / from_result / from_option
                     │
                     ▼
        ┌─────────────────────────────────────────────┐
        │ Task(fn: Context -> Result[T])              │
        │   .run(ctx) / task(ctx)                     │
        ├─────────────────────────────────────────────┤
        │ .map  .flat_map/.chain  .tap  .tap_err      │
        │ .ensure  .timeout  .retry  .attempt         │
        │ .to_result_task                             │
        └─────────────────────────────────────────────┘
                     │
                     ▼
        bracket(acquire, use, release)   sequence(tasks)

Examples:
    >>> from fgp.task import pure, background
    >>> pure(20).map(lambda x: x + 1).flat_map(lambda x: pure(x * 2)).run()
    Ok(42)

Tags:
    task, effect, cancellation, composition, fgp-task

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from fgp.core.errors import MissingValueError, NilError, PanicError, is_error, join_errors
from fgp.core.logging import get_logger
from fgp.core.option import Nothing, Option, Some
from fgp.core.result import Err, Ok, Result
from fgp.task.context import Context, background

if TYPE_CHECKING:
    from fgp.task.retry import RetryPolicy

logger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Task(Generic[T]):
    """
    A cancellable unit of work producing ``Result[T]``.

    ``fn`` receives the context the task is run with. Prefer the
    constructors (``from_fn``, ``pure``, ``fail``) over building ``Task``
    directly: they add the cancellation check at the entry boundary.

    Examples:
        >>> Task(lambda ctx: Ok(1)).run()
        Ok(1)
        >>> from_fn(lambda ctx: Err(ValueError("bad"))).map(str).run()
        Err(ValueError('bad'))
    """

    fn: Callable[[Context], Result[T]]

    def run(self, ctx: Context | None = None) -> Result[T]:
        """Run the task, blocking until it completes. ``None`` means ``background()``."""
        return self.fn(ctx if ctx is not None else background())

    def __call__(self, ctx: Context | None = None) -> Result[T]:
        return self.run(ctx)

    @classmethod
    def from_fn(cls, fn: Callable[[Context], Result[T]]) -> Task[T]:
        return from_fn(fn)

    # ── Sequential combinators ─────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Task[U]:
        """Transform the success value; a context fired meanwhile wins."""

        def run(ctx: Context) -> Result[U]:
            match self.fn(ctx):
                case Err() as failed:
                    return failed
                case Ok(value):
                    if (err := ctx.err()) is not None:
                        return Err(err)
                    return Ok(f(value))

        return Task(run)

    def flat_map(self, f: Callable[[T], Task[U]]) -> Task[U]:
        """Feed the success value into a task-producing function.

        ``f`` is not called once the context has fired.
        """

        def run(ctx: Context) -> Result[U]:
            match self.fn(ctx):
                case Err() as failed:
                    return failed
                case Ok(value):
                    if (err := ctx.err()) is not None:
                        return Err(err)
                    return f(value).run(ctx)

        return Task(run)

    def chain(self, f: Callable[[T], Task[U]]) -> Task[U]:
        """Alias for flat_map."""
        return self.flat_map(f)

    def tap(self, f: Callable[[T], None]) -> Task[T]:
        """Observe the success value without changing the outcome."""

        def run(ctx: Context) -> Result[T]:
            result = self.fn(ctx)
            if isinstance(result, Ok):
                f(result.value)
            return result

        return Task(run)

    def tap_err(self, f: Callable[[Exception], None]) -> Task[T]:
        """Observe the error without changing the outcome."""

        def run(ctx: Context) -> Result[T]:
            result = self.fn(ctx)
            if isinstance(result, Err):
                f(result.error)
            return result

        return Task(run)

    def ensure(self, cleanup: Callable[[], None]) -> Task[T]:
        """Run ``cleanup()`` after the task, whatever its outcome."""

        def run(ctx: Context) -> Result[T]:
            try:
                return self.fn(ctx)
            finally:
                cleanup()

        return Task(run)

    # ── Fluent forms of module-level combinators ───────────────────

    def timeout(self, seconds: float) -> Task[T]:
        from fgp.task.timeout import timeout

        return timeout(self, seconds)

    def retry(self, policy: RetryPolicy) -> Task[T]:
        from fgp.task.retry import retry

        return retry(self, policy)

    def attempt(self) -> Task[T]:
        return attempt(self)

    def to_result_task(self) -> Task[Result[T]]:
        return to_result_task(self)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__qualname__", type(self.fn).__name__)
        return f"Task({name})"


# =============================================================================
# CONSTRUCTORS
# =============================================================================


def from_fn(fn: Callable[[Context], Result[T]]) -> Task[T]:
    """Wrap ``fn``; it is not called when the context has already fired."""

    def run(ctx: Context) -> Result[T]:
        if (err := ctx.err()) is not None:
            return Err(err)
        return fn(ctx)

    return Task(run)


def pure(value: T) -> Task[T]:
    """Succeed with ``value`` unless the context has fired."""

    def run(ctx: Context) -> Result[T]:
        if (err := ctx.err()) is not None:
            return Err(err)
        return Ok(value)

    return Task(run)


def fail(error: Exception | None) -> Task[Any]:
    """Always fail with ``error`` (a fired context's error takes precedence)."""
    if error is None:
        error = NilError("task: fail called with nil error")

    def run(ctx: Context) -> Result[Any]:
        if (err := ctx.err()) is not None:
            return Err(err)
        return Err(error)

    return Task(run)


# =============================================================================
# RESOURCE SAFETY AND BATCHES
# =============================================================================


def bracket(
    acquire: Task[R],
    use: Callable[[R], Task[T]],
    release: Callable[[Context, R, BaseException | None], Exception | None],
) -> Task[T]:
    """
    Acquire a resource, use it, and always release it.

    ``release(ctx, resource, use_error)`` runs exactly once whenever
    acquisition succeeded. It returns its own error or ``None``. When both
    ``use`` and ``release`` fail the result carries an ``ExceptionGroup`` of
    both. An exception raised by ``use`` is passed to ``release`` and then
    re-raised.

    Example:
        def close(ctx, conn, use_err):
            conn.close()
            return None

        bracket(from_fn(connect), lambda conn: from_fn(conn.query), close).run(ctx)
    """

    def run(ctx: Context) -> Result[T]:
        match acquire.run(ctx):
            case Err() as failed:
                return failed
            case Ok(resource):
                pass

        try:
            outcome = use(resource).run(ctx)
        except BaseException as exc:
            logger.debug("task.bracket.use_raised", error=repr(exc))
            release(ctx, resource, exc)
            raise
        use_err = outcome.error if isinstance(outcome, Err) else None
        release_err = release(ctx, resource, use_err)

        if release_err is None:
            return outcome
        logger.debug(
            "task.bracket.release_failed",
            error=repr(release_err),
            use_failed=use_err is not None,
        )
        if use_err is None:
            return Err(release_err)
        return Err(join_errors(use_err, release_err, message="task: use and release both failed"))

    return Task(run)


def sequence(tasks: Iterable[Task[T]]) -> Task[list[T]]:
    """Run tasks one after another; the first failure or cancellation aborts."""
    tasks = list(tasks)

    def run(ctx: Context) -> Result[list[T]]:
        values: list[T] = []
        for task in tasks:
            if (err := ctx.err()) is not None:
                return Err(err)
            match task.run(ctx):
                case Err() as failed:
                    return Err(failed.error)
                case Ok(value):
                    values.append(value)
        return Ok(values)

    return Task(run)


# =============================================================================
# FAULT CONTAINMENT
# =============================================================================


def attempt(task: Task[T]) -> Task[T]:
    """
    Convert an exception raised while running ``task`` into ``Err(PanicError)``.

    The ``PanicError`` message embeds the fault and its ``cause`` is the
    original exception.
    """

    def run(ctx: Context) -> Result[T]:
        try:
            return task.run(ctx)
        except Exception as exc:
            logger.debug("task.attempt.recovered", error=repr(exc))
            return Err(PanicError(f"task: panic recovered: {exc}", cause=exc))

    return Task(run)


# =============================================================================
# INTEROP WITH Result AND Option
# =============================================================================


def from_result(result: Result[T]) -> Task[T]:
    """Lift a Result; a fired context's error takes precedence."""

    def run(ctx: Context) -> Result[T]:
        if (err := ctx.err()) is not None:
            return Err(err)
        return result

    return Task(run)


def from_option(
    option: Option[T],
    error_factory: Callable[[], Exception | None] | None = None,
) -> Task[T]:
    """
    Lift an Option: ``Some(v)`` succeeds with ``v``, ``Nothing`` fails.

    The failure comes from ``error_factory()``; a missing factory, or one
    that returns ``None``, yields ``MissingValueError``.
    """

    def run(ctx: Context) -> Result[T]:
        if (err := ctx.err()) is not None:
            return Err(err)
        match option:
            case Some(value):
                return Ok(value)
            case Nothing():
                error = error_factory() if error_factory is not None else None
                return Err(error if error is not None else MissingValueError())

    return Task(run)


def to_result_task(task: Task[T]) -> Task[Result[T]]:
    """
    Turn domain failures into values while keeping cancellation a failure.

    ``Ok(Ok(v))`` on success, ``Ok(Err(e))`` on a domain failure, and
    ``Err(e)`` when ``e`` is the invoking context's own error.
    """

    def run(ctx: Context) -> Result[Result[T]]:
        match task.run(ctx):
            case Ok(value):
                return Ok(Ok(value))
            case Err(error):
                ctx_err = ctx.err()
                if ctx_err is not None and is_error(error, ctx_err):
                    return Err(error)
                return Ok(Err(error))

    return Task(run)


__all__ = [
    "Task",
    "from_fn",
    "pure",
    "fail",
    "bracket",
    "sequence",
    "attempt",
    "from_result",
    "from_option",
    "to_result_task",
]
