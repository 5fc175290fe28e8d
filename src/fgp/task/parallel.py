"""Parallel orchestration: bounded traversal, race and paired execution.

WHY
───
Fan-out over a list of items (downloads, lookups, per-record transforms)
needs three things a bare ``ThreadPoolExecutor.map`` does not give: a hard
cap on concurrency, fail-fast cancellation of the siblings still running,
and results returned in input order regardless of completion order.

ARCHITECTURE
────────────
::

    traverse_par_n(items, limit, fn)
      ├── child context (always released on return)
      ├── jobs: Queue[(index, item)]  ─ filled up front, in input order
      ├── N = clamp(limit, 1, len(items)) workers on a ThreadPoolExecutor
      │     loop: pull job ─ run fn(item) ─ write results[index]
      │     on Err: publish to one-slot error queue, cancel, stop
      └── error  ─>  context error  ─>  Ok(results)

    race(*tasks)         first Ok wins, siblings canceled; all fail ─> first Err
    par_zip(left, right) both on threads, Ok((l, r)) or the first error

Related modules:
    context.py  ─ cancellation tree the workers observe
    task.py     ─ Task, the unit every worker runs

Exceptions raised (not returned) by a task inside a worker cancel the
siblings and are re-raised on the calling thread. Wrap the task with
``attempt`` to receive them as ``Err(PanicError)`` instead.

Example::

    fetch_all = traverse_par_n(urls, 8, fetch)
    match fetch_all.timeout(30.0).run(ctx):
        case Ok(pages):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

import contextlib
import queue
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fgp.core.errors import InvalidArgumentError, NoTasksError
from fgp.core.logging import get_logger
from fgp.core.result import Err, Ok, Result
from fgp.task.context import CancelContext, Context, with_cancel
from fgp.task.task import Task

logger = get_logger(__name__)

A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class _WorkItem(Generic[A]):
    """An input item tagged with its position in the input."""

    index: int
    item: A


@dataclass(frozen=True, slots=True)
class _Raised:
    """An exception that escaped a task on a worker thread."""

    exc: BaseException


_CONTEXT_DONE = object()


def _publish(channel: queue.Queue, value: Any) -> None:
    """Non-blocking put; when the channel is full the value is dropped."""
    # first write wins
    with contextlib.suppress(queue.Full):
        channel.put_nowait(value)


def _first(channel: queue.Queue) -> Any:
    try:
        return channel.get_nowait()
    except queue.Empty:
        return None


def _clamp_parallelism(total: int, requested: int) -> int:
    if requested <= 0:
        return 1
    return min(requested, total)


def _guarded(ctx: CancelContext, fn: Callable[..., None], *args: Any) -> None:
    """Run ``fn`` on a worker thread; an escaping exception cancels ``ctx`` first."""
    try:
        fn(*args)
    except Exception:
        ctx.cancel()
        raise


def _reraise(futures: list[Future]) -> None:
    for future in futures:
        future.result()


# =============================================================================
# BOUNDED TRAVERSAL
# =============================================================================


def traverse_par_n(items: Iterable[A], limit: int, fn: Callable[[A], Task[B]]) -> Task[list[B]]:
    """
    Run ``fn(item)`` for every item with at most ``limit`` running at once.

    Results keep input order. The first failure cancels the remaining work
    and is returned; later failures are dropped. A ``limit`` below 1 runs
    one at a time, and a ``limit`` above the item count is capped to it.

    Args:
        items: Inputs, snapshotted when the task is built
        limit: Maximum number of concurrently running tasks
        fn: Builds the task to run for one item

    Returns:
        A task producing the list of results in input order
    """
    items = list(items)

    def run(ctx: Context) -> Result[list[B]]:
        total = len(items)
        if total == 0:
            return Ok([])

        workers = _clamp_parallelism(total, limit)
        with with_cancel(ctx) as traversal_ctx:
            results: list[Any] = [None] * total
            jobs: queue.Queue[_WorkItem[A]] = queue.Queue(maxsize=total)
            errors: queue.Queue[Exception] = queue.Queue(maxsize=1)

            for index, item in enumerate(items):
                if traversal_ctx.done():
                    break
                jobs.put_nowait(_WorkItem(index, item))

            def worker() -> None:
                while not traversal_ctx.done():
                    try:
                        job = jobs.get_nowait()
                    except queue.Empty:
                        return
                    match fn(job.item).run(traversal_ctx):
                        case Ok(value):
                            results[job.index] = value
                        case Err(error):
                            logger.debug("task.traverse.failed", index=job.index, error=repr(error))
                            _publish(errors, error)
                            traversal_ctx.cancel()
                            return

            logger.debug("task.traverse.start", items=total, workers=workers)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fgp-traverse") as pool:
                futures = [pool.submit(_guarded, traversal_ctx, worker) for _ in range(workers)]
            _reraise(futures)

            if (error := _first(errors)) is not None:
                return Err(error)
            if (err := traversal_ctx.err()) is not None:
                return Err(err)
            return Ok(results)

    return Task(run)


def traverse_par(items: Iterable[A], fn: Callable[[A], Task[B]]) -> Task[list[B]]:
    """traverse_par_n with one worker per item."""
    items = list(items)
    return traverse_par_n(items, len(items), fn)


def sequence_par(tasks: Iterable[Task[T]]) -> Task[list[T]]:
    """Run every task concurrently, collecting results in input order."""
    tasks = list(tasks)
    return traverse_par_n(tasks, len(tasks), lambda task: task)


def par_map_n(
    items: Iterable[A],
    limit: int,
    fn: Callable[[Context, A], Result[B]] | None,
) -> Task[list[B]]:
    """Bounded parallel map with a plain ``fn(ctx, item) -> Result`` function."""
    if fn is None:
        error = InvalidArgumentError("task: par_map_n requires a function")
        return Task(lambda ctx: Err(error))
    return traverse_par_n(items, limit, lambda item: Task(lambda ctx: fn(ctx, item)))


# =============================================================================
# RACE
# =============================================================================


def race(*tasks: Task[T]) -> Task[T]:
    """
    Run all tasks concurrently and return the first success.

    The winner cancels the rest. When every task fails, the error reported
    first is returned once all have finished. If the context fires before a
    winner emerges, its error is returned immediately; losing tasks are not
    waited for.
    """

    def run(ctx: Context) -> Result[T]:
        if not tasks:
            return Err(NoTasksError())
        if (err := ctx.err()) is not None:
            return Err(err)

        with with_cancel(ctx) as race_ctx:
            outcomes: queue.Queue[Any] = queue.Queue(maxsize=len(tasks) + 1)
            race_ctx.add_done_callback(lambda _: _publish(outcomes, _CONTEXT_DONE))

            def contender(task: Task[T]) -> None:
                try:
                    outcome: Any = task.run(race_ctx)
                except Exception as exc:
                    outcome = _Raised(exc)
                _publish(outcomes, outcome)

            pool = ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="fgp-race")
            try:
                for task in tasks:
                    pool.submit(contender, task)
                return _await_winner(race_ctx, outcomes, len(tasks))
            finally:
                pool.shutdown(wait=False)

    return Task(run)


def _await_winner(race_ctx: CancelContext, outcomes: queue.Queue, total: int) -> Result[Any]:
    first_error: Exception | None = None
    reported = 0
    while reported < total:
        outcome = outcomes.get()
        if outcome is _CONTEXT_DONE:
            logger.debug("task.race.canceled", reported=reported, total=total)
            return Err(race_ctx.err())
        reported += 1
        match outcome:
            case _Raised(exc):
                raise exc
            case Ok():
                logger.debug("task.race.decided", reported=reported, total=total)
                return outcome
            case Err(error):
                if first_error is None:
                    first_error = error
    logger.debug("task.race.all_failed", total=total)
    return Err(first_error)


# =============================================================================
# PAIRED EXECUTION
# =============================================================================


def par_zip(left: Task[A], right: Task[B]) -> Task[tuple[A, B]]:
    """Run two tasks concurrently; succeed with both values as a pair.

    A failure on either side cancels the other and is returned.
    """

    def run(ctx: Context) -> Result[tuple[A, B]]:
        if (err := ctx.err()) is not None:
            return Err(err)

        with with_cancel(ctx) as zip_ctx:
            values: list[Any] = [None, None]
            errors: queue.Queue[Exception] = queue.Queue(maxsize=2)

            def side(index: int, task: Task[Any]) -> None:
                match task.run(zip_ctx):
                    case Ok(value):
                        values[index] = value
                    case Err(error):
                        _publish(errors, error)
                        zip_ctx.cancel()

            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="fgp-zip") as pool:
                futures = [
                    pool.submit(_guarded, zip_ctx, side, 0, left),
                    pool.submit(_guarded, zip_ctx, side, 1, right),
                ]
            _reraise(futures)

            if (error := _first(errors)) is not None:
                return Err(error)
            if (err := zip_ctx.err()) is not None:
                return Err(err)
            return Ok((values[0], values[1]))

    return Task(run)


def both(left: Task[A], right: Task[B]) -> Task[tuple[A, B]]:
    """Alias for par_zip."""
    return par_zip(left, right)


__all__ = [
    "traverse_par_n",
    "traverse_par",
    "sequence_par",
    "par_map_n",
    "race",
    "par_zip",
    "both",
]
