"""Time-bounding for tasks.

Deadlines are carried by the context rather than enforced by a watchdog
thread: ``timeout`` derives a child context that fires after the given
number of seconds, and every cancellation-aware task running under it
observes the deadline at its next check or wait.

Example:
    >>> from fgp.task import delay, background
    >>> delay(5.0).timeout(0.05).run(background())
    Err(DeadlineExceeded('context deadline exceeded after 0.05s'))
"""

from __future__ import annotations

from typing import TypeVar

from fgp.core.result import Err, Ok, Result
from fgp.task.context import Context, with_timeout
from fgp.task.task import Task

T = TypeVar("T")


def sleep(ctx: Context, seconds: float) -> bool:
    """Wait ``seconds`` unless the context fires first.

    Returns:
        True if the full duration elapsed, False if the context fired
    """
    if seconds <= 0:
        return True
    return not ctx.wait(seconds)


def timeout(task: Task[T], seconds: float) -> Task[T]:
    """Run ``task`` under a child context that expires after ``seconds``.

    A non-positive ``seconds`` returns the task unchanged. The child context
    is released as soon as the task returns.
    """
    if seconds <= 0:
        return task

    def run(ctx: Context) -> Result[T]:
        with with_timeout(ctx, seconds) as bounded:
            return task.run(bounded)

    return Task(run)


def delay(seconds: float) -> Task[None]:
    """Succeed with ``None`` after ``seconds``; fail if the context fires first."""

    def run(ctx: Context) -> Result[None]:
        if not sleep(ctx, seconds):
            return Err(ctx.err())
        return Ok(None)

    return Task(run)


__all__ = ["sleep", "timeout", "delay"]
