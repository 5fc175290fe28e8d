"""Retry policies with exponential, linear and constant backoff.

A ``RetryPolicy`` describes how many times to run a task and how long to
wait in between. Waits go through the context, so a retry loop stops as
soon as its context is canceled or its deadline passes.

Example:
    >>> from fgp.task.retry import RetryPolicy, ExponentialBackoff, retry
    >>>
    >>> policy = RetryPolicy(
    ...     attempts=5,
    ...     backoff=ExponentialBackoff(base_delay=0.5, max_delay=10.0),
    ...     should_retry=RetryPolicy.retry_on(ConnectionError, TimeoutError),
    ... )
    >>> result = retry(fetch_quote, policy).run(ctx)
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from fgp.core.logging import get_logger
from fgp.core.result import Err, Ok, Result
from fgp.task.context import Context
from fgp.task.task import Task
from fgp.task.timeout import sleep

if TYPE_CHECKING:
    from fgp.core.settings import FgpSettings

logger = get_logger(__name__)

T = TypeVar("T")

Backoff = Callable[[int, Exception], float]


@dataclass(frozen=True)
class ExponentialBackoff:
    """Exponential backoff with optional jitter.

    Delay = min(base_delay * (multiplier ** (attempt - 1)), max_delay) + jitter

    Attributes:
        base_delay: Delay after the first failed attempt, in seconds
        max_delay: Maximum delay cap in seconds
        multiplier: Exponential multiplier (default: 2)
        jitter: Add randomness to prevent thundering herd
        jitter_range: Range of jitter as fraction of delay (0.0-1.0)
    """

    base_delay: float = 1.0
    max_delay: float = 60.0
    multiplier: float = 2.0
    jitter: bool = True
    jitter_range: float = 0.25

    def __call__(self, attempt: int, error: Exception | None = None) -> float:
        delay = min(
            self.base_delay * (self.multiplier ** (attempt - 1)),
            self.max_delay,
        )

        if self.jitter:
            jitter_amount = delay * self.jitter_range
            delay += random.uniform(-jitter_amount, jitter_amount)
            delay = max(0.0, delay)

        return delay


@dataclass(frozen=True)
class LinearBackoff:
    """Linear backoff strategy.

    Delay = base_delay + (increment * (attempt - 1))
    """

    base_delay: float = 1.0
    increment: float = 1.0
    max_delay: float = 30.0

    def __call__(self, attempt: int, error: Exception | None = None) -> float:
        return min(
            self.base_delay + (self.increment * (attempt - 1)),
            self.max_delay,
        )


@dataclass(frozen=True)
class ConstantBackoff:
    """Constant delay between retries."""

    delay: float = 1.0

    def __call__(self, attempt: int, error: Exception | None = None) -> float:
        return self.delay


@dataclass(frozen=True)
class RetryPolicy:
    """How often to run a task and how long to wait between runs.

    Attributes:
        attempts: Total runs allowed; values below 1 mean a single run
        delay: Fixed wait in seconds between runs
        backoff: ``(attempt, error) -> seconds``; overrides ``delay`` when set
        should_retry: ``error -> bool``; a False answer stops immediately
        on_retry: Observer called as ``(attempt, error, delay)`` before each wait
    """

    attempts: int = 1
    delay: float = 0.0
    backoff: Backoff | None = None
    should_retry: Callable[[Exception], bool] | None = None
    on_retry: Callable[[int, Exception, float], None] | None = None

    @property
    def max_attempts(self) -> int:
        return max(1, self.attempts)

    def delay_for(self, attempt: int, error: Exception) -> float:
        """Seconds to wait after failed ``attempt`` (1-based); never negative."""
        wait = self.backoff(attempt, error) if self.backoff is not None else self.delay
        return max(0.0, wait)

    @staticmethod
    def retry_on(*exc_types: type[BaseException]) -> Callable[[Exception], bool]:
        """Build a ``should_retry`` predicate matching the given exception types."""

        def predicate(error: Exception) -> bool:
            return isinstance(error, exc_types)

        return predicate

    @classmethod
    def from_settings(cls, settings: FgpSettings | None = None, **overrides: Any) -> RetryPolicy:
        """Build a policy from ``FGP_RETRY_*`` settings, with keyword overrides."""
        if settings is None:
            from fgp.core.settings import get_settings

            settings = get_settings()
        values: dict[str, Any] = {
            "attempts": settings.retry_attempts,
            "delay": settings.retry_delay,
        }
        values.update(overrides)
        return cls(**values)


def retry(task: Task[T], policy: RetryPolicy) -> Task[T]:
    """Re-run ``task`` according to ``policy`` until it succeeds.

    The loop stops at the first success, when ``should_retry`` declines,
    after the last allowed attempt (reporting the last error), or as soon as
    the context fires (reporting the context error).
    """

    def run(ctx: Context) -> Result[T]:
        max_attempts = policy.max_attempts
        attempt = 1
        while True:
            if (err := ctx.err()) is not None:
                return Err(err)

            match task.run(ctx):
                case Ok() as succeeded:
                    return succeeded
                case Err(error) as failed:
                    pass

            if policy.should_retry is not None and not policy.should_retry(error):
                logger.debug("task.retry.not_retryable", attempt=attempt, error=repr(error))
                return failed
            if attempt >= max_attempts:
                logger.debug("task.retry.exhausted", attempts=attempt, error=repr(error))
                return failed

            wait = policy.delay_for(attempt, error)
            logger.debug(
                "task.retry.attempt_failed",
                attempt=attempt,
                max_attempts=max_attempts,
                delay=wait,
                error=repr(error),
            )
            if policy.on_retry is not None:
                policy.on_retry(attempt, error, wait)
            if not sleep(ctx, wait):
                return Err(ctx.err())
            attempt += 1

    return Task(run)


__all__ = [
    "Backoff",
    "ExponentialBackoff",
    "LinearBackoff",
    "ConstantBackoff",
    "RetryPolicy",
    "retry",
]
