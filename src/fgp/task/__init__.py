"""
fgp.task: cancellable effects and concurrency combinators.

Modules:
    context.py   ─ Context tree: background, with_cancel, with_timeout
    task.py      ─ Task, constructors, sequential combinators, interop
    timeout.py   ─ timeout, delay, sleep
    retry.py     ─ RetryPolicy and backoff strategies
    parallel.py  ─ traverse_par_n, race, par_zip

Example:
    >>> from fgp.task import background, traverse_par_n, pure
    >>> traverse_par_n([1, 2, 3], 2, lambda n: pure(n * n)).run(background())
    Ok([1, 4, 9])
"""

from fgp.task.context import (
    CancelContext,
    Canceled,
    Context,
    ContextError,
    DeadlineExceeded,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
)
from fgp.task.parallel import (
    both,
    par_map_n,
    par_zip,
    race,
    sequence_par,
    traverse_par,
    traverse_par_n,
)
from fgp.task.retry import (
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    RetryPolicy,
    retry,
)
from fgp.task.task import (
    Task,
    attempt,
    bracket,
    fail,
    from_fn,
    from_option,
    from_result,
    pure,
    sequence,
    to_result_task,
)
from fgp.task.timeout import delay, sleep, timeout

__all__ = [
    # context
    "Context",
    "CancelContext",
    "ContextError",
    "Canceled",
    "DeadlineExceeded",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
    # task
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
    # timeout
    "timeout",
    "delay",
    "sleep",
    # retry
    "RetryPolicy",
    "ExponentialBackoff",
    "LinearBackoff",
    "ConstantBackoff",
    "retry",
    # parallel
    "traverse_par_n",
    "traverse_par",
    "sequence_par",
    "par_map_n",
    "race",
    "par_zip",
    "both",
]
