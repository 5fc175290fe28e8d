"""Hierarchical cancellation contexts.

A ``Context`` is the ambient signal every task runs against. It can fire
exactly once, either because someone called ``cancel()`` or because its
deadline passed, and it records the error explaining why. Contexts form a
tree: firing a parent fires every descendant with the parent's error, while
firing a child never touches its parent or siblings.

Architecture:
    ::

        background()                      never fires
          └── with_cancel(bg)             fires on cancel()
                ├── with_timeout(c, 2.0)  fires on cancel() or after 2s
                └── with_cancel(c)        fires when c fires, or on cancel()

        Context
          ├── .err()        ─ None until fired, then the terminal error
          ├── .done()       ─ True once fired (never un-fires)
          ├── .wait(secs)   ─ block until fired or secs elapsed
          ├── .deadline     ─ monotonic deadline, own or inherited
          └── .add_done_callback(fn)

        CancelContext(Context)
          ├── .cancel(cause=None)  ─ idempotent, thread-safe
          └── context manager: ``with`` exit always cancels (releases)

Each node holds a back-reference to its parent, a fired flag
(``threading.Event``), its live children and pending callbacks, all guarded
by a per-node lock. Firing happens once; concurrent triggers (a deadline
timer racing an explicit cancel) resolve to whichever takes the lock first.

Example:
    >>> from fgp.task.context import background, with_timeout
    >>> with with_timeout(background(), 0.5) as ctx:
    ...     ctx.wait()
    True
    >>> type(ctx.err()).__name__
    'DeadlineExceeded'

Tags:
    cancellation, deadline, context, concurrency, fgp-task

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from fgp.core.errors import ErrorCategory, FgpError


class ContextError(FgpError):
    """Base for errors a context reports once it has fired."""

    default_category = ErrorCategory.CANCELLATION


class Canceled(ContextError):
    """The context was canceled explicitly."""

    def __init__(self, message: str = "context canceled", **kwargs):
        super().__init__(message, **kwargs)


class DeadlineExceeded(ContextError, TimeoutError):
    """The context's deadline passed.

    Inherits from built-in TimeoutError for broad exception handling.

    Attributes:
        timeout: The timeout in seconds that was exceeded, when known
    """

    def __init__(self, timeout: float | None = None, **kwargs):
        self.timeout = timeout
        msg = "context deadline exceeded"
        if timeout is not None:
            msg += f" after {timeout}s"
        super().__init__(msg, **kwargs)


class Context:
    """A node in the cancellation tree.

    A bare ``Context`` has no trigger of its own; it only fires when its
    parent does. ``background()`` returns the root, which never fires.
    """

    def __init__(self, parent: Context | None = None, deadline: float | None = None):
        self._parent = parent
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._err: Exception | None = None
        self._children: set[Context] = set()
        self._callbacks: list[Callable[[Context], None]] = []
        self._timer: threading.Timer | None = None
        if deadline is None and parent is not None:
            deadline = parent.deadline
        self._deadline = deadline
        if parent is not None:
            parent._attach(self)

    @property
    def deadline(self) -> float | None:
        """Monotonic-clock deadline, or None when there is none."""
        return self._deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline (negative once passed), or None."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def err(self) -> Exception | None:
        """The terminal error, or None while the context is live."""
        return self._err

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context fires or ``timeout`` elapses.

        Returns:
            True if the context has fired
        """
        return self._done.wait(timeout)

    def add_done_callback(self, fn: Callable[[Context], None]) -> None:
        """Call ``fn(self)`` once the context fires (immediately if it already has)."""
        with self._lock:
            if self._err is None:
                self._callbacks.append(fn)
                return
        fn(self)

    # ── Tree maintenance ─────────────────────────────────────────────

    def _fire(self, err: Exception) -> bool:
        with self._lock:
            if self._err is not None:
                return False
            self._err = err
            self._done.set()
            children = list(self._children)
            self._children.clear()
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None

        if timer is not None:
            timer.cancel()
        for child in children:
            child._fire(err)
        if self._parent is not None:
            self._parent._detach(self)
        for callback in callbacks:
            callback(self)
        return True

    def _attach(self, child: Context) -> None:
        with self._lock:
            if self._err is None:
                self._children.add(child)
                return
            err = self._err
        child._fire(err)

    def _detach(self, child: Context) -> None:
        with self._lock:
            self._children.discard(child)

    def __repr__(self) -> str:
        state = "live" if self._err is None else f"fired: {self._err!r}"
        return f"{type(self).__name__}({state})"


class _Background(Context):
    """Root context: never fires, keeps no children."""

    def _attach(self, child: Context) -> None:
        return None


class CancelContext(Context):
    """A context that can be fired explicitly.

    Use it as a context manager so it is always released::

        with with_cancel(parent) as ctx:
            task.run(ctx)
        # ctx is canceled here, detached from parent, timer stopped
    """

    def cancel(self, cause: Exception | None = None) -> None:
        """Fire the context. ``cause`` becomes its error; defaults to ``Canceled``."""
        self._fire(cause if cause is not None else Canceled())

    def _expire(self, timeout: float | None) -> None:
        self._fire(DeadlineExceeded(timeout))

    def _start_timer(self, timeout: float | None) -> None:
        remaining = self.remaining()
        if remaining is None:
            return
        if remaining <= 0:
            self._expire(timeout)
            return
        timer = threading.Timer(remaining, self._expire, args=(timeout,))
        timer.daemon = True
        with self._lock:
            if self._err is not None:
                return
            self._timer = timer
            timer.start()

    def __enter__(self) -> CancelContext:
        return self

    def __exit__(self, *args) -> None:
        self.cancel()


_BACKGROUND = _Background()


def background() -> Context:
    """The root context. It never fires and has no deadline."""
    return _BACKGROUND


def with_cancel(parent: Context) -> CancelContext:
    """Derive a child that fires when ``parent`` does or when canceled."""
    return CancelContext(parent)


def with_deadline(parent: Context, deadline: float, timeout: float | None = None) -> CancelContext:
    """Derive a child that also fires at the monotonic time ``deadline``.

    When the parent's deadline is already sooner, the child simply inherits
    it (whichever comes first).
    """
    parent_deadline = parent.deadline
    if parent_deadline is not None and parent_deadline <= deadline:
        return CancelContext(parent)
    ctx = CancelContext(parent, deadline=deadline)
    ctx._start_timer(timeout)
    return ctx


def with_timeout(parent: Context, seconds: float) -> CancelContext:
    """Derive a child that also fires ``seconds`` from now."""
    return with_deadline(parent, time.monotonic() + seconds, timeout=seconds)


__all__ = [
    "Context",
    "CancelContext",
    "ContextError",
    "Canceled",
    "DeadlineExceeded",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]
