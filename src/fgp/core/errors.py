"""
Structured error types for fgp.

Every failure that fgp itself constructs is an ``FgpError`` carrying a
category, an optional chained cause, and a ``to_dict()`` view for structured
logging. User code is free to fail with any ``Exception``; these types only
cover the failures the toolkit has to invent on its own.

Manifesto:
    - **Errors are values:** combinators return ``Err(exc)``, they do not raise
    - **Never ambiguous:** a missing error is replaced by a placeholder, so a
      failure can never look like a success without a marker
    - **Nothing dropped:** when two things fail together both are kept
      (``join_errors``)
    - **Inspectable:** ``is_error`` walks groups and cause chains

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                         FgpError                             │
        │               (category, cause, to_dict())                   │
        ├─────────────────────────────────────────────────────────────┤
        │  NilError            placeholder for a None error            │
        │  MissingValueError   Option was Nothing                      │
        │  PanicError          exception caught by attempt()           │
        │  NoTasksError        race() called with nothing to race      │
        │  InvalidArgumentError caller passed an unusable argument     │
        │  ContextError        (fgp.task.context) Canceled, Deadline   │
        └─────────────────────────────────────────────────────────────┘

        join_errors(a, b)  ──>  ExceptionGroup("...", [a, b])
        is_error(err, target) ──> walks group members and __cause__

Examples:
    >>> err = NilError("result: nil error")
    >>> err.category
    <ErrorCategory.PLACEHOLDER: 'PLACEHOLDER'>
    >>> joined = join_errors(ValueError("use"), OSError("release"))
    >>> [type(e).__name__ for e in joined.exceptions]
    ['ValueError', 'OSError']
    >>> is_error(joined, OSError)
    True

Tags:
    error-handling, exception-hierarchy, error-context, fgp-core

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories used for classification and logging.

    Attributes:
        CANCELLATION: Context was canceled or its deadline passed
        PLACEHOLDER: A required error or value was absent
        AGGREGATE: Several errors joined into one
        FAULT: Unexpected exception converted by ``attempt``
        ARGUMENT: Caller supplied an unusable argument
        CONFIG: Invalid settings
        INTERNAL: Bugs, unexpected state
    """

    CANCELLATION = "CANCELLATION"
    PLACEHOLDER = "PLACEHOLDER"
    AGGREGATE = "AGGREGATE"
    FAULT = "FAULT"
    ARGUMENT = "ARGUMENT"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


class FgpError(Exception):
    """
    Base exception for every error fgp constructs.

    Subclasses set ``default_category``; callers may override it per
    instance. Passing ``cause`` also sets ``__cause__`` so tracebacks and
    ``is_error`` see the chain.

    Examples:
        >>> err = FgpError("boom")
        >>> err.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> wrapped = FgpError("outer", cause=KeyError("k"))
        >>> wrapped.cause
        KeyError('k')
        >>> wrapped.to_dict()["cause"]
        "KeyError: 'k'"
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class NilError(FgpError):
    """Placeholder substituted wherever a caller supplied ``None`` as an error."""

    default_category = ErrorCategory.PLACEHOLDER


class MissingValueError(FgpError):
    """An optional value was absent where one was required."""

    default_category = ErrorCategory.PLACEHOLDER

    def __init__(self, message: str = "option: missing value", **kwargs: Any):
        super().__init__(message, **kwargs)


class PanicError(FgpError):
    """An unexpected exception escaped a task and was converted by ``attempt``."""

    default_category = ErrorCategory.FAULT


class NoTasksError(FgpError):
    """``race`` was asked to pick a winner among zero tasks."""

    default_category = ErrorCategory.ARGUMENT

    def __init__(self, message: str = "task: race requires at least one task", **kwargs: Any):
        super().__init__(message, **kwargs)


class InvalidArgumentError(FgpError):
    """A combinator received an argument it cannot work with."""

    default_category = ErrorCategory.ARGUMENT


def join_errors(*errors: BaseException | None, message: str = "joined errors") -> Exception | None:
    """
    Combine errors into one, keeping every cause inspectable.

    ``None`` entries are skipped. No errors yields ``None``; a single error is
    returned as-is; two or more become an ``ExceptionGroup``.

    Args:
        *errors: Errors to join (``None`` entries are ignored)
        message: Message for the resulting group

    Returns:
        None, the single error, or an ``ExceptionGroup`` of all of them
    """
    present = [e for e in errors if e is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]  # type: ignore[return-value]
    return ExceptionGroup(message, present)  # type: ignore[type-var]


def is_error(err: BaseException | None, target: BaseException | type[BaseException]) -> bool:
    """
    Report whether ``err`` is, contains, or was caused by ``target``.

    ``target`` may be an exception instance (matched by identity) or an
    exception type (matched by ``isinstance``). Members of exception groups
    and ``__cause__`` chains are searched, with cycle protection.
    """
    if err is None:
        return False
    seen: set[int] = set()
    stack: list[BaseException] = [err]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(target, type):
            if isinstance(current, target):
                return True
        elif current is target:
            return True
        if isinstance(current, BaseExceptionGroup):
            stack.extend(current.exceptions)
        if current.__cause__ is not None:
            stack.append(current.__cause__)
    return False


__all__ = [
    "ErrorCategory",
    "FgpError",
    "NilError",
    "MissingValueError",
    "PanicError",
    "NoTasksError",
    "InvalidArgumentError",
    "join_errors",
    "is_error",
]
