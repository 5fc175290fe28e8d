"""
Result envelope for consistent success/failure handling.

Provides a typed Result[T] that makes success and failure explicit, carries
the error for failures, and composes through map/flat_map instead of nested
try/except blocks. It is also the boundary the task core lifts into and out
of: every task invocation returns a Result.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Never silently empty:** ``Err(None)`` becomes a ``NilError`` placeholder
    - **Functional composition:** Chain with map/flat_map; laws hold
    - **Batch-friendly:** collect_results, partition_results, zip_results

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        │                    (Type Alias)                              │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        │   (Success)     │   (Failure)     │                         │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result()          │
        │ • map()         │ • map_err()     │ • collect_results()     │
        │ • flat_map()    │ • or_else()     │ • traverse_results()    │
        │ • fold()        │ • recover()     │ • partition_results()   │
        │ • unwrap()      │ • unwrap_or()   │ • zip_results()         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from fgp.core.result import Ok, Err, Result
    >>> def divide(a: int, b: int) -> Result[float]:
    ...     if b == 0:
    ...         return Err(ValueError("Division by zero"))
    ...     return Ok(a / b)
    >>> match divide(10, 2):
    ...     case Ok(value):
    ...         print(f"Result: {value}")
    ...     case Err(error):
    ...         print(f"Error: {error}")
    Result: 5.0

    >>> Ok(10).map(lambda x: x * 2).map(lambda x: x + 1).unwrap()
    21
    >>> Err(ValueError("oops")).map(lambda x: x * 2).unwrap_or(0)
    0

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or() or pattern matching for safe extraction

    ❌ DON'T: Raise exceptions inside map/flat_map functions
    ✅ DO: Return Err from flat_map if the operation can fail

Tags:
    result-pattern, error-handling, functional-programming, monadic, fgp-core

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar, overload

from fgp.core.errors import FgpError, NilError, join_errors

if TYPE_CHECKING:
    from fgp.core.option import Option


T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Immutable; hashable when the wrapped value is. map() and flat_map() stay
    inside the Result context, the error-side operations are no-ops.

    Examples:
        >>> Ok(42).unwrap()
        42
        >>> Ok("hello").map(str.upper).unwrap()
        'HELLO'
        >>> Ok(5).fold(lambda e: -1, lambda v: v * 2)
        10
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Alias for flat_map."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        return self

    def recover(self, f: Callable[[Exception], T]) -> Result[T]:
        return self

    def fold(self, on_err: Callable[[Exception], U], on_ok: Callable[[T], U]) -> U:
        """Collapse into a single value using ``on_ok``."""
        return on_ok(self.value)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        return self

    def to_option(self) -> Option[T]:
        from fgp.core.option import Some

        return Some(self.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    Short-circuits map()/flat_map(); or_else(), recover() and unwrap_or()
    are the recovery points. Constructing ``Err(None)`` stores a ``NilError``
    so a failure always carries a distinguishing error.

    Examples:
        >>> Err(ValueError("x")).map(lambda x: x * 2).is_err()
        True
        >>> Err(ValueError("x")).or_else(lambda e: Ok("backup")).unwrap()
        'backup'
        >>> Err(None).error
        NilError('result: nil error')
    """

    error: Exception

    def __post_init__(self) -> None:
        if self.error is None:
            object.__setattr__(self, "error", NilError("result: nil error"))

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        return Err(self.error)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def recover(self, f: Callable[[Exception], T]) -> Result[T]:
        """Turn the error into a success value."""
        return Ok(f(self.error))

    def fold(self, on_err: Callable[[Exception], U], on_ok: Callable[[T], U]) -> U:
        """Collapse into a single value using ``on_err``."""
        return on_err(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_option(self) -> Option[T]:
        from fgp.core.option import Nothing

        return Nothing()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, FgpError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a zero-argument function and wrap its outcome in a Result.

    The bridge from exception-raising code into Result code.

    Examples:
        >>> import json
        >>> try_result(lambda: json.loads('{"a": 1}')).unwrap()
        {'a': 1}
        >>> try_result(lambda: json.loads('invalid')).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


def try_result_with(
    f: Callable[[], T],
    error_mapper: Callable[[Exception], Exception] | None = None,
) -> Result[T]:
    """Like try_result(), but map caught exceptions through ``error_mapper``."""
    try:
        return Ok(f())
    except Exception as e:
        if error_mapper:
            return Err(error_mapper(e))
        return Err(e)


@overload
def from_optional(value: T, error: Exception) -> Ok[T]: ...

@overload
def from_optional(value: None, error: Exception) -> Err[T]: ...

def from_optional(value: T | None, error: Exception) -> Result[T]:
    """
    Convert a value that may be None to a Result.

    Examples:
        >>> cache = {"key1": "value1"}
        >>> from_optional(cache.get("key1"), KeyError("key1")).unwrap()
        'value1'
        >>> from_optional(cache.get("missing"), KeyError("missing")).is_err()
        True
    """
    if value is None:
        return Err(error)
    return Ok(value)


def from_bool(condition: bool, ok_value: T, error: Exception) -> Result[T]:
    """Ok(ok_value) when ``condition`` holds, Err(error) otherwise."""
    if condition:
        return Ok(ok_value)
    return Err(error)


def collect_results(results: list[Result[T]]) -> Result[list[T]]:
    """
    Collect a list of Results into a Result of list (fail-fast).

    Examples:
        >>> collect_results([Ok(1), Ok(2), Ok(3)]).unwrap()
        [1, 2, 3]
        >>> str(collect_results([Ok(1), Err(ValueError("a")), Err(ValueError("b"))]).error)
        'a'
        >>> collect_results([]).unwrap()
        []
    """
    values = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


def traverse_results(items: list[T], f: Callable[[T], Result[U]]) -> Result[list[U]]:
    """Map each item to a Result and collect them, stopping at the first Err."""
    values = []
    for item in items:
        match f(item):
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


def collect_all_errors(results: list[Result[T]]) -> Result[list[T]]:
    """
    Collect results, accumulating ALL errors.

    A single failure is returned as-is; several are joined into an
    ``ExceptionGroup`` so every cause stays inspectable.

    Examples:
        >>> err = collect_all_errors([Ok(1), Err(ValueError("a")), Err(KeyError("b"))])
        >>> len(err.error.exceptions)
        2
        >>> collect_all_errors([Ok(1), Ok(2)]).unwrap()
        [1, 2]
    """
    values, errors = partition_results(results)
    if errors:
        return Err(join_errors(*errors, message=f"Multiple errors ({len(errors)})"))
    return Ok(values)


def partition_results(
    results: list[Result[T]],
) -> tuple[list[T], list[Exception]]:
    """
    Partition results into successes and failures.

    Examples:
        >>> values, errors = partition_results([Ok(1), Err(ValueError("a")), Ok(2)])
        >>> values
        [1, 2]
        >>> len(errors)
        1
    """
    values = []
    errors = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors


def collect_ok(results: list[Result[T]]) -> list[T]:
    """Successful values only; failures are ignored."""
    values, _ = partition_results(results)
    return values


def zip_results(*results: Result[Any]) -> Result[tuple[Any, ...]]:
    """
    Combine Results into a Result of a tuple; the first Err wins.

    Examples:
        >>> zip_results(Ok(1), Ok("a")).unwrap()
        (1, 'a')
        >>> zip_results(Ok(1), Err(ValueError("b")), Err(ValueError("c"))).error
        ValueError('b')
    """
    values = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(tuple(values))


__all__ = [
    # Types
    "Result",
    "Ok",
    "Err",
    # Constructors
    "try_result",
    "try_result_with",
    "from_optional",
    "from_bool",
    # Collectors
    "collect_results",
    "traverse_results",
    "collect_all_errors",
    "partition_results",
    "collect_ok",
    "zip_results",
]
