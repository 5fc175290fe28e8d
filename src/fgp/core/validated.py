"""
Validated: accumulate every error instead of stopping at the first.

Use it for input validation, DTO decoding and config parsing where all
problems should be reported at once. It is the accumulate-everything
counterpart of Result's fail-fast collectors (and of the task core's
fail-fast parallel traversal).

Examples:
    >>> def positive(n: int) -> Validated[str, int]:
    ...     return Valid(n) if n > 0 else Invalid([f"{n} is not positive"])
    >>> traverse_validated([1, -2, -3], positive).errors
    ('-2 is not positive', '-3 is not positive')
    >>> traverse_validated([1, 2], positive)
    Valid([1, 2])
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from fgp.core.errors import join_errors
from fgp.core.result import Err, Ok, Result

E = TypeVar("E")
T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Valid(Generic[E, T]):
    value: T

    def is_valid(self) -> bool:
        return True

    @property
    def errors(self) -> tuple[E, ...]:
        return ()

    def unsafe_value(self) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Validated[E, U]:
        return Valid(f(self.value))

    def __repr__(self) -> str:
        return f"Valid({self.value!r})"


@dataclass(frozen=True, slots=True)
class Invalid(Generic[E, T]):
    """Failed validation; ``errors`` is always an immutable tuple copy."""

    errors: tuple[E, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", tuple(self.errors))

    def is_valid(self) -> bool:
        # An Invalid with no recorded errors still counts as invalid.
        return False

    def unsafe_value(self) -> None:
        """Invalid carries no value."""
        return None

    def map(self, f: Callable[[T], U]) -> Validated[E, U]:
        return Invalid(self.errors)

    def __repr__(self) -> str:
        return f"Invalid({list(self.errors)!r})"


Validated = Valid[E, T] | Invalid[E, T]


def zip_validated(a: Validated[E, Any], b: Validated[E, Any]) -> Validated[E, tuple[Any, Any]]:
    """Pair two values, accumulating errors from both sides."""
    if isinstance(a, Valid) and isinstance(b, Valid):
        return Valid((a.value, b.value))
    return Invalid(a.errors + b.errors)


def sequence_validated(items: Iterable[Validated[E, T]]) -> Validated[E, list[T]]:
    return traverse_validated(items, lambda v: v)


def traverse_validated(items: Iterable[Any], f: Callable[[Any], Validated[E, U]]) -> Validated[E, list[U]]:
    """Validate every item and collect all errors; empty input is ``Valid([])``."""
    values: list[U] = []
    errors: list[E] = []
    invalid = False
    for item in items:
        checked = f(item)
        if isinstance(checked, Valid):
            values.append(checked.value)
            continue
        invalid = True
        errors.extend(checked.errors)
    if invalid:
        return Invalid(tuple(errors))
    return Valid(values)


def from_result(result: Result[T]) -> Validated[Exception, T]:
    match result:
        case Ok(value):
            return Valid(value)
        case Err(error):
            return Invalid((error,))


def to_result(validated: Validated[Exception, T]) -> Result[T]:
    """
    Convert back to a Result.

    Several errors are joined into one ``ExceptionGroup``; a single error is
    returned unchanged.
    """
    if isinstance(validated, Valid):
        return Ok(validated.value)
    return Err(join_errors(*validated.errors, message="validation failed"))


__all__ = [
    "Validated",
    "Valid",
    "Invalid",
    "zip_validated",
    "sequence_validated",
    "traverse_validated",
    "from_result",
    "to_result",
]
