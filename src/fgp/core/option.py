"""
Option envelope for presence/absence of a value.

``Some(value)`` holds a value (``Some(None)`` is legal and distinct from
absence); ``Nothing()`` holds none. Option mirrors the Ok/Err API of
``fgp.core.result`` so the two compose: ``to_result()`` turns absence into an
error, ``Result.to_option()`` goes the other way, and the task core lifts
Options with ``fgp.task.from_option``.

Manifesto:
    - **Absence is explicit:** ``Some(None)`` is not ``Nothing()``
    - **No silent failures:** ``to_result()`` without a factory still yields a
      descriptive ``MissingValueError``
    - **Lawful:** map/flat_map obey the functor and monad laws

Examples:
    >>> Some("config").unwrap_or("default")
    'config'
    >>> Nothing().unwrap_or("default")
    'default'
    >>> Some(3).map(lambda x: x + 1)
    Some(4)
    >>> Nothing().to_result().error
    MissingValueError('option: missing value')

Tags:
    option-pattern, null-handling, functional-programming, fgp-core

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from fgp.core.errors import MissingValueError
from fgp.core.result import Err, Ok, Result

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Some(Generic[T]):
    """Option holding a value."""

    value: T

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False

    def get(self) -> tuple[T, bool]:
        """Return ``(value, True)``."""
        return self.value, True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return self.value

    def or_else(self, other: Option[T]) -> Option[T]:
        return self

    def or_else_get(self, f: Callable[[], Option[T]]) -> Option[T]:
        return self

    def to_optional(self) -> T | None:
        return self.value

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        """Keep the value only when ``predicate`` accepts it."""
        if predicate(self.value):
            return self
        return Nothing()

    def map(self, f: Callable[[T], U]) -> Option[U]:
        return Some(f(self.value))

    def flat_map(self, f: Callable[[T], Option[U]]) -> Option[U]:
        return f(self.value)

    def inspect(self, f: Callable[[T], None]) -> Option[T]:
        f(self.value)
        return self

    def fold(self, on_none: Callable[[], U], on_some: Callable[[T], U]) -> U:
        return on_some(self.value)

    def to_result(self, error_factory: Callable[[], Exception | None] | None = None) -> Result[T]:
        return Ok(self.value)

    def __repr__(self) -> str:
        return f"Some({self.value!r})"


@dataclass(frozen=True, slots=True)
class Nothing(Generic[T]):
    """Option holding no value. All instances compare equal."""

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def get(self) -> tuple[None, bool]:
        """Return ``(None, False)``."""
        return None, False

    def unwrap(self) -> T:
        """Raise ``MissingValueError``; Nothing has no value to give."""
        raise MissingValueError("option: unwrap on Nothing")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return f()

    def or_else(self, other: Option[T]) -> Option[T]:
        return other

    def or_else_get(self, f: Callable[[], Option[T]]) -> Option[T]:
        return f()

    def to_optional(self) -> T | None:
        return None

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        return self

    def map(self, f: Callable[[T], U]) -> Option[U]:
        return Nothing()

    def flat_map(self, f: Callable[[T], Option[U]]) -> Option[U]:
        return Nothing()

    def inspect(self, f: Callable[[T], None]) -> Option[T]:
        return self

    def fold(self, on_none: Callable[[], U], on_some: Callable[[T], U]) -> U:
        return on_none()

    def to_result(self, error_factory: Callable[[], Exception | None] | None = None) -> Result[T]:
        """
        Convert absence into ``Err``.

        ``error_factory`` supplies the error; when it is missing or returns
        None a ``MissingValueError`` is used instead.
        """
        error = error_factory() if error_factory is not None else None
        if error is None:
            error = MissingValueError()
        return Err(error)

    def __repr__(self) -> str:
        return "Nothing"


Option = Some[T] | Nothing[T]


def from_optional(value: T | None) -> Option[T]:
    """Treat ``None`` as absence."""
    if value is None:
        return Nothing()
    return Some(value)


def from_ok(value: T, ok: bool) -> Option[T]:
    """Build an Option from a value and a presence flag."""
    if not ok:
        return Nothing()
    return Some(value)


def zip_options(*options: Option[Any]) -> Option[tuple[Any, ...]]:
    """
    Some of a tuple when every input is Some.

    Examples:
        >>> zip_options(Some(1), Some("a"))
        Some((1, 'a'))
        >>> zip_options(Some(1), Nothing())
        Nothing
    """
    values = []
    for option in options:
        match option:
            case Some(value):
                values.append(value)
            case _:
                return Nothing()
    return Some(tuple(values))


def traverse_options(items: list[T], f: Callable[[T], Option[U]]) -> Option[list[U]]:
    """Map items to Options, short-circuiting on the first Nothing."""
    values = []
    for item in items:
        match f(item):
            case Some(value):
                values.append(value)
            case _:
                return Nothing()
    return Some(values)


def sequence_options(options: list[Option[T]]) -> Option[list[T]]:
    """Some of all values when every element is Some; empty input gives ``Some([])``."""
    return traverse_options(options, lambda o: o)


__all__ = [
    "Option",
    "Some",
    "Nothing",
    "from_optional",
    "from_ok",
    "zip_options",
    "traverse_options",
    "sequence_options",
]
