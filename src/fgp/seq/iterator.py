"""
Lazy pull iterators.

``Iter`` wraps any Python iterator and adds chainable lazy stages built on
``itertools``. Nothing is computed until a value is pulled, either with
``next_option()``, the iterator protocol, or ``to_list()``. Infinite sources
(``repeat``, ``iterate``) must be bounded with ``take``/``take_while``
before ``to_list``.

Examples:
    >>> Iter.iterate(1, lambda n: n * 2).take(5).to_list()
    [1, 2, 4, 8, 16]
    >>> it = Iter.range_(0, 2)
    >>> it.next_option(), it.next_option(), it.next_option()
    (Some(0), Some(1), Nothing)
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

from fgp.core.option import Nothing, Option, Some

T = TypeVar("T")
U = TypeVar("U")


class Iter(Generic[T]):
    """A single-pass lazy iterator. Stages consume the iterator they wrap."""

    __slots__ = ("_it",)

    def __init__(self, source: Iterable[T] = ()):
        self._it: Iterator[T] = iter(source)

    # ── Sources ────────────────────────────────────────────────────

    @classmethod
    def from_iterable(cls, source: Iterable[T]) -> Iter[T]:
        return cls(source)

    @classmethod
    def range_(cls, start: int, end: int) -> Iter[int]:
        """Integers in ``[start, end)``; empty when ``start >= end``."""
        return cls(range(start, end))

    @classmethod
    def repeat(cls, value: T) -> Iter[T]:
        """``value`` forever."""
        return cls(itertools.repeat(value))

    @classmethod
    def iterate(cls, seed: T, fn: Callable[[T], T]) -> Iter[T]:
        """``seed, fn(seed), fn(fn(seed)), ...`` forever."""

        def generate() -> Iterator[T]:
            state = seed
            while True:
                yield state
                state = fn(state)

        return cls(generate())

    # ── Pulling ────────────────────────────────────────────────────

    def next_option(self) -> Option[T]:
        """Pull the next value; ``Nothing`` once exhausted."""
        try:
            return Some(next(self._it))
        except StopIteration:
            return Nothing()

    def __iter__(self) -> Iterator[T]:
        return self._it

    def __next__(self) -> T:
        return next(self._it)

    def to_list(self) -> list[T]:
        """Drain the iterator."""
        return list(self._it)

    # ── Lazy stages ────────────────────────────────────────────────

    def map(self, fn: Callable[[T], U]) -> Iter[U]:
        return Iter(map(fn, self._it))

    def filter(self, predicate: Callable[[T], bool]) -> Iter[T]:
        return Iter(filter(predicate, self._it))

    def take(self, n: int) -> Iter[T]:
        """At most ``n`` values; a negative ``n`` behaves as zero."""
        return Iter(itertools.islice(self._it, max(0, n)))

    def drop(self, n: int) -> Iter[T]:
        """Skip ``n`` values; a negative ``n`` behaves as zero."""
        return Iter(itertools.islice(self._it, max(0, n), None))

    def take_while(self, predicate: Callable[[T], bool]) -> Iter[T]:
        return Iter(itertools.takewhile(predicate, self._it))

    def drop_while(self, predicate: Callable[[T], bool]) -> Iter[T]:
        return Iter(itertools.dropwhile(predicate, self._it))

    def __repr__(self) -> str:
        return f"Iter({self._it!r})"


__all__ = ["Iter"]
