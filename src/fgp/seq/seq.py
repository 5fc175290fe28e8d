"""
Eager sequence helpers.

Every function takes an iterable, consumes it once and returns a fresh
``list`` (or ``dict``); inputs are never mutated or aliased. Names that
would shadow builtins carry a trailing underscore (``map_``, ``filter_``,
``any_``, ``all_``, ``reduce_``, ``zip_``).

Examples:
    >>> fold_left([1, 2, 3], 0, lambda acc, n: acc + n)
    6
    >>> chunk([1, 2, 3, 4, 5], 2)
    [[1, 2], [3, 4], [5]]
    >>> window([1, 2, 3], 2)
    [[1, 2], [2, 3]]
    >>> reduce_([], lambda a, b: a + b)
    Nothing
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

from fgp.core.option import Nothing, Option, Some

A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def map_(items: Iterable[A], fn: Callable[[A], B]) -> list[B]:
    return [fn(item) for item in items]


def filter_(items: Iterable[T], predicate: Callable[[T], bool]) -> list[T]:
    return [item for item in items if predicate(item)]


def flat_map(items: Iterable[A], fn: Callable[[A], Iterable[B]]) -> list[B]:
    """Map each item to an iterable and concatenate the results."""
    return list(itertools.chain.from_iterable(fn(item) for item in items))


def fold_left(items: Iterable[A], init: B, fn: Callable[[B, A], B]) -> B:
    """Accumulate left to right starting from ``init``."""
    acc = init
    for item in items:
        acc = fn(acc, item)
    return acc


def reduce_(items: Iterable[T], fn: Callable[[T, T], T]) -> Option[T]:
    """Fold without a seed; ``Nothing`` for empty input."""
    iterator = iter(items)
    try:
        acc = next(iterator)
    except StopIteration:
        return Nothing()
    for item in iterator:
        acc = fn(acc, item)
    return Some(acc)


def find(items: Iterable[T], predicate: Callable[[T], bool]) -> Option[T]:
    """First item satisfying ``predicate``."""
    for item in items:
        if predicate(item):
            return Some(item)
    return Nothing()


def any_(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    return any(predicate(item) for item in items)


def all_(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    """True for empty input."""
    return all(predicate(item) for item in items)


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items by key; keys and group members keep first-seen order."""
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def distinct_by(items: Iterable[T], key: Callable[[T], K]) -> list[T]:
    """Keep the first item for each key."""
    seen: set[K] = set()
    out: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out


def partition(items: Iterable[T], predicate: Callable[[T], bool]) -> tuple[list[T], list[T]]:
    """Split into (matching, non-matching), each in input order."""
    matched: list[T] = []
    rest: list[T] = []
    for item in items:
        (matched if predicate(item) else rest).append(item)
    return matched, rest


def zip_(left: Iterable[A], right: Iterable[B]) -> list[tuple[A, B]]:
    """Pair items positionally, stopping at the shorter input."""
    return list(zip(left, right))


def chunk(items: Iterable[T], size: int) -> list[list[T]]:
    """Consecutive chunks of ``size``; the last may be shorter. ``size <= 0`` gives ``[]``."""
    if size <= 0:
        return []
    values = list(items)
    return [values[i : i + size] for i in range(0, len(values), size)]


def window(items: Iterable[T], size: int) -> list[list[T]]:
    """Sliding windows of ``size``; ``[]`` when ``size <= 0`` or exceeds the input."""
    values = list(items)
    if size <= 0 or size > len(values):
        return []
    return [values[i : i + size] for i in range(len(values) - size + 1)]


def scan_left(items: Iterable[A], init: B, fn: Callable[[B, A], B]) -> list[B]:
    """Running accumulation, starting with ``init`` itself."""
    return list(itertools.accumulate(items, fn, initial=init))


def collect(items: Iterable[A], fn: Callable[[A], Option[B]]) -> list[B]:
    """Filter and map in one pass: keep the values of the ``Some`` results."""
    out: list[B] = []
    for item in items:
        match fn(item):
            case Some(value):
                out.append(value)
    return out


__all__ = [
    "map_",
    "filter_",
    "flat_map",
    "fold_left",
    "reduce_",
    "find",
    "any_",
    "all_",
    "group_by",
    "distinct_by",
    "partition",
    "zip_",
    "chunk",
    "window",
    "scan_left",
    "collect",
]
