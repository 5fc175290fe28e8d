"""Function composition helpers.

Examples:
    >>> pipe(5, lambda n: n * 2, lambda n: n + 3)
    13
    >>> compose(lambda n: n * 2, lambda n: n + 3)(5)
    16
    >>> curry(lambda a, b: a - b)(10)(4)
    6
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
T = TypeVar("T")


def identity(value: T) -> T:
    return value


def constant(value: T) -> Callable[[], T]:
    """A zero-argument function that always returns ``value``."""
    return lambda: value


def pipe(value: Any, *fns: Callable[[Any], Any]) -> Any:
    """Thread ``value`` through ``fns`` left to right."""
    return functools.reduce(lambda acc, fn: fn(acc), fns, value)


def compose(*fns: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Compose right to left: ``compose(f, g)(x) == f(g(x))``. No functions gives identity."""

    def composed(value: Any) -> Any:
        return pipe(value, *reversed(fns))

    return composed


def curry(fn: Callable[[A, B], C]) -> Callable[[A], Callable[[B], C]]:
    """Turn a two-argument function into a chain of one-argument functions."""
    return lambda a: lambda b: fn(a, b)


__all__ = ["identity", "constant", "pipe", "compose", "curry"]
