"""
Shared pytest fixtures and configuration for fgp tests.

This module provides:
- Context fixtures (background, live cancelable, already canceled)
- A peak-concurrency tracker for the parallel combinators
- Settings cache isolation

Usage:
    Fixtures are auto-discovered by pytest; request them as arguments.

    def test_something(canceled_ctx):
        assert pure(1).run(canceled_ctx).is_err()
"""

import threading
from collections.abc import Generator
from pathlib import Path

import pytest

from fgp.core.settings import get_settings
from fgp.task import CancelContext, Context, background, with_cancel


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.path).relative_to(Path(__file__).parent)

        if test_path.name in {"test_parallel.py", "test_context.py", "test_timeout.py"}:
            item.add_marker(pytest.mark.concurrency)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "concurrency", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so env overrides in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Context Fixtures
# =============================================================================


@pytest.fixture
def bg() -> Context:
    """The root context."""
    return background()


@pytest.fixture
def live_ctx() -> Generator[CancelContext, None, None]:
    """A cancelable context, released after the test."""
    with with_cancel(background()) as ctx:
        yield ctx


@pytest.fixture
def canceled_ctx() -> CancelContext:
    """A context that has already fired with ``Canceled``."""
    ctx = with_cancel(background())
    ctx.cancel()
    return ctx


# =============================================================================
# Concurrency Helpers
# =============================================================================


class PeakTracker:
    """Counts concurrently active sections and remembers the maximum."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def __enter__(self) -> "PeakTracker":
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        return self

    def __exit__(self, *args) -> None:
        with self._lock:
            self.active -= 1


@pytest.fixture
def peak_tracker() -> PeakTracker:
    return PeakTracker()


class CallCounter:
    """Thread-safe invocation counter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.count = 0

    def increment(self) -> int:
        with self._lock:
            self.count += 1
            return self.count


@pytest.fixture
def counter() -> CallCounter:
    return CallCounter()
