"""
Shared pytest fixtures and configuration for delayobject tests.

This module provides:
- A controllable clock for deterministic readiness checks
- A recording scheduler that captures schedule() calls without threads
- Isolation of the process-wide shared scheduler and cached settings
- A polling helper for assertions on background threads

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.

    def test_something(fake_clock, recording_scheduler):
        ...
"""

import sys
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

# Ensure delayobject package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from delayobject.scheduling.provider import SchedulerProvider, set_provider
from delayobject.settings import get_settings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Test Doubles
# =============================================================================


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingScheduler:
    """TaskScheduler that records schedule() calls and runs them on demand."""

    name = "recording"

    def __init__(self) -> None:
        self.calls: list[tuple[Callable[[], Any], int]] = []
        self.stopped = False

    def schedule(self, task: Callable[[], Any], delay_ms: int) -> None:
        self.calls.append((task, delay_ms))

    def shutdown(self, wait: bool = True) -> None:
        self.stopped = True

    def health(self) -> dict[str, Any]:
        return {"healthy": not self.stopped, "backend": self.name, "pending": len(self.calls)}

    def run_all(self) -> None:
        calls, self.calls = self.calls, []
        for task, _ in calls:
            task()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_clock() -> FakeClock:
    """A clock frozen at 2025-06-01T12:00:00Z."""
    return FakeClock()


@pytest.fixture
def recording_scheduler() -> RecordingScheduler:
    """A scheduler that records instead of running."""
    return RecordingScheduler()


@pytest.fixture(autouse=True)
def isolated_provider():
    """Give every test its own shared-scheduler provider.

    Any scheduler the test caused to be created is shut down afterwards.
    """
    provider = SchedulerProvider()
    previous = set_provider(provider)
    yield provider
    set_provider(previous)
    if provider.scheduler is not None:
        provider.scheduler.shutdown(wait=False)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Poll a predicate until it is true or the timeout expires."""

    def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait
