"""Shared scheduler provider.

Most delay containers never bring their own scheduler. They all share one,
created the first time any of them registers a callback and kept for the
rest of the process.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SHARED SCHEDULER                                                             │
│                                                                               │
│   obj_a.register_callback(cb) ──┐                                             │
│   obj_b.register_callback(cb) ──┼──► get_shared_scheduler()                   │
│   obj_c.register_callback(cb) ──┘            │                                │
│                                              ▼                                │
│                                  ┌───────────────────────┐                    │
│                                  │   SchedulerProvider   │                    │
│                                  │                       │                    │
│                                  │  fast path: instance  │                    │
│                                  │  slow path: lock ──►  │                    │
│                                  │    check again,       │                    │
│                                  │    factory() once     │                    │
│                                  └───────────────────────┘                    │
│                                              │                                │
│                                              ▼                                │
│                                  one single-worker TaskScheduler              │
│                                                                               │
│  - Created lazily, exactly once, even under concurrent first use             │
│  - Never shut down here; whoever owns the process owns shutdown              │
│  - Tests swap the provider with set_provider() to inject a fake              │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from ..logging import get_logger
from ..settings import get_settings
from .protocol import TaskScheduler

logger = get_logger(__name__)

SchedulerFactory = Callable[[], TaskScheduler]


def default_scheduler_factory() -> TaskScheduler:
    """Build the backend selected by ``DELAY_SCHEDULER_BACKEND``.

    Raises:
        ImportError: If the apscheduler backend is selected but not installed.
    """
    settings = get_settings()
    if settings.scheduler_backend == "apscheduler":
        from .apscheduler_backend import APSchedulerTaskScheduler

        return APSchedulerTaskScheduler()

    from .thread_backend import ThreadTaskScheduler

    return ThreadTaskScheduler(thread_name=settings.scheduler_thread_name)


class SchedulerProvider:
    """Holds one lazily-created scheduler.

    Example:
        >>> provider = SchedulerProvider()
        >>> provider.created
        False
        >>> provider.get() is provider.get()
        True
    """

    def __init__(self, factory: SchedulerFactory | None = None) -> None:
        self._factory = factory or default_scheduler_factory
        self._scheduler: TaskScheduler | None = None
        self._lock = threading.Lock()

    def get(self) -> TaskScheduler:
        """Return the scheduler, creating it on first use.

        Factory errors propagate to the caller and leave the provider empty.
        """
        scheduler = self._scheduler
        if scheduler is not None:
            return scheduler

        with self._lock:
            if self._scheduler is None:
                scheduler = self._factory()
                logger.info(
                    "scheduler_created",
                    backend=getattr(scheduler, "name", type(scheduler).__name__),
                )
                self._scheduler = scheduler
            return self._scheduler

    @property
    def created(self) -> bool:
        """Whether the scheduler has been created yet."""
        return self._scheduler is not None

    @property
    def scheduler(self) -> TaskScheduler | None:
        """The scheduler if already created, without creating it."""
        return self._scheduler


_default_provider = SchedulerProvider()


def get_provider() -> SchedulerProvider:
    """Get the process-wide provider."""
    return _default_provider


def set_provider(provider: SchedulerProvider) -> SchedulerProvider:
    """Replace the process-wide provider and return the previous one.

    The previous provider's scheduler (if any) is left running.
    """
    global _default_provider
    previous = _default_provider
    _default_provider = provider
    return previous


def get_shared_scheduler() -> TaskScheduler:
    """Get the shared scheduler, creating it on first use."""
    return _default_provider.get()


__all__ = [
    "SchedulerFactory",
    "SchedulerProvider",
    "default_scheduler_factory",
    "get_provider",
    "get_shared_scheduler",
    "set_provider",
]
