"""Scheduling package for delayobject.

Manifesto:
    A delayed value is only half useful if the caller has to poll it. The
    scheduling package lets a container call back once it becomes ready,
    on a background worker that many containers share without each one
    spawning its own thread.

Public API:
    - TaskScheduler: Protocol every scheduler satisfies
    - ThreadTaskScheduler: Zero-dependency single-worker backend (default)
    - APSchedulerTaskScheduler: APScheduler backend (lazy import, optional extra)
    - SchedulerProvider / get_shared_scheduler: The lazily-created shared scheduler

Tags:
    scheduling, callbacks, shared-resource, lazy-initialization, thread,
    apscheduler

Doc-Types:
    package-overview, module-index
"""

from __future__ import annotations

from .protocol import SchedulerHealth, Task, TaskScheduler
from .provider import (
    SchedulerFactory,
    SchedulerProvider,
    default_scheduler_factory,
    get_provider,
    get_shared_scheduler,
    set_provider,
)
from .thread_backend import ThreadTaskScheduler

# Optional backend (lazy import, requires extra)
# APSchedulerTaskScheduler:  pip install delay-object[apscheduler]


def __getattr__(name: str):  # noqa: N807
    """Lazy import optional backends to avoid ImportError when extras are missing."""
    if name == "APSchedulerTaskScheduler":
        from .apscheduler_backend import APSchedulerTaskScheduler

        return APSchedulerTaskScheduler
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "APSchedulerTaskScheduler",
    "SchedulerFactory",
    "SchedulerHealth",
    "SchedulerProvider",
    "Task",
    "TaskScheduler",
    "ThreadTaskScheduler",
    "default_scheduler_factory",
    "get_provider",
    "get_shared_scheduler",
    "set_provider",
]
