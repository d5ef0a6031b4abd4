"""Task scheduler protocol.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TASK SCHEDULER PROTOCOL                                                      │
│                                                                               │
│  Design Philosophy:                                                           │
│  A DelayObject only needs one thing from a scheduler: "run this task once,   │
│  N milliseconds from now". Everything else (threads, job stores, executors)  │
│  is the backend's business.                                                   │
│                                                                               │
│  ┌─────────────────────────────────────────────────────────────────────┐     │
│  │                                                                     │     │
│  │   DelayObject.register_callback(cb)                                 │     │
│  │        │                                                            │     │
│  │        │ delay_ms = ready_at - now                                  │     │
│  │        ▼                                                            │     │
│  │   scheduler.schedule(cb, delay_ms) ─────┬──────────────────────┐    │     │
│  │                                         ▼                      ▼    │     │
│  │                              ┌──────────────────┐  ┌──────────────┐ │     │
│  │                              │ Thread backend   │  │ APScheduler  │ │     │
│  │                              │ (default)        │  │ backend      │ │     │
│  │                              └──────────────────┘  └──────────────┘ │     │
│  └─────────────────────────────────────────────────────────────────────┘     │
│                                                                               │
│  Contract:                                                                    │
│  - schedule() never runs the task inline, even when delay_ms <= 0            │
│  - delay_ms <= 0 means "as soon as the worker is free", never a rejection   │
│  - tasks are not guaranteed to run in registration order                     │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

Task = Callable[[], Any]


@runtime_checkable
class TaskScheduler(Protocol):
    """Protocol for one-shot delayed task execution.

    Implementations:
        - ThreadTaskScheduler: Single daemon worker thread (default)
        - APSchedulerTaskScheduler: APScheduler-based (requires [apscheduler] extra)

    Example (custom scheduler):
        >>> class InlineLoopScheduler:
        ...     name = "loop"
        ...
        ...     def schedule(self, task, delay_ms):
        ...         loop.call_later(max(delay_ms, 0) / 1000, task)
        ...
        ...     def shutdown(self, wait=True):
        ...         pass
        ...
        ...     def health(self) -> dict:
        ...         return {"healthy": True, "backend": "loop"}
    """

    name: str

    def schedule(self, task: Task, delay_ms: int) -> None:
        """Run ``task`` once, ``delay_ms`` milliseconds from now.

        Args:
            task: Zero-argument callable.
            delay_ms: Delay in milliseconds; zero or negative runs as soon
                      as possible.
        """
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and drop the ones not yet run.

        Args:
            wait: Block until the task currently running (if any) finishes.
        """
        ...

    def health(self) -> dict[str, Any]:
        """Return scheduler health status.

        Returns:
            dict with at least:
                - healthy: bool — whether the worker is alive
                - backend: str — backend name
                - pending: int — tasks waiting to run
                - executed: int — tasks run so far
                - failed: int — tasks that raised
                - last_run: str | None — ISO timestamp of the last task run
        """
        ...


@dataclass
class SchedulerHealth:
    """Structured scheduler health response."""

    healthy: bool
    backend: str
    pending: int = 0
    executed: int = 0
    failed: int = 0
    last_run: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "healthy": self.healthy,
            "backend": self.backend,
            "pending": self.pending,
            "executed": self.executed,
            "failed": self.failed,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            **self.extra,
        }
