"""Zero-dependency single-worker thread scheduler.

This is the DEFAULT backend for the shared scheduler. It uses Python's stdlib
threading module and has no external dependencies.

┌──────────────────────────────────────────────────────────────────────────────┐
│  THREAD SCHEDULER ARCHITECTURE                                                │
│                                                                               │
│  schedule(task, delay_ms)                                                     │
│      │                                                                        │
│      ▼                                                                        │
│  ┌──────────────────────────────────────────────┐                             │
│  │  heap[(due_monotonic, seq, task)]            │◄── guarded by Condition     │
│  └──────────────────────────────────────────────┘                             │
│      │ notify()                                                               │
│      ▼                                                                        │
│  ┌─────────────────────────────────────────────────────────┐                  │
│  │              Daemon Thread (loop)                       │                  │
│  │                                                         │                  │
│  │   while not stopped:                                    │                  │
│  │       wait until heap[0] is due (or new task arrives)   │                  │
│  │       pop task                                          │                  │
│  │       task()   ◄── outside the lock, one at a time      │                  │
│  │                                                         │                  │
│  └─────────────────────────────────────────────────────────┘                  │
│                                                                               │
│  Key Design Decisions:                                                        │
│  1. Daemon thread — doesn't block process exit                               │
│  2. Monotonic clock — wall-clock jumps don't fire tasks early or late        │
│  3. One worker — a slow task delays the ones due after it                    │
│  4. Failures logged and counted — a bad task never kills the worker          │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from datetime import UTC, datetime
from typing import Any

from ..errors import SchedulerShutdownError
from ..logging import get_logger
from .protocol import SchedulerHealth, Task

logger = get_logger(__name__)

# Longest single wait; far-off due times are re-checked after each slice
_MAX_WAIT_SECONDS = 3600.0


class ThreadTaskScheduler:
    """Single-worker delayed task runner on a daemon thread.

    The worker thread starts with the scheduler, so every instance owns
    exactly one background thread until ``shutdown()``.

    Example:
        >>> scheduler = ThreadTaskScheduler()
        >>> scheduler.schedule(lambda: print("Tick!"), delay_ms=500)
        >>> # ... later ...
        >>> scheduler.shutdown()
    """

    name = "thread"

    def __init__(self, thread_name: str = "delay-scheduler") -> None:
        self._queue: list[tuple[float, int, Task]] = []
        self._sequence = itertools.count()
        self._condition = threading.Condition()
        self._stopped = False
        self._executed = 0
        self._failed = 0
        self._last_run: datetime | None = None
        self._thread = threading.Thread(target=self._loop, daemon=True, name=thread_name)
        self._thread.start()
        logger.debug("thread_scheduler_started", thread=thread_name)

    def schedule(self, task: Task, delay_ms: int) -> None:
        """Queue ``task`` to run once after ``delay_ms`` milliseconds.

        Raises:
            TypeError: If ``task`` is not callable.
            SchedulerShutdownError: If the scheduler has been shut down or its
                worker thread is no longer alive.
        """
        if not callable(task):
            raise TypeError(f"task must be callable, got {type(task).__name__}")

        due = time.monotonic() + max(delay_ms, 0) / 1000.0
        with self._condition:
            if self._stopped:
                raise SchedulerShutdownError(
                    "Cannot schedule task: scheduler has been shut down"
                ).with_context(backend=self.name)
            if not self._thread.is_alive():
                raise SchedulerShutdownError(
                    "Cannot schedule task: scheduler worker thread has exited"
                ).with_context(backend=self.name, thread=self._thread.name)
            heapq.heappush(self._queue, (due, next(self._sequence), task))
            self._condition.notify()

    def _next_task(self) -> Task | None:
        """Block until a task is due; None once stopped."""
        with self._condition:
            while not self._stopped:
                if not self._queue:
                    self._condition.wait()
                    continue
                remaining = self._queue[0][0] - time.monotonic()
                if remaining <= 0:
                    return heapq.heappop(self._queue)[2]
                self._condition.wait(min(remaining, _MAX_WAIT_SECONDS))
            return None

    def _loop(self) -> None:
        while (task := self._next_task()) is not None:
            try:
                task()
            except Exception:
                with self._condition:
                    self._failed += 1
                logger.exception("scheduled_task_failed", backend=self.name)
            finally:
                with self._condition:
                    self._executed += 1
                    self._last_run = datetime.now(UTC)

        logger.debug("thread_scheduler_stopped")

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker and drop tasks that have not run yet.

        Waits up to 5 seconds for a running task to complete when ``wait``.
        """
        with self._condition:
            if self._stopped:
                return
            self._stopped = True
            dropped = len(self._queue)
            self._queue.clear()
            self._condition.notify_all()

        if wait and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("scheduler_thread_did_not_stop", backend=self.name)

        logger.info("scheduler_shutdown", backend=self.name, dropped=dropped)

    def get_health(self) -> SchedulerHealth:
        """Return structured health status."""
        with self._condition:
            return SchedulerHealth(
                healthy=not self._stopped and self._thread.is_alive(),
                backend=self.name,
                pending=len(self._queue),
                executed=self._executed,
                failed=self._failed,
                last_run=self._last_run,
                extra={"thread": self._thread.name},
            )

    def health(self) -> dict[str, Any]:
        """Return scheduler health status as a dict."""
        return self.get_health().to_dict()

    @property
    def is_running(self) -> bool:
        """Check if the worker is accepting and running tasks."""
        return not self._stopped and self._thread.is_alive()

    @property
    def pending(self) -> int:
        """Number of tasks waiting to run."""
        with self._condition:
            return len(self._queue)

    @property
    def thread(self) -> threading.Thread:
        """The worker thread."""
        return self._thread
