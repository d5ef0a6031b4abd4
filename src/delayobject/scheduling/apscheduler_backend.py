"""APScheduler-based task scheduler.

Wraps APScheduler 3.x ``BackgroundScheduler`` with a one-thread executor to
provide the ``TaskScheduler`` protocol. Each task becomes a ``date``-trigger
job with no misfire limit, so a task whose ready time has already passed
still runs instead of being skipped as missed.

Requires the ``[apscheduler]`` extra::

    pip install delay-object[apscheduler]

.. note::

    For most use cases the zero-dependency ``ThreadTaskScheduler`` is
    sufficient. Select this backend with ``DELAY_SCHEDULER_BACKEND=apscheduler``
    when the process already runs APScheduler and should share its
    conventions for job logging and executor management.
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Any

from ..errors import SchedulerShutdownError
from ..logging import get_logger
from .protocol import SchedulerHealth, Task

logger = get_logger(__name__)


def _require_apscheduler():
    """Validate that apscheduler is installed."""
    try:
        from apscheduler.executors.pool import ThreadPoolExecutor
        from apscheduler.schedulers.background import BackgroundScheduler

        return BackgroundScheduler, ThreadPoolExecutor
    except ImportError:
        raise ImportError(
            "APScheduler is required for APSchedulerTaskScheduler. "
            "Install it with: pip install delay-object[apscheduler]"
        ) from None


class APSchedulerTaskScheduler:
    """APScheduler-based single-worker task scheduler.

    Example::

        >>> scheduler = APSchedulerTaskScheduler()
        >>> scheduler.schedule(callback, delay_ms=2_000)
        >>> # … later …
        >>> scheduler.shutdown()
    """

    name: str = "apscheduler"

    def __init__(self) -> None:
        BackgroundScheduler, ThreadPoolExecutor = _require_apscheduler()  # noqa: N806
        self._scheduler = BackgroundScheduler(
            executors={"default": ThreadPoolExecutor(max_workers=1)},
            timezone=UTC,
        )
        self._lock = threading.Lock()
        self._stopped = False
        self._executed = 0
        self._failed = 0
        self._last_run: datetime | None = None
        self._scheduler.start()
        logger.debug("apscheduler_started")

    # ------------------------------------------------------------------
    # TaskScheduler protocol
    # ------------------------------------------------------------------

    def schedule(self, task: Task, delay_ms: int) -> None:
        """Add a one-shot ``date`` job running ``task`` after ``delay_ms``.

        Raises:
            TypeError: If ``task`` is not callable.
            SchedulerShutdownError: If the scheduler has been shut down.
        """
        if not callable(task):
            raise TypeError(f"task must be callable, got {type(task).__name__}")

        def _task_wrapper() -> None:
            try:
                task()
            except Exception:
                with self._lock:
                    self._failed += 1
                logger.exception("scheduled_task_failed", backend=self.name)
            finally:
                with self._lock:
                    self._executed += 1
                    self._last_run = datetime.now(UTC)

        run_date = datetime.now(UTC) + timedelta(milliseconds=max(delay_ms, 0))
        with self._lock:
            if self._stopped:
                raise SchedulerShutdownError(
                    "Cannot schedule task: scheduler has been shut down"
                ).with_context(backend=self.name)
            self._scheduler.add_job(
                _task_wrapper,
                "date",
                run_date=run_date,
                misfire_grace_time=None,
            )

    def shutdown(self, wait: bool = True) -> None:
        """Drop pending jobs and stop the APScheduler loop."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            dropped = len(self._scheduler.get_jobs())
            self._scheduler.remove_all_jobs()

        # APScheduler shutdown waits on running jobs, which take the lock
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        logger.info("scheduler_shutdown", backend=self.name, dropped=dropped)

    def get_health(self) -> SchedulerHealth:
        """Return structured health status."""
        running = bool(getattr(self._scheduler, "running", False))
        with self._lock:
            return SchedulerHealth(
                healthy=running and not self._stopped,
                backend=self.name,
                pending=len(self._scheduler.get_jobs()) if running else 0,
                executed=self._executed,
                failed=self._failed,
                last_run=self._last_run,
            )

    def health(self) -> dict[str, Any]:
        """Return scheduler health status as a dict."""
        return self.get_health().to_dict()
