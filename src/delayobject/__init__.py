"""
delayobject - Time-gated values with scheduled readiness callbacks.

Quick Start:
    >>> from delayobject import DelayObject, TimeUnit
    >>> report = DelayObject.after("quarterly numbers", 2, TimeUnit.DAYS)
    >>> report.is_ready()
    False
    >>> report.get_or_else("embargoed")
    'embargoed'
    >>> report.register_callback(lambda: publish(report.get()))
"""

from delayobject.container import DelayObject
from delayobject.errors import (
    DelayError,
    ErrorCategory,
    InvalidTimeError,
    NotReadyError,
    SchedulerShutdownError,
    SchedulingError,
    UnsupportedUnitError,
    ValidationError,
    get_retry_after,
    is_retryable,
)
from delayobject.result import Err, Ok, Result
from delayobject.scheduling import (
    SchedulerProvider,
    TaskScheduler,
    ThreadTaskScheduler,
    get_shared_scheduler,
)
from delayobject.timestamps import TimeUnit, utc_now

__version__ = "0.1.0"

__all__ = [
    "DelayError",
    "DelayObject",
    "Err",
    "ErrorCategory",
    "InvalidTimeError",
    "NotReadyError",
    "Ok",
    "Result",
    "SchedulerProvider",
    "SchedulerShutdownError",
    "SchedulingError",
    "TaskScheduler",
    "ThreadTaskScheduler",
    "TimeUnit",
    "UnsupportedUnitError",
    "ValidationError",
    "get_retry_after",
    "get_shared_scheduler",
    "is_retryable",
    "utc_now",
]
