"""
Structured error types for delay containers.

Provides a small hierarchy of typed errors with metadata for retry
decisions and structured logging.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure domain
    - **Explicit Retry Semantics:** Each error knows if it's retryable
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        DelayError                            │
        │  (category, retryable, retry_after, context, cause)         │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  NotReadyError      SchedulingError      ValidationError    │
        │  (TIMING,           (SCHEDULING)         (VALIDATION)       │
        │   retryable)             │                    │              │
        │                  SchedulerShutdownError  InvalidTimeError   │
        │                                          UnsupportedUnitError│
        └─────────────────────────────────────────────────────────────┘

Examples:
    A strict read before the ready time:

    >>> err = NotReadyError(ready_time)
    >>> err.retryable
    True
    >>> err.ready_time == ready_time
    True

    Adding context to an error:

    >>> SchedulerShutdownError("closed").with_context(backend="thread").to_dict()
    {'error_type': 'SchedulerShutdownError', 'message': 'closed', ...}

Guardrails:
    ❌ DON'T: Catch NotReadyError inside the container
    ✅ DO: Let it surface to the caller of get()

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, retry-logic, error-context

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    TIMING = "TIMING"             # Value requested before its ready time
    SCHEDULING = "SCHEDULING"     # Scheduler rejected or lost a task
    VALIDATION = "VALIDATION"     # Bad time point, unit, or argument
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


class DelayError(Exception):
    """
    Base exception for all delayobject errors.

    All DelayError instances carry:
    - **category:** ErrorCategory for classification
    - **retryable:** Whether repeating the call later can succeed
    - **retry_after:** Optional seconds to wait before retrying
    - **context:** Free-form metadata for logging
    - **cause:** Optional underlying exception

    Subclasses set ``default_category`` and ``default_retryable``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.retry_after = retry_after
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DelayError:
        """
        Add context to this error (fluent API).

        Usage:
            raise UnsupportedUnitError("bad unit").with_context(unit="fortnights")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            result["retry_after"] = self.retry_after
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# TIMING ERRORS
# =============================================================================


class NotReadyError(DelayError):
    """
    Raised by ``DelayObject.get()`` when the value is read before its ready time.

    Carries ``ready_time`` so the caller can decide when to try again. The
    message is computed once, at construction, relative to ``now``:

        Your object is not ready yet. It will be ready in 4s (2025-01-01T...)

    ``retry_after`` holds the same remaining whole seconds (never negative).
    """

    default_category = ErrorCategory.TIMING
    default_retryable = True

    def __init__(self, ready_time: datetime, *, now: datetime | None = None):
        now = now if now is not None else datetime.now(UTC)
        remaining = int((ready_time - now) / timedelta(seconds=1))
        super().__init__(
            f"Your object is not ready yet. It will be ready in {remaining}s "
            f"({ready_time.isoformat()})",
            retry_after=max(remaining, 0),
            context={"ready_time": ready_time.isoformat()},
        )
        self._ready_time = ready_time

    @property
    def ready_time(self) -> datetime:
        """Time the value that was read too early becomes available."""
        return self._ready_time


# =============================================================================
# SCHEDULING ERRORS
# =============================================================================


class SchedulingError(DelayError):
    """Scheduler could not accept or run a task."""

    default_category = ErrorCategory.SCHEDULING


class SchedulerShutdownError(SchedulingError):
    """Task submitted to a scheduler that has been shut down."""


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(DelayError):
    """Invalid factory input. Never retryable."""

    default_category = ErrorCategory.VALIDATION


class InvalidTimeError(ValidationError):
    """Ready time is naive, of the wrong type, or out of range."""


class UnsupportedUnitError(ValidationError):
    """Unknown time unit passed to a factory."""


# =============================================================================
# HELPERS
# =============================================================================


def is_retryable(error: BaseException) -> bool:
    """Check whether an error is retryable; non-DelayError exceptions are not."""
    if isinstance(error, DelayError):
        return error.retryable
    return False


def get_retry_after(error: BaseException) -> int | None:
    """Seconds to wait before retrying, when the error knows."""
    if isinstance(error, DelayError):
        return error.retry_after
    return None


__all__ = [
    "DelayError",
    "ErrorCategory",
    "InvalidTimeError",
    "NotReadyError",
    "SchedulerShutdownError",
    "SchedulingError",
    "UnsupportedUnitError",
    "ValidationError",
    "get_retry_after",
    "is_retryable",
]
