"""
Time-gated value container.

DelayObject wraps a value together with a ready time. Until that time has
passed the value is withheld; afterwards it is available without
restriction.

Manifesto:
    "Not yet" is a state that usually ends up encoded as a flag, a nullable
    field, or a sleep() somewhere. DelayObject makes it a value:

    - **Immutable:** content and ready time are fixed at construction
    - **Never cached:** readiness is recomputed from the clock on every query
    - **Caller chooses the failure policy:** raise, default, compute, or defer
    - **Push, not only pull:** register_callback() fires once the time passes

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                      DelayObject[T]                           │
        ├──────────────────────────────────────────────────────────────┤
        │  content: T            ready_at: datetime (aware)            │
        ├──────────────────────────────────────────────────────────────┤
        │  Factories            │  Accessors            │  Callbacks   │
        │  ─────────            │  ─────────            │  ─────────   │
        │  of()                 │  get()  → raises      │  register_   │
        │  at()                 │  try_get() → Result   │   callback() │
        │  after()              │  get_or_else()        │      │       │
        │  after_nanos()        │  get_or_else_compute()│      ▼       │
        │                       │  get_or_else_throw()  │  shared or   │
        │                       │  if_ready()           │  supplied    │
        │                       │  if_ready_or_else()   │  scheduler   │
        └──────────────────────────────────────────────────────────────┘

        Readiness:  is_ready()  ==  clock() > ready_at

Examples:
    Strict access before and after the ready time:

    >>> token = DelayObject.after(content="s3cr3t", amount=5, unit=TimeUnit.SECONDS)
    >>> token.is_ready()
    False
    >>> token.get_or_else("pending")
    'pending'
    >>> token.get()
    Traceback (most recent call last):
    ...
    NotReadyError: Your object is not ready yet. It will be ready in 4s (...)

    Deferred access:

    >>> token.register_callback(lambda: print(token.get()))

Guardrails:
    ❌ DON'T: Construct DelayObject(...) directly
    ✅ DO: Use DelayObject.of() / at() / after() / after_nanos()

    ❌ DON'T: Cache is_ready() results
    ✅ DO: Ask again; each query is O(1)

    ❌ DON'T: Run long work in callbacks on the shared scheduler
    ✅ DO: Pass your own scheduler to register_callback() for heavy callbacks

Tags:
    delayed-value, readiness, time-gated, optional, callbacks, scheduling

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar

from .errors import InvalidTimeError, NotReadyError
from .logging import get_logger
from .result import Err, Ok, Result
from .scheduling.protocol import TaskScheduler
from .scheduling.provider import get_shared_scheduler
from .timestamps import (
    Clock,
    TimeUnit,
    add_amount,
    ensure_aware,
    millis_until,
    nanos_to_timedelta,
    utc_now,
)

logger = get_logger(__name__)

T = TypeVar("T")

_FACTORY_KEY = object()


def _require_callable(name: str, value: Any) -> None:
    if value is None:
        raise TypeError(f"{name} must not be None")
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {type(value).__name__}")


def _require_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class DelayObject(Generic[T]):
    """
    Immutable value that becomes readable once its ready time has passed.

    Equality and hashing cover ``(content, ready_at)`` only; two containers
    with equal payload and equal ready time are interchangeable. The clock
    a container was built with is not part of its identity.

    Instances come only from the factory classmethods; calling the class
    directly raises ``TypeError``.

    Attributes:
        content: The wrapped value
        ready_at: Timezone-aware time after which ``content`` is accessible
    """

    content: T
    ready_at: datetime
    _clock: Clock = field(default=utc_now, repr=False, compare=False)
    _key: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._key is not _FACTORY_KEY:
            raise TypeError(
                "DelayObject cannot be constructed directly; use "
                "DelayObject.of(), .at(), .after() or .after_nanos()"
            )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def _create(cls, content: T, ready_at: datetime, clock: Clock) -> DelayObject[T]:
        return cls(content, ensure_aware(ready_at), clock, _FACTORY_KEY)

    @classmethod
    def at(cls, content: T, time: datetime, *, clock: Clock | None = None) -> DelayObject[T]:
        """Wrap ``content`` to be released at ``time`` (used verbatim).

        A time in the past is legal and yields a ready container.

        Raises:
            InvalidTimeError: If ``time`` is not a timezone-aware datetime
        """
        return cls._create(content, time, clock or utc_now)

    @classmethod
    def after_nanos(
        cls, content: T, delay_nanos: int, *, clock: Clock | None = None
    ) -> DelayObject[T]:
        """Wrap ``content`` to be released ``delay_nanos`` nanoseconds from now.

        ``datetime`` resolves microseconds, so the delay is rounded up to the
        next whole microsecond.
        """
        delay_nanos = _require_int("delay_nanos", delay_nanos)
        clock = clock or utc_now
        try:
            ready_at = clock() + nanos_to_timedelta(delay_nanos)
        except OverflowError as e:
            raise InvalidTimeError(
                f"Delay of {delay_nanos}ns is out of range", cause=e
            ) from e
        return cls._create(content, ready_at, clock)

    @classmethod
    def after(
        cls,
        content: T,
        amount: int,
        unit: TimeUnit | str,
        *,
        clock: Clock | None = None,
    ) -> DelayObject[T]:
        """Wrap ``content`` to be released ``amount`` ``unit``s from now.

        Calendar units (months and longer) use calendar arithmetic, so one
        month after January 31st is the last day of February.

        Raises:
            UnsupportedUnitError: If ``unit`` is not a TimeUnit
            InvalidTimeError: If the ready time is out of range
        """
        amount = _require_int("amount", amount)
        clock = clock or utc_now
        return cls._create(content, add_amount(clock(), amount, unit), clock)

    @classmethod
    def of(
        cls,
        content: T,
        when: datetime | timedelta | int,
        unit: TimeUnit | str | None = None,
        *,
        clock: Clock | None = None,
    ) -> DelayObject[T]:
        """Wrap ``content`` choosing the factory from the type of ``when``.

        - ``datetime``: absolute ready time (see ``at``)
        - ``timedelta``: now + delta
        - ``int`` without ``unit``: delay in nanoseconds (see ``after_nanos``)
        - ``int`` with ``unit``: delay in that unit (see ``after``)
        """
        if isinstance(when, datetime):
            if unit is not None:
                raise TypeError("unit cannot be combined with an absolute datetime")
            return cls.at(content, when, clock=clock)
        if isinstance(when, timedelta):
            if unit is not None:
                raise TypeError("unit cannot be combined with a timedelta")
            clock = clock or utc_now
            try:
                ready_at = clock() + when
            except OverflowError as e:
                raise InvalidTimeError(f"Delay of {when} is out of range", cause=e) from e
            return cls._create(content, ready_at, clock)
        if unit is None:
            return cls.after_nanos(content, when, clock=clock)
        return cls.after(content, when, unit, clock=clock)

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def is_ready(self) -> bool:
        """True iff the current time is strictly after ``ready_at``."""
        return self._clock() > self.ready_at

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self) -> T:
        """Return the content if ready.

        Raises:
            NotReadyError: If called before ``ready_at``; carries ``ready_at``
        """
        now = self._clock()
        if now > self.ready_at:
            return self.content
        raise NotReadyError(self.ready_at, now=now)

    def try_get(self) -> Result[T]:
        """``Ok(content)`` if ready, else ``Err(NotReadyError)``."""
        now = self._clock()
        if now > self.ready_at:
            return Ok(self.content)
        return Err(NotReadyError(self.ready_at, now=now))

    def get_or_else(self, default: T) -> T:
        """Return the content if ready, else ``default`` (which may be None)."""
        return self.content if self.is_ready() else default

    def get_or_else_compute(self, supplier: Callable[[], T]) -> T:
        """Return the content if ready, else the result of ``supplier()``.

        ``supplier`` is only called when not ready.
        """
        _require_callable("supplier", supplier)
        return self.content if self.is_ready() else supplier()

    def get_or_else_throw(self, error_supplier: Callable[[], BaseException]) -> T:
        """Return the content if ready, else raise the error from ``error_supplier()``.

        ``error_supplier`` is only called when not ready. An exception class
        works as a supplier, e.g. ``obj.get_or_else_throw(TimeoutError)``.
        """
        _require_callable("error_supplier", error_supplier)
        if self.is_ready():
            return self.content
        error = error_supplier()
        if not isinstance(error, BaseException):
            raise TypeError(
                f"error_supplier must return an exception, got {type(error).__name__}"
            )
        raise error

    def if_ready(self, action: Callable[[T], Any]) -> None:
        """Call ``action(content)`` if ready; otherwise do nothing."""
        _require_callable("action", action)
        if self.is_ready():
            action(self.content)

    def if_ready_or_else(
        self, action: Callable[[T], Any], empty_action: Callable[[], Any]
    ) -> None:
        """Call exactly one of ``action(content)`` or ``empty_action()``."""
        _require_callable("action", action)
        _require_callable("empty_action", empty_action)
        if self.is_ready():
            action(self.content)
        else:
            empty_action()

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def register_callback(
        self, callback: Callable[[], Any], scheduler: TaskScheduler | None = None
    ) -> None:
        """Run ``callback`` once, after ``ready_at``, on a background scheduler.

        The delay is ``ready_at - now`` rounded up to whole milliseconds, taken at
        registration. A ready time already in the past still schedules the
        callback; it is never run inline.

        Args:
            callback: Zero-argument callable
            scheduler: Scheduler to use; defaults to the shared
                       single-worker scheduler, created on first use

        Raises:
            TypeError: If ``callback`` is None or not callable
        """
        _require_callable("callback", callback)
        if scheduler is None:
            scheduler = get_shared_scheduler()

        delay_ms = millis_until(self._clock(), self.ready_at)
        scheduler.schedule(callback, delay_ms)
        logger.debug(
            "callback_registered",
            backend=getattr(scheduler, "name", type(scheduler).__name__),
            delay_ms=delay_ms,
            ready_at=self.ready_at.isoformat(),
        )

    def __str__(self) -> str:
        return f"Content: [{self.content}] with ready time [{self.ready_at.isoformat()}]"


__all__ = ["DelayObject"]
