"""
Clock and time-unit utilities for delay containers.

Every readiness query, factory call and callback registration asks a clock
for "now". This module provides the default clock and the unit arithmetic
used to turn "in N units" into an absolute ready time.

Manifesto:
    Time handling is where delayed values quietly go wrong: naive datetimes
    compared against aware ones, months treated as 30 days, sub-millisecond
    delays rounded in the wrong direction. This module keeps all of it in
    one place:

    - **utc_now():** Timezone-aware UTC datetime, the default clock
    - **TimeUnit:** Fixed-duration and calendar units
    - **add_amount():** Calendar-aware "time + N units"
    - **millis_until():** Callback delays that never fire early

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────┐
        │                       TimeUnit                              │
        ├──────────────────────────────┬─────────────────────────────┤
        │  Fixed (timedelta)           │  Calendar (relativedelta)   │
        │  ─────────────────           │  ────────────────────────   │
        │  NANOS  MICROS  MILLIS       │  MONTHS  YEARS  DECADES     │
        │  SECONDS MINUTES HOURS       │  CENTURIES  MILLENNIA       │
        │  HALF_DAYS DAYS WEEKS        │                             │
        └──────────────────────────────┴─────────────────────────────┘

Examples:
    >>> start = datetime(2025, 1, 31, tzinfo=UTC)
    >>> add_amount(start, 1, TimeUnit.MONTHS)
    datetime.datetime(2025, 2, 28, 0, 0, tzinfo=datetime.timezone.utc)
    >>> millis_until(start, start + timedelta(microseconds=1_500_001))
    1501

Guardrails:
    ❌ DON'T: Compare naive and aware datetimes
    ✅ DO: Use utc_now() or pass timezone-aware datetimes

    ❌ DON'T: Model months as timedelta(days=30)
    ✅ DO: Use TimeUnit.MONTHS (relativedelta arithmetic)

Tags:
    timestamps, clock, time-units, calendar, utc, relativedelta

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta

from .errors import InvalidTimeError, UnsupportedUnitError

Clock = Callable[[], datetime]

_ONE_MICRO = timedelta(microseconds=1)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class TimeUnit(str, Enum):
    """
    Units accepted by ``DelayObject.after()``.

    Fixed units map to an exact ``timedelta``. Calendar units (months and
    longer) go through ``relativedelta`` so that "one month after Jan 31"
    lands on the last day of February instead of overflowing into March.
    """

    NANOS = "nanos"
    MICROS = "micros"
    MILLIS = "millis"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    HALF_DAYS = "half_days"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"
    DECADES = "decades"
    CENTURIES = "centuries"
    MILLENNIA = "millennia"

    @property
    def is_calendar(self) -> bool:
        return self in _CALENDAR_MONTHS

    @classmethod
    def parse(cls, value: TimeUnit | str) -> TimeUnit:
        """Coerce a unit or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedUnitError(f"Unsupported time unit: {value!r}").with_context(
            supported=[u.value for u in cls]
        )


# Fixed units expressed in microseconds (datetime resolution)
_FIXED_MICROS: dict[TimeUnit, int] = {
    TimeUnit.MICROS: 1,
    TimeUnit.MILLIS: 1_000,
    TimeUnit.SECONDS: 1_000_000,
    TimeUnit.MINUTES: 60_000_000,
    TimeUnit.HOURS: 3_600_000_000,
    TimeUnit.HALF_DAYS: 43_200_000_000,
    TimeUnit.DAYS: 86_400_000_000,
    TimeUnit.WEEKS: 604_800_000_000,
}

# Calendar units expressed in months
_CALENDAR_MONTHS: dict[TimeUnit, int] = {
    TimeUnit.MONTHS: 1,
    TimeUnit.YEARS: 12,
    TimeUnit.DECADES: 120,
    TimeUnit.CENTURIES: 1_200,
    TimeUnit.MILLENNIA: 12_000,
}


def nanos_to_timedelta(nanos: int) -> timedelta:
    """Convert nanoseconds to a timedelta, rounding up to whole microseconds.

    Rounding up keeps a ready time from landing before the requested delay.
    """
    return timedelta(microseconds=-(-nanos // 1_000))


def add_amount(moment: datetime, amount: int, unit: TimeUnit | str) -> datetime:
    """Return ``moment`` shifted by ``amount`` of ``unit``.

    Args:
        moment: Starting point (timezone-aware)
        amount: Signed number of units
        unit: TimeUnit or its string value

    Raises:
        UnsupportedUnitError: If ``unit`` is not a known TimeUnit
        InvalidTimeError: If the result falls outside the datetime range
    """
    unit = TimeUnit.parse(unit)
    try:
        if unit is TimeUnit.NANOS:
            return moment + nanos_to_timedelta(amount)
        if unit.is_calendar:
            return moment + relativedelta(months=amount * _CALENDAR_MONTHS[unit])
        return moment + timedelta(microseconds=amount * _FIXED_MICROS[unit])
    except (OverflowError, ValueError) as e:
        raise InvalidTimeError(
            f"{amount} {unit.value} from {moment.isoformat()} is out of range",
            cause=e,
        ) from e


def ensure_aware(moment: datetime) -> datetime:
    """Reject naive datetimes; aware ones pass through unchanged."""
    if not isinstance(moment, datetime):
        raise InvalidTimeError(f"Expected datetime, got {type(moment).__name__}")
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise InvalidTimeError(
            f"Ready time must be timezone-aware, got naive {moment.isoformat()}"
        )
    return moment


def millis_until(start: datetime, end: datetime) -> int:
    """Milliseconds from ``start`` to ``end``, rounded up to a whole millisecond.

    A task scheduled with this delay never fires before ``end``.
    """
    micros = (end - start) // _ONE_MICRO
    return -(-micros // 1_000)


__all__ = [
    "Clock",
    "TimeUnit",
    "add_amount",
    "ensure_aware",
    "millis_until",
    "nanos_to_timedelta",
    "utc_now",
]
