"""
Result envelope for reading delayed values without exceptions.

``DelayObject.get()`` raises ``NotReadyError`` when called too early.
``DelayObject.try_get()`` returns the same outcome as a value instead:
``Ok(content)`` once ready, ``Err(NotReadyError)`` before.

Manifesto:
    - **Explicit over Implicit:** The not-ready case is part of the return type
    - **Composable:** map() transforms a ready value without unwrapping it
    - **Same error either way:** Err carries the exact NotReadyError get() raises

Architecture:
    ::

        ┌─────────────────────────────────────────────┐
        │                 Result[T]                    │
        ├─────────────────────┬───────────────────────┤
        │       Ok[T]         │        Err[T]         │
        │  value: T           │  error: Exception     │
        ├─────────────────────┴───────────────────────┤
        │  is_ok()  is_err()  unwrap()  unwrap_or()   │
        │  unwrap_or_else()   map()     to_dict()     │
        └─────────────────────────────────────────────┘

Examples:
    >>> result = DelayObject.of("payload", past_time).try_get()
    >>> result.unwrap()
    'payload'
    >>> DelayObject.of("payload", future_time).try_get().unwrap_or("fallback")
    'fallback'

Tags:
    result-pattern, error-handling, functional-programming

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import DelayError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value."""
        return Ok(f(self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing the error that would have been raised."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the carried error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        """Compute a fallback from the error."""
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Err(self.error)

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.error, DelayError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {"error_type": type(self.error).__name__, "message": str(self.error)},
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


__all__ = ["Err", "Ok", "Result"]
