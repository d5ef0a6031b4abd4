"""Settings for delayobject.

Manifesto:
    The shared scheduler is created implicitly, deep inside the first
    ``register_callback()`` call. Which backend it uses and how its worker
    thread is named should not require code changes, so both come from the
    environment.

    - **Pydantic validation:** Bad backend names fail at load time
    - **Environment-driven:** ``DELAY_*`` variables and ``.env`` files
    - **Sensible defaults:** Thread backend, INFO logging

Examples:
    >>> import os
    >>> os.environ["DELAY_SCHEDULER_BACKEND"] = "apscheduler"
    >>> get_settings.cache_clear()
    >>> get_settings().scheduler_backend
    'apscheduler'

Tags:
    settings, configuration, pydantic, environment

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DelaySettings(BaseSettings):
    """Runtime configuration read from ``DELAY_``-prefixed environment variables.

    Fields
    ──────
    scheduler_backend      : Backend for the shared scheduler ("thread" | "apscheduler")
    scheduler_thread_name  : Name given to the shared scheduler's worker thread
    log_level              : Structlog log level
    log_json               : JSON output (None = auto-detect from TTY)
    """

    model_config = SettingsConfigDict(
        env_prefix="DELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Scheduling ───────────────────────────────────────────────
    scheduler_backend: Literal["thread", "apscheduler"] = "thread"
    scheduler_thread_name: str = Field(
        default="delay-scheduler",
        min_length=1,
        description="Worker thread name for the shared thread scheduler",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None


@lru_cache(maxsize=1)
def get_settings() -> DelaySettings:
    """Load settings once; call ``get_settings.cache_clear()`` to reload."""
    return DelaySettings()


__all__ = ["DelaySettings", "get_settings"]
