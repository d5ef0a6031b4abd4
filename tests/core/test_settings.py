"""Tests for delayobject.settings."""

import pydantic
import pytest

from delayobject.settings import DelaySettings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove DELAY_* variables inherited from the environment."""
    for key in (
        "DELAY_SCHEDULER_BACKEND",
        "DELAY_SCHEDULER_THREAD_NAME",
        "DELAY_LOG_LEVEL",
        "DELAY_LOG_JSON",
    ):
        monkeypatch.delenv(key, raising=False)


class TestDelaySettings:
    """Test defaults and environment overrides."""

    def test_defaults(self):
        settings = DelaySettings(_env_file=None)
        assert settings.scheduler_backend == "thread"
        assert settings.scheduler_thread_name == "delay-scheduler"
        assert settings.log_level == "INFO"
        assert settings.log_json is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DELAY_SCHEDULER_BACKEND", "apscheduler")
        monkeypatch.setenv("DELAY_SCHEDULER_THREAD_NAME", "callbacks")
        monkeypatch.setenv("DELAY_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("DELAY_LOG_JSON", "true")

        settings = DelaySettings(_env_file=None)
        assert settings.scheduler_backend == "apscheduler"
        assert settings.scheduler_thread_name == "callbacks"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("DELAY_SCHEDULER_BACKEND", "celery")
        with pytest.raises(pydantic.ValidationError):
            DelaySettings(_env_file=None)

    def test_empty_thread_name_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DelaySettings(_env_file=None, scheduler_thread_name="")

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("DELAY_SOMETHING_ELSE", "x")
        settings = DelaySettings(_env_file=None)
        assert not hasattr(settings, "something_else")


class TestGetSettings:
    """Test the cached accessor."""

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DELAY_SCHEDULER_THREAD_NAME", "reloaded")
        assert get_settings() is first

        get_settings.cache_clear()
        assert get_settings().scheduler_thread_name == "reloaded"
