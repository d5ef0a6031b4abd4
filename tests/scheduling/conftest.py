"""Pytest fixtures for scheduling tests."""

import sys
from types import ModuleType, SimpleNamespace
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_apscheduler(monkeypatch):
    """Install a fake APScheduler package in sys.modules.

    Returns a namespace with the mocked ``BackgroundScheduler`` class, the
    instance it returns, and the mocked ``ThreadPoolExecutor`` class.
    """
    scheduler_instance = MagicMock()
    scheduler_instance.running = True
    scheduler_instance.get_jobs.return_value = []
    bg_scheduler_cls = MagicMock(return_value=scheduler_instance)
    executor_cls = MagicMock()

    bg_module = ModuleType("apscheduler.schedulers.background")
    bg_module.BackgroundScheduler = bg_scheduler_cls
    schedulers_module = ModuleType("apscheduler.schedulers")
    schedulers_module.background = bg_module

    pool_module = ModuleType("apscheduler.executors.pool")
    pool_module.ThreadPoolExecutor = executor_cls
    executors_module = ModuleType("apscheduler.executors")
    executors_module.pool = pool_module

    apscheduler_module = ModuleType("apscheduler")
    apscheduler_module.schedulers = schedulers_module
    apscheduler_module.executors = executors_module

    monkeypatch.setitem(sys.modules, "apscheduler", apscheduler_module)
    monkeypatch.setitem(sys.modules, "apscheduler.schedulers", schedulers_module)
    monkeypatch.setitem(sys.modules, "apscheduler.schedulers.background", bg_module)
    monkeypatch.setitem(sys.modules, "apscheduler.executors", executors_module)
    monkeypatch.setitem(sys.modules, "apscheduler.executors.pool", pool_module)

    return SimpleNamespace(
        scheduler=scheduler_instance,
        scheduler_cls=bg_scheduler_cls,
        executor_cls=executor_cls,
    )
