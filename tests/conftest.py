# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from deadline_notifier.cli.bootstrap import create_initial_state
from deadline_notifier.core.state import AppState
from deadline_notifier.notifications.store import NotificationStore
from deadline_notifier.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic (no SMTP credentials).
    """
    return SimpleNamespace(
        app_name="deadline-notifier-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        notifications_db_path=tmp_path / "notifications.sqlite3",
        cycle_interval_seconds=600.0,
        run_on_start=True,
        cycle_soft_deadline_seconds=0.0,
        max_concurrency=4,
        frontend_url="http://app.test",
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user=None,
        smtp_password=None,
        smtp_from_name="Task Manager",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired with real SQLite stores in tmp_path and an unconfigured SMTP sender."""
    return create_initial_state(settings=settings)


@pytest.fixture()
def task_store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def notification_store(tmp_path: Path) -> NotificationStore:
    return NotificationStore(tmp_path / "notifications.sqlite3")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
