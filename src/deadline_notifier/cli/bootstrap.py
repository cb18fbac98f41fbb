# src/deadline_notifier/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete stores, the SMTP sender and the engine into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..notifications.engine import NotificationEngine
from ..notifications.mailer import SmtpEmailSender
from ..notifications.scheduler import NotificationScheduler
from ..notifications.store import NotificationStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.notifications_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path)
    notification_store = NotificationStore(settings.notifications_db_path)
    email_sender = SmtpEmailSender.from_settings(settings)
    if not email_sender.configured:
        logger.warning("SMTP credentials not set; notifications will be in-app only.")

    engine = NotificationEngine(
        task_store,
        notification_store,
        email_sender,
        frontend_url=settings.frontend_url,
        max_concurrency=settings.max_concurrency,
        soft_deadline_seconds=settings.cycle_soft_deadline_seconds,
    )

    return AppState(
        settings=settings,
        task_store=task_store,
        notification_store=notification_store,
        email_sender=email_sender,
        engine=engine,
    )


def create_scheduler(state: AppState) -> NotificationScheduler:
    settings = state.settings
    return NotificationScheduler(
        state.engine,
        interval_seconds=getattr(settings, "cycle_interval_seconds", 600.0),
        run_on_start=getattr(settings, "run_on_start", True),
    )
