# src/deadline_notifier/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..notifications.engine import NotificationEngine
from ..notifications.mailer import SmtpEmailSender
from ..notifications.store import NotificationStore
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskStore
    notification_store: NotificationStore
    email_sender: SmtpEmailSender
    engine: NotificationEngine
