# src/deadline_notifier/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the notification engine.

The engine depends on Protocols instead of concrete implementations.
This keeps storage and email transport swappable and makes testing easier.
"""

from typing import Any, Awaitable, Callable, Protocol

Clock = Callable[[], float]
# Returns "now" as POSIX epoch seconds.


class TaskRepo(Protocol):
    """Read side of the task store: tasks matching a due-date predicate (TaskQuery)."""

    def query_tasks(self, query: Any) -> list[Any]: ...


class NotificationRepo(Protocol):
    def insert_notification(self, record: Any) -> int: ...

    # Only used for the dedup existence check; callers look at len() >= 1.
    def query_notifications(self, query: Any) -> list[Any]: ...


class EmailSender(Protocol):
    """
    Outbound email port.

    Must never raise: failures come back as a result object with
    success=False and an error string (see notifications.email.EmailResult).
    """

    def send_email(self, *, to: str, subject: str, html_body: str) -> Awaitable[Any]: ...
