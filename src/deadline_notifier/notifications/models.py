# src/deadline_notifier/notifications/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class NotificationKind(StrEnum):
    """
    Kinds stored in the shared notification feed.

    The deadline engine only writes DEADLINE (upcoming) and OVERDUE; the other
    kinds come from task/team write paths elsewhere.
    """

    DEADLINE = "deadline"
    OVERDUE = "overdue"
    ASSIGNMENT = "assignment"
    STATUS_CHANGE = "status_change"
    TEAM_INVITE = "team_invite"


@dataclass(slots=True)
class Notification:
    user_id: str
    kind: NotificationKind
    message: str
    created_at: float

    task_id: int | None = None
    read: bool = False
    link: str = ""
    id: int | None = None  # assigned by the store on insert


@dataclass(slots=True, frozen=True)
class NotificationQuery:
    """Lookup used by the dedup gate: exact (task, user, kind) with created_at >= created_after."""

    task_id: int
    user_id: str
    kind: NotificationKind
    created_after: float

    def matches(self, n: Notification) -> bool:
        return (
            n.task_id == self.task_id
            and n.user_id == self.user_id
            and n.kind == self.kind
            and n.created_at >= self.created_after
        )
