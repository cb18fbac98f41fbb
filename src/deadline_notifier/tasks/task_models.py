# src/deadline_notifier/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Task lifecycle status as written by the task-management side.

    The notification engine only reads it: COMPLETED tasks are never eligible.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except Exception:
            return cls.PENDING


@dataclass(slots=True, frozen=True)
class Assignee:
    id: str
    name: str
    email: str | None


@dataclass(slots=True)
class Task:
    id: int
    title: str
    status: TaskStatus
    due_at: float | None
    assignee: Assignee | None

    description: str = ""
    created_at: float = 0.0
    updated_at: float = 0.0


@dataclass(slots=True, frozen=True)
class TaskQuery:
    """
    Due-date predicate understood by the task repository.

    Exactly one of due_before / due_between is set. Bounds of due_between are
    inclusive; due_before is strict.
    """

    due_before: float | None = None
    due_between: tuple[float, float] | None = None
    status_not: TaskStatus = TaskStatus.COMPLETED

    def __post_init__(self) -> None:
        if (self.due_before is None) == (self.due_between is None):
            raise ValueError("exactly one of due_before / due_between is required")
        if self.due_between is not None and self.due_between[0] > self.due_between[1]:
            raise ValueError("due_between start must not be after end")

    @classmethod
    def overdue(cls, now_ts: float) -> TaskQuery:
        return cls(due_before=float(now_ts))

    @classmethod
    def upcoming(cls, now_ts: float, horizon_seconds: float) -> TaskQuery:
        return cls(due_between=(float(now_ts), float(now_ts) + float(horizon_seconds)))

    def matches(self, task: Task) -> bool:
        """In-memory evaluation, same semantics as the SQL in TaskStore."""
        if task.due_at is None or task.status == self.status_not:
            return False
        if self.due_before is not None:
            return task.due_at < self.due_before
        start, end = self.due_between  # type: ignore[misc]
        return start <= task.due_at <= end
