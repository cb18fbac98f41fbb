# src/deadline_notifier/notifications/classifier.py

from __future__ import annotations

"""
Deadline threshold classification.

Pure functions: given a due date, a status and "now", decide whether a task is
upcoming (due within the horizon) or overdue, and compute the magnitude shown
to the user (hours left / days overdue).

Rounding is intentionally asymmetric: hours left are rounded half-up, days
overdue are rounded up with a floor of 1.
"""

import math
from dataclasses import dataclass
from enum import Enum

from ..tasks.task_models import TaskStatus
from .models import NotificationKind

HOUR_SECONDS = 60 * 60
DAY_SECONDS = 24 * HOUR_SECONDS
UPCOMING_HORIZON_SECONDS = DAY_SECONDS


class Threshold(str, Enum):
    NONE = "none"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"

    def notification_kind(self) -> NotificationKind | None:
        if self is Threshold.UPCOMING:
            return NotificationKind.DEADLINE
        if self is Threshold.OVERDUE:
            return NotificationKind.OVERDUE
        return None


@dataclass(slots=True, frozen=True)
class Classification:
    threshold: Threshold
    magnitude: int = 0  # hours left (UPCOMING) or days overdue (OVERDUE)


NOT_ELIGIBLE = Classification(Threshold.NONE)


def hours_left(due_at: float, now_ts: float) -> int:
    # Half-up rounding; Python's round() would round 2.5 down to 2.
    return int(math.floor((due_at - now_ts) / HOUR_SECONDS + 0.5))


def days_overdue(due_at: float, now_ts: float) -> int:
    return max(1, int(math.ceil((now_ts - due_at) / DAY_SECONDS)))


def classify(
    due_at: float | None,
    status: TaskStatus | str,
    now_ts: float,
    *,
    horizon_seconds: float = UPCOMING_HORIZON_SECONDS,
) -> Classification:
    if due_at is None or TaskStatus.from_db(str(status)) == TaskStatus.COMPLETED:
        return NOT_ELIGIBLE

    if due_at < now_ts:
        return Classification(Threshold.OVERDUE, days_overdue(due_at, now_ts))

    if due_at <= now_ts + horizon_seconds:
        return Classification(Threshold.UPCOMING, max(0, hours_left(due_at, now_ts)))

    return NOT_ELIGIBLE
