# tests/test_classifier.py

from __future__ import annotations

import pytest

from deadline_notifier.notifications.classifier import Threshold, classify
from deadline_notifier.notifications.models import NotificationKind
from deadline_notifier.tasks.task_models import TaskStatus

from .fakes import DAY, HOUR

NOW = 1_700_000_000.0


def test_overdue_by_fifty_hours_is_three_days() -> None:
    c = classify(NOW - 50 * HOUR, TaskStatus.PENDING, NOW)
    assert c.threshold == Threshold.OVERDUE
    assert c.magnitude == 3


def test_due_in_five_hours_is_upcoming() -> None:
    c = classify(NOW + 5 * HOUR, TaskStatus.IN_PROGRESS, NOW)
    assert c.threshold == Threshold.UPCOMING
    assert c.magnitude == 5


def test_due_in_two_days_is_not_eligible() -> None:
    assert classify(NOW + 48 * HOUR, TaskStatus.PENDING, NOW).threshold == Threshold.NONE


@pytest.mark.parametrize("due_at", [None, NOW - 10 * DAY, NOW + HOUR, NOW])
def test_completed_or_undated_tasks_are_never_eligible(due_at) -> None:
    assert classify(due_at, TaskStatus.COMPLETED, NOW).threshold == Threshold.NONE
    assert classify(None, TaskStatus.PENDING, NOW).threshold == Threshold.NONE


def test_just_overdue_rounds_up_to_one_day() -> None:
    c = classify(NOW - 1, TaskStatus.PENDING, NOW)
    assert c.threshold == Threshold.OVERDUE
    assert c.magnitude == 1


def test_exactly_two_days_overdue() -> None:
    assert classify(NOW - 2 * DAY, TaskStatus.PENDING, NOW).magnitude == 2


def test_window_bounds_are_inclusive() -> None:
    at_now = classify(NOW, TaskStatus.PENDING, NOW)
    assert at_now.threshold == Threshold.UPCOMING
    assert at_now.magnitude == 0

    at_horizon = classify(NOW + DAY, TaskStatus.PENDING, NOW)
    assert at_horizon.threshold == Threshold.UPCOMING
    assert at_horizon.magnitude == 24

    assert classify(NOW + DAY + 1, TaskStatus.PENDING, NOW).threshold == Threshold.NONE


def test_hours_left_rounds_half_up() -> None:
    assert classify(NOW + 2.5 * HOUR, TaskStatus.PENDING, NOW).magnitude == 3
    assert classify(NOW + 2.4 * HOUR, TaskStatus.PENDING, NOW).magnitude == 2
    assert classify(NOW + 20 * 60, TaskStatus.PENDING, NOW).magnitude == 0


def test_string_status_is_accepted() -> None:
    assert classify(NOW - HOUR, "completed", NOW).threshold == Threshold.NONE
    assert classify(NOW - HOUR, "in_progress", NOW).threshold == Threshold.OVERDUE


def test_threshold_maps_to_notification_kind() -> None:
    assert Threshold.UPCOMING.notification_kind() == NotificationKind.DEADLINE
    assert Threshold.OVERDUE.notification_kind() == NotificationKind.OVERDUE
    assert Threshold.NONE.notification_kind() is None
