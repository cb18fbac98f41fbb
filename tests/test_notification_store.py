# tests/test_notification_store.py

from __future__ import annotations

import pytest

from deadline_notifier.notifications import feed
from deadline_notifier.notifications.models import Notification, NotificationKind, NotificationQuery
from deadline_notifier.notifications.store import NotificationStore

NOW = 1_700_000_000.0


def _add(store: NotificationStore, *, user_id="u1", task_id=1, kind=NotificationKind.OVERDUE, at=NOW) -> int:
    return store.insert_notification(
        Notification(
            user_id=user_id,
            task_id=task_id,
            kind=kind,
            message=f"{kind} for {task_id}",
            link=f"/tasks/{task_id}",
            created_at=at,
        )
    )


def test_insert_then_query_by_dedup_key(notification_store: NotificationStore) -> None:
    nid = _add(notification_store, at=NOW - 100)
    _add(notification_store, kind=NotificationKind.DEADLINE)
    _add(notification_store, task_id=2)
    _add(notification_store, user_id="u2")

    hits = notification_store.query_notifications(
        NotificationQuery(task_id=1, user_id="u1", kind=NotificationKind.OVERDUE, created_after=NOW - 100)
    )
    assert [n.id for n in hits] == [nid]
    assert hits[0].read is False
    assert hits[0].link == "/tasks/1"

    assert (
        notification_store.query_notifications(
            NotificationQuery(task_id=1, user_id="u1", kind=NotificationKind.OVERDUE, created_after=NOW - 99)
        )
        == []
    )


def test_insert_validates_record(notification_store: NotificationStore) -> None:
    with pytest.raises(ValueError):
        notification_store.insert_notification(
            Notification(user_id="", kind=NotificationKind.OVERDUE, message="x", created_at=NOW)
        )
    with pytest.raises(ValueError):
        notification_store.insert_notification(
            Notification(user_id="u1", kind=NotificationKind.OVERDUE, message=" ", created_at=NOW)
        )


def test_notifications_without_task_are_stored(notification_store: NotificationStore) -> None:
    nid = notification_store.insert_notification(
        Notification(user_id="u1", kind=NotificationKind.TEAM_INVITE, message="join us", created_at=NOW)
    )
    n = notification_store.get_notification(nid)
    assert n is not None
    assert n.task_id is None
    assert n.kind == NotificationKind.TEAM_INVITE


def test_feed_lists_newest_first_with_unread_count(notification_store: NotificationStore) -> None:
    old = _add(notification_store, task_id=1, at=NOW - 10)
    new = _add(notification_store, task_id=2, at=NOW)
    _add(notification_store, user_id="u2")

    page = feed.get_feed(notification_store, "u1")
    assert [n.id for n in page.notifications] == [new, old]
    assert page.unread_count == 2

    feed.acknowledge(notification_store, "u1", old)
    page = feed.get_feed(notification_store, "u1", unread_only=True)
    assert [n.id for n in page.notifications] == [new]
    assert page.unread_count == 1

    assert feed.acknowledge_all(notification_store, "u1") == 1
    assert notification_store.count_unread("u1") == 0
    assert notification_store.count_unread("u2") == 1


def test_feed_limit(notification_store: NotificationStore) -> None:
    for i in range(5):
        _add(notification_store, task_id=i, at=NOW + i)
    page = feed.get_feed(notification_store, "u1", limit=2)
    assert [n.task_id for n in page.notifications] == [4, 3]


def test_feed_checks_ownership(notification_store: NotificationStore) -> None:
    nid = _add(notification_store, user_id="u2")

    with pytest.raises(feed.NotificationAccessDenied):
        feed.acknowledge(notification_store, "u1", nid)
    with pytest.raises(feed.NotificationAccessDenied):
        feed.dismiss(notification_store, "u1", nid)
    with pytest.raises(feed.NotificationNotFound):
        feed.acknowledge(notification_store, "u1", 999)

    feed.dismiss(notification_store, "u2", nid)
    assert notification_store.get_notification(nid) is None


def test_delete_for_task_cascades(notification_store: NotificationStore) -> None:
    _add(notification_store, task_id=1)
    _add(notification_store, task_id=1, kind=NotificationKind.DEADLINE)
    keep = _add(notification_store, task_id=2)

    assert notification_store.delete_for_task(1) == 2
    assert [n.id for n in notification_store.list_for_user("u1")] == [keep]
