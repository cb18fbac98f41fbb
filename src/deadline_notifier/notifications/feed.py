# src/deadline_notifier/notifications/feed.py

from __future__ import annotations

"""
Small high-level helpers over the notification store for the in-app feed
(list, unread count, acknowledge, dismiss). Ownership is checked here so any
transport in front of it only has to map the exceptions.
"""

import logging
from dataclasses import dataclass

from .models import Notification
from .store import NotificationStore

logger = logging.getLogger(__name__)


class NotificationNotFound(LookupError):
    pass


class NotificationAccessDenied(PermissionError):
    pass


@dataclass(slots=True)
class FeedPage:
    notifications: list[Notification]
    unread_count: int


def get_feed(
    store: NotificationStore, user_id: str, *, limit: int = 50, unread_only: bool = False
) -> FeedPage:
    return FeedPage(
        notifications=store.list_for_user(user_id, limit=limit, unread_only=unread_only),
        unread_count=store.count_unread(user_id),
    )


def _owned(store: NotificationStore, user_id: str, notification_id: int) -> Notification:
    n = store.get_notification(notification_id)
    if n is None:
        raise NotificationNotFound(f"notification {notification_id} not found")
    if n.user_id != user_id:
        raise NotificationAccessDenied(f"notification {notification_id} belongs to another user")
    return n


def acknowledge(store: NotificationStore, user_id: str, notification_id: int) -> Notification:
    """Mark one of the user's notifications as read and return it."""
    n = _owned(store, user_id, notification_id)
    store.mark_read(notification_id)
    n.read = True
    return n


def acknowledge_all(store: NotificationStore, user_id: str) -> int:
    updated = store.mark_all_read(user_id)
    logger.debug("Marked %d notification(s) read user=%s", updated, user_id)
    return updated


def dismiss(store: NotificationStore, user_id: str, notification_id: int) -> None:
    _owned(store, user_id, notification_id)
    store.delete_notification(notification_id)
