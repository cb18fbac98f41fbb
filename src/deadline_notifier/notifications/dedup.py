# src/deadline_notifier/notifications/dedup.py

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..core.ports import NotificationRepo
from .classifier import HOUR_SECONDS
from .models import NotificationKind, NotificationQuery

logger = logging.getLogger(__name__)

# Suppression windows per kind. These windows are the only thing that keeps a
# 10-minute cycle from re-notifying the same task every run.
DEFAULT_WINDOWS: Mapping[NotificationKind, float] = {
    NotificationKind.OVERDUE: 24 * HOUR_SECONDS,
    NotificationKind.DEADLINE: 6 * HOUR_SECONDS,
}


class DedupGate:
    """
    Decides whether a new (task, recipient, kind) notification may be emitted.

    A notification is suppressed when the store already holds one for the same
    triple created at or after now - window. The check and the later insert are
    not atomic: two overlapping cycles may both pass and write a duplicate,
    which the next cycle's window absorbs.
    """

    def __init__(
        self,
        repo: NotificationRepo,
        windows: Mapping[NotificationKind, float] | None = None,
    ) -> None:
        self._repo = repo
        self._windows = dict(DEFAULT_WINDOWS if windows is None else windows)

    def window_for(self, kind: NotificationKind) -> float:
        try:
            return float(self._windows[NotificationKind(kind)])
        except KeyError:
            raise ValueError(f"no dedup window configured for kind={kind}") from None

    def permits(self, *, task_id: int, user_id: str, kind: NotificationKind, now_ts: float) -> bool:
        """True if no matching notification exists inside the window. Store errors propagate."""
        window = self.window_for(kind)
        query = NotificationQuery(
            task_id=int(task_id),
            user_id=user_id,
            kind=NotificationKind(kind),
            created_after=float(now_ts) - window,
        )
        recent = self._repo.query_notifications(query)
        if recent:
            logger.debug(
                "Suppressed %s notification task_id=%s user=%s (%d within %.0fh)",
                kind,
                task_id,
                user_id,
                len(recent),
                window / HOUR_SECONDS,
            )
            return False
        return True
