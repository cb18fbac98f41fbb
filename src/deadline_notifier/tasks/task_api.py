# src/deadline_notifier/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState

logger = logging.getLogger(__name__)


def delete_task_with_notifications(state: AppState, task_id: int) -> bool:
    """
    Delete a task and cascade to the notifications that reference it.

    Returns True if the task existed. Notifications are removed even when the
    task row is already gone, so a retry after a partial failure converges.
    """
    existed = state.task_store.delete_task(task_id)
    try:
        state.notification_store.delete_for_task(task_id)
    except Exception:
        logger.exception("delete_for_task failed task_id=%s", task_id)
        raise
    logger.info("Deleted task_id=%s existed=%s", task_id, existed)
    return existed
