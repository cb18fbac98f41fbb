# src/deadline_notifier/notifications/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .models import Notification, NotificationKind, NotificationQuery

logger = logging.getLogger(__name__)


class NotificationStore:
    """
    SQLite notification store.

    Shared by every writer of the in-app feed (the deadline engine is one of
    several). Records are immutable except for the read flag; deletion is an
    explicit user action or a cascade from task deletion.

    No cross-record transaction wraps "check then insert": the dedup gate
    reads, the engine writes, and a rare duplicate from overlapping cycles is
    accepted.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "notifications.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("NotificationStore ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS notifications (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    task_id INTEGER,
                    kind TEXT NOT NULL,
                    message TEXT NOT NULL,
                    read INTEGER NOT NULL DEFAULT 0,
                    link TEXT NOT NULL DEFAULT '',
                    created_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(notifications)")
            cols = {row["name"] for row in cur.fetchall()}
            if "link" not in cols:
                cur.execute("ALTER TABLE notifications ADD COLUMN link TEXT NOT NULL DEFAULT ''")
                logger.info("NotificationStore migration: added column link")

            # Feed listing and the dedup lookup.
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_notif_user_read_created "
                "ON notifications(user_id, read, created_at)"
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_notif_dedup "
                "ON notifications(task_id, user_id, kind, created_at)"
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_notification(row: sqlite3.Row) -> Notification:
        return Notification(
            id=int(row["id"]),
            user_id=str(row["user_id"]),
            task_id=int(row["task_id"]) if row["task_id"] is not None else None,
            kind=NotificationKind(row["kind"]),
            message=str(row["message"]),
            read=bool(row["read"]),
            link=str(row["link"] or ""),
            created_at=float(row["created_at"]),
        )

    # ---- engine API ----

    def insert_notification(self, record: Notification) -> int:
        """Durable insert; visible to subsequent queries once this returns."""
        if not record.user_id:
            raise ValueError("user_id is required")
        if not record.message or not record.message.strip():
            raise ValueError("message is required")

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO notifications(user_id, task_id, kind, message, read, link, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.user_id,
                    record.task_id,
                    NotificationKind(record.kind).value,
                    record.message,
                    1 if record.read else 0,
                    record.link or "",
                    float(record.created_at),
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for notifications insert")
            notification_id = int(rowid)
            record.id = notification_id
            logger.debug(
                "Notification added id=%s user=%s task=%s kind=%s",
                notification_id,
                record.user_id,
                record.task_id,
                record.kind,
            )
            return notification_id
        finally:
            conn.close()

    def query_notifications(self, query: NotificationQuery) -> list[Notification]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT *
                FROM notifications
                WHERE task_id = ?
                  AND user_id = ?
                  AND kind = ?
                  AND created_at >= ?
                ORDER BY created_at DESC
                """,
                (
                    int(query.task_id),
                    query.user_id,
                    NotificationKind(query.kind).value,
                    float(query.created_after),
                ),
            )
            return [self._row_to_notification(r) for r in cur.fetchall()]
        finally:
            conn.close()

    # ---- feed API ----

    def get_notification(self, notification_id: int) -> Notification | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM notifications WHERE id = ?", (int(notification_id),))
            row = cur.fetchone()
            return self._row_to_notification(row) if row else None
        finally:
            conn.close()

    def list_for_user(
        self, user_id: str, *, limit: int = 50, unread_only: bool = False
    ) -> list[Notification]:
        """Newest first."""
        sql = "SELECT * FROM notifications WHERE user_id = ?"
        params: list[object] = [user_id]
        if unread_only:
            sql += " AND read = 0"
        sql += " ORDER BY created_at DESC, id DESC LIMIT ?"
        params.append(max(0, int(limit)))

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [self._row_to_notification(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def count_unread(self, user_id: str) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT COUNT(*) FROM notifications WHERE user_id = ? AND read = 0",
                (user_id,),
            )
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def mark_read(self, notification_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE notifications SET read = 1 WHERE id = ?", (int(notification_id),)
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def mark_all_read(self, user_id: str) -> int:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE notifications SET read = 1 WHERE user_id = ? AND read = 0", (user_id,)
            )
            conn.commit()
            return int(cur.rowcount)
        finally:
            conn.close()

    def delete_notification(self, notification_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM notifications WHERE id = ?", (int(notification_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_for_task(self, task_id: int) -> int:
        """Cascade used when a task is deleted."""
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM notifications WHERE task_id = ?", (int(task_id),))
            conn.commit()
            removed = int(cur.rowcount)
            if removed:
                logger.info("Removed %s notification(s) for deleted task_id=%s", removed, task_id)
            return removed
        finally:
            conn.close()
