# src/deadline_notifier/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from .task_models import Assignee, Task, TaskQuery, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store (tasks + the users they are assigned to).

    The notification engine only needs query_tasks(); the write helpers exist
    so the store can be seeded and maintained by the task-management side and
    by tests.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL DEFAULT '',
                    email TEXT,
                    created_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'pending',
                    due_at REAL,
                    assignee_id TEXT,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("status", "TEXT NOT NULL DEFAULT 'pending'")
            add_col("due_at", "REAL")
            add_col("assignee_id", "TEXT")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status_due ON tasks(status, due_at)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_assignee ON tasks(assignee_id, status)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        assignee = None
        if row["assignee_id"] is not None:
            assignee = Assignee(
                id=str(row["assignee_id"]),
                name=str(row["assignee_name"] or ""),
                email=row["assignee_email"] or None,
            )
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            status=TaskStatus.from_db(row["status"]),
            due_at=float(row["due_at"]) if row["due_at"] is not None else None,
            assignee=assignee,
            description=str(row["description"] or ""),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    _SELECT = """
        SELECT t.*, u.name AS assignee_name, u.email AS assignee_email
        FROM tasks t
        LEFT JOIN users u ON u.id = t.assignee_id
    """

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_user(self, user_id: str, *, name: str = "", email: str | None = None) -> None:
        """Insert or update a user record (assignee lookup for email)."""
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required")

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users(id, name, email, created_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET name = excluded.name, email = excluded.email
                """,
                (user_id.strip(), name, email, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    def add_task(
        self,
        *,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.PENDING,
        due_at: float | None = None,
        assignee_id: str | None = None,
    ) -> int:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(title, description, status, due_at, assignee_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    title.strip(),
                    description,
                    TaskStatus(status).value,
                    float(due_at) if due_at is not None else None,
                    assignee_id,
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug(
                "Task added id=%s status=%s due_at=%s assignee=%s",
                task_id,
                TaskStatus(status).value,
                due_at,
                assignee_id,
            )
            return task_id
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(self._SELECT + " WHERE t.id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def update_task_status(self, task_id: int, new_status: TaskStatus) -> None:
        now = time.time()
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE tasks SET status = ?, updated_at = ? WHERE id = ?",
                (TaskStatus(new_status).value, now, int(task_id)),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> bool:
        """
        Delete a task row. Returns True if a row was removed.

        Notifications referencing the task live in another store; callers
        cascade through NotificationStore.delete_for_task().
        """
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def query_tasks(self, query: TaskQuery) -> list[Task]:
        """
        Return open tasks matching a due-date predicate.

        - due_before:  due_at < due_before
        - due_between: start <= due_at <= end
        Tasks without a due date never match. status_not excludes one status.
        """
        where = ["t.due_at IS NOT NULL", "t.status != ?"]
        params: list[object] = [TaskStatus(query.status_not).value]

        if query.due_before is not None:
            where.append("t.due_at < ?")
            params.append(float(query.due_before))
        else:
            start, end = query.due_between  # type: ignore[misc]
            where.append("t.due_at >= ?")
            where.append("t.due_at <= ?")
            params.extend([float(start), float(end)])

        sql = self._SELECT + " WHERE " + " AND ".join(where) + " ORDER BY t.due_at ASC, t.id ASC"

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()
