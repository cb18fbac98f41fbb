# tests/test_task_store.py

from __future__ import annotations

import time

import pytest

from deadline_notifier.tasks.task_models import TaskQuery, TaskStatus
from deadline_notifier.tasks.task_store import TaskStore

from .fakes import DAY, HOUR


def test_query_tasks_by_due_predicates(task_store: TaskStore) -> None:
    now = time.time()
    task_store.add_user("u1", name="Ada", email="ada@example.com")

    overdue = task_store.add_task(title="late", due_at=now - 2 * HOUR, assignee_id="u1")
    soon = task_store.add_task(title="soon", due_at=now + 3 * HOUR, assignee_id="u1")
    task_store.add_task(title="later", due_at=now + 3 * DAY, assignee_id="u1")
    task_store.add_task(title="undated", assignee_id="u1")
    task_store.add_task(title="done", due_at=now - HOUR, status=TaskStatus.COMPLETED, assignee_id="u1")
    unassigned = task_store.add_task(title="nobody", due_at=now - HOUR)

    late = task_store.query_tasks(TaskQuery.overdue(now))
    assert [t.id for t in late] == [overdue, unassigned]
    assert late[0].assignee is not None
    assert late[0].assignee.email == "ada@example.com"
    assert late[0].assignee.name == "Ada"
    assert late[1].assignee is None

    upcoming = task_store.query_tasks(TaskQuery.upcoming(now, DAY))
    assert [t.id for t in upcoming] == [soon]
    assert upcoming[0].status == TaskStatus.PENDING


def test_due_between_bounds_are_inclusive(task_store: TaskStore) -> None:
    now = 1_700_000_000.0
    at_start = task_store.add_task(title="start", due_at=now)
    at_end = task_store.add_task(title="end", due_at=now + DAY)

    ids = {t.id for t in task_store.query_tasks(TaskQuery.upcoming(now, DAY))}
    assert ids == {at_start, at_end}
    assert task_store.query_tasks(TaskQuery.overdue(now)) == []


def test_status_updates_are_seen_by_queries(task_store: TaskStore) -> None:
    now = time.time()
    task_id = task_store.add_task(title="x", due_at=now - HOUR, status=TaskStatus.IN_PROGRESS)
    assert len(task_store.query_tasks(TaskQuery.overdue(now))) == 1

    task_store.update_task_status(task_id, TaskStatus.COMPLETED)
    assert task_store.query_tasks(TaskQuery.overdue(now)) == []
    assert task_store.get_task(task_id).status == TaskStatus.COMPLETED


def test_add_task_requires_title(task_store: TaskStore) -> None:
    with pytest.raises(ValueError):
        task_store.add_task(title="  ")


def test_delete_task(task_store: TaskStore) -> None:
    task_id = task_store.add_task(title="x")
    assert task_store.delete_task(task_id) is True
    assert task_store.delete_task(task_id) is False
    assert task_store.get_task(task_id) is None
    assert task_store.count_tasks() == 0


def test_task_query_requires_exactly_one_predicate() -> None:
    with pytest.raises(ValueError):
        TaskQuery()
    with pytest.raises(ValueError):
        TaskQuery(due_before=1.0, due_between=(0.0, 2.0))
    with pytest.raises(ValueError):
        TaskQuery(due_between=(2.0, 1.0))


def test_unknown_status_decodes_as_pending() -> None:
    assert TaskStatus.from_db("archived") == TaskStatus.PENDING
    assert TaskStatus.from_db(None) == TaskStatus.PENDING
