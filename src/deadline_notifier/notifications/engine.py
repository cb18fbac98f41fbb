# src/deadline_notifier/notifications/engine.py

from __future__ import annotations

"""
Deadline notification engine.

One cycle:
- reads the clock once,
- runs the "upcoming" sub-scan, then the "overdue" sub-scan,
- for each candidate task: classify -> dedup gate -> insert notification -> email.

Failure isolation:
- a failing task query ends only its own sub-scan,
- a failing task never stops the other tasks of the batch,
- email is best-effort: its result is attached to the outcome and never
  rolls back the inserted notification.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from ..core.ports import Clock, EmailSender, NotificationRepo, TaskRepo
from ..tasks.task_models import Task, TaskQuery
from . import templates
from .classifier import UPCOMING_HORIZON_SECONDS, classify
from .dedup import DedupGate
from .mailer import EmailResult
from .models import Notification, NotificationKind

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    DISPATCHING = "dispatching"


class OutcomeStatus(str, Enum):
    CREATED = "created"
    SUPPRESSED = "suppressed"
    SKIPPED = "skipped"
    DEFERRED = "deferred"
    FAILED = "failed"


@dataclass(slots=True)
class TaskOutcome:
    task_id: int
    kind: NotificationKind
    status: OutcomeStatus
    magnitude: int = 0
    notification_id: int | None = None
    email: EmailResult | None = None
    reason: str | None = None
    error: str | None = None


@dataclass(slots=True)
class ScanReport:
    kind: NotificationKind
    candidates: int = 0
    scan_error: str | None = None
    outcomes: list[TaskOutcome] = field(default_factory=list)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def email_failures(self) -> int:
        return sum(1 for o in self.outcomes if o.email is not None and not o.email.success)


@dataclass(slots=True)
class CycleReport:
    started_at: float
    finished_at: float | None = None
    scans: list[ScanReport] = field(default_factory=list)

    @property
    def outcomes(self) -> list[TaskOutcome]:
        return [o for s in self.scans for o in s.outcomes]

    @property
    def created(self) -> int:
        return sum(s.count(OutcomeStatus.CREATED) for s in self.scans)

    @property
    def suppressed(self) -> int:
        return sum(s.count(OutcomeStatus.SUPPRESSED) for s in self.scans)

    @property
    def deferred(self) -> int:
        return sum(s.count(OutcomeStatus.DEFERRED) for s in self.scans)

    @property
    def errors(self) -> int:
        failed = sum(s.count(OutcomeStatus.FAILED) for s in self.scans)
        return failed + sum(1 for s in self.scans if s.scan_error)

    @property
    def email_failures(self) -> int:
        return sum(s.email_failures for s in self.scans)

    def summary(self) -> str:
        parts = []
        for s in self.scans:
            if s.scan_error:
                parts.append(f"{s.kind}: scan failed ({s.scan_error})")
            else:
                parts.append(
                    f"{s.kind}: {s.candidates} candidate(s), "
                    f"{s.count(OutcomeStatus.CREATED)} created, "
                    f"{s.count(OutcomeStatus.SUPPRESSED)} suppressed, "
                    f"{s.email_failures} email failure(s)"
                )
        return "; ".join(parts)


def notification_message(kind: NotificationKind, task_title: str, magnitude: int) -> str:
    if kind == NotificationKind.DEADLINE:
        return f'Task "{task_title}" is due in {magnitude} hours'
    if kind == NotificationKind.OVERDUE:
        return f'Task "{task_title}" is overdue by {magnitude} day(s)'
    raise ValueError(f"engine does not create notifications of kind={kind}")


class NotificationEngine:
    """
    Scans open tasks and emits deadline/overdue notifications.

    run_cycle() is the "run one notification cycle now" entry point used by
    the scheduler, the CLI (--once) and tests. The engine does not lock
    against a concurrent run_cycle() from elsewhere; the dedup window absorbs
    the rare duplicate that produces.
    """

    def __init__(
        self,
        task_repo: TaskRepo,
        notification_repo: NotificationRepo,
        email_sender: EmailSender,
        *,
        clock: Clock = time.time,
        frontend_url: str = "",
        horizon_seconds: float = UPCOMING_HORIZON_SECONDS,
        max_concurrency: int = 4,
        soft_deadline_seconds: float | None = None,
        gate: DedupGate | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._tasks = task_repo
        self._notifications = notification_repo
        self._email = email_sender
        self._clock = clock
        self._monotonic = monotonic
        self._frontend_url = frontend_url.rstrip("/")
        self._horizon = float(horizon_seconds)
        self._max_concurrency = max(1, int(max_concurrency))
        self._soft_deadline = (
            float(soft_deadline_seconds) if soft_deadline_seconds and soft_deadline_seconds > 0 else None
        )
        self._gate = gate or DedupGate(notification_repo)
        self.state = EngineState.IDLE

    async def run_cycle(self) -> CycleReport:
        now_ts = float(self._clock())
        report = CycleReport(started_at=now_ts)
        deadline = None if self._soft_deadline is None else self._monotonic() + self._soft_deadline

        scans = (
            (NotificationKind.DEADLINE, TaskQuery.upcoming(now_ts, self._horizon)),
            (NotificationKind.OVERDUE, TaskQuery.overdue(now_ts)),
        )
        try:
            for kind, query in scans:
                report.scans.append(await self._run_scan(kind, query, now_ts, deadline))
        finally:
            self.state = EngineState.IDLE

        report.finished_at = float(self._clock())
        if report.errors or report.email_failures:
            logger.warning("Notification cycle finished with problems: %s", report.summary())
        else:
            logger.info("Notification cycle finished: %s", report.summary())
        if report.deferred:
            logger.warning("Soft deadline hit: %d task(s) deferred to the next cycle", report.deferred)
        return report

    async def _run_scan(
        self,
        kind: NotificationKind,
        query: TaskQuery,
        now_ts: float,
        deadline: float | None,
    ) -> ScanReport:
        scan = ScanReport(kind=kind)
        self.state = EngineState.SCANNING

        try:
            found = self._tasks.query_tasks(query)
        except Exception as e:
            logger.exception("query_tasks failed kind=%s", kind)
            scan.scan_error = str(e) or e.__class__.__name__
            return scan

        # One entry per task id: the same (task, kind) pair is never in flight twice.
        tasks: dict[int, Task] = {}
        for t in found:
            tasks.setdefault(int(t.id), t)
        scan.candidates = len(tasks)
        logger.debug("Found %d candidate task(s) kind=%s", scan.candidates, kind)

        self.state = EngineState.DISPATCHING
        sem = asyncio.Semaphore(self._max_concurrency)

        async def guarded(task: Task) -> TaskOutcome:
            async with sem:
                if deadline is not None and self._monotonic() > deadline:
                    return TaskOutcome(task_id=int(task.id), kind=kind, status=OutcomeStatus.DEFERRED)
                try:
                    return await self._process_task(task, kind, now_ts)
                except Exception as e:
                    logger.exception("Processing failed task_id=%s kind=%s", task.id, kind)
                    return TaskOutcome(
                        task_id=int(task.id),
                        kind=kind,
                        status=OutcomeStatus.FAILED,
                        error=str(e) or e.__class__.__name__,
                    )

        scan.outcomes = list(await asyncio.gather(*(guarded(t) for t in tasks.values())))
        return scan

    async def _process_task(self, task: Task, kind: NotificationKind, now_ts: float) -> TaskOutcome:
        task_id = int(task.id)
        assignee = task.assignee
        if assignee is None or not assignee.id:
            return TaskOutcome(task_id=task_id, kind=kind, status=OutcomeStatus.SKIPPED, reason="no assignee")

        c = classify(task.due_at, task.status, now_ts, horizon_seconds=self._horizon)
        if c.threshold.notification_kind() != kind:
            # The repo returned a task this sub-scan does not own (e.g. completed meanwhile).
            return TaskOutcome(
                task_id=task_id,
                kind=kind,
                status=OutcomeStatus.SKIPPED,
                reason=f"classified as {c.threshold.value}",
            )

        if not self._gate.permits(task_id=task_id, user_id=assignee.id, kind=kind, now_ts=now_ts):
            return TaskOutcome(
                task_id=task_id, kind=kind, status=OutcomeStatus.SUPPRESSED, magnitude=c.magnitude
            )

        record = Notification(
            user_id=assignee.id,
            task_id=task_id,
            kind=kind,
            message=notification_message(kind, task.title, c.magnitude),
            link=f"/tasks/{task_id}",
            created_at=now_ts,
        )
        notification_id = self._notifications.insert_notification(record)

        email = await self._send_email(task, kind, c.magnitude)
        return TaskOutcome(
            task_id=task_id,
            kind=kind,
            status=OutcomeStatus.CREATED,
            magnitude=c.magnitude,
            notification_id=notification_id,
            email=email,
        )

    async def _send_email(self, task: Task, kind: NotificationKind, magnitude: int) -> EmailResult:
        to = task.assignee.email if task.assignee else None
        if not to:
            logger.warning("No email address for assignee of task_id=%s; in-app only", task.id)
            return EmailResult(success=False, error="Recipient has no email address")

        if kind == NotificationKind.DEADLINE:
            subject = templates.deadline_reminder_subject(task.title)
            body = templates.deadline_reminder(task.title, magnitude, frontend_url=self._frontend_url)
        else:
            subject = templates.task_overdue_subject(task.title)
            body = templates.task_overdue(task.title, magnitude, frontend_url=self._frontend_url)

        try:
            result = await self._email.send_email(to=to, subject=subject, html_body=body)
        except Exception as e:
            # Senders should not raise; keep the cycle alive if one does.
            logger.exception("Email sender raised for task_id=%s", task.id)
            result = EmailResult(success=False, error=str(e) or e.__class__.__name__)

        if result.success:
            logger.info("%s email sent for task_id=%s to=%s", kind, task.id, to)
        else:
            logger.warning(
                "Failed to send %s email for task_id=%s: %s", kind, task.id, result.error
            )
        return result
