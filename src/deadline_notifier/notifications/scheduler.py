# src/deadline_notifier/notifications/scheduler.py

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from .engine import CycleReport, NotificationEngine

logger = logging.getLogger(__name__)


class NotificationScheduler:
    """
    Fixed-period trigger for the notification engine.

    run_forever():
    - runs one cycle immediately (run_on_start=True),
    - then one cycle every interval_seconds, measured start-to-start,
    - awaits each cycle before scheduling the next, so the loop never overlaps
      two of its own cycles; an overrunning cycle delays the next one.

    A cycle that raises is logged and the loop continues. To stop the
    scheduler, cancel the coroutine/task.
    """

    def __init__(
        self,
        engine: NotificationEngine,
        *,
        interval_seconds: float = 600.0,
        run_on_start: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self.interval_seconds = max(0.01, float(interval_seconds))
        self.run_on_start = run_on_start
        self._sleep = sleep
        self._monotonic = monotonic
        self.cycles_run = 0
        self.last_report: CycleReport | None = None

    async def run_once(self) -> CycleReport:
        report = await self.engine.run_cycle()
        self.cycles_run += 1
        self.last_report = report
        return report

    async def _guarded_cycle(self) -> None:
        try:
            await self.run_once()
        except Exception:
            logger.exception("Notification cycle crashed; next cycle is still scheduled")

    async def run_forever(self) -> None:
        logger.info(
            "Notification scheduler started (every %.0fs, run_on_start=%s)",
            self.interval_seconds,
            self.run_on_start,
        )
        next_at = self._monotonic()
        if self.run_on_start:
            await self._guarded_cycle()
        next_at += self.interval_seconds

        while True:
            await self._sleep(max(0.0, next_at - self._monotonic()))
            next_at = max(next_at + self.interval_seconds, self._monotonic())
            await self._guarded_cycle()
