# tests/test_scheduler.py

from __future__ import annotations

import asyncio

import pytest

from deadline_notifier.notifications.engine import CycleReport, NotificationEngine
from deadline_notifier.notifications.scheduler import NotificationScheduler

from .fakes import HOUR, FakeClock, FakeEmailSender, FakeNotificationRepo, FakeTaskRepo, make_task


class _StopAfter:
    """Fake sleep on a fake monotonic clock: records requested delays and cancels the loop after n sleeps."""

    def __init__(self, n: int) -> None:
        self.n = n
        self.now = 0.0
        self.delays: list[float] = []

    def monotonic(self) -> float:
        return self.now

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.now += seconds
        if len(self.delays) > self.n:
            raise asyncio.CancelledError


class _CrashingEngine:
    def __init__(self) -> None:
        self.calls = 0

    async def run_cycle(self) -> CycleReport:
        self.calls += 1
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_scheduler_runs_startup_cycle_then_every_interval(clock: FakeClock) -> None:
    notifications = FakeNotificationRepo()
    engine = NotificationEngine(
        FakeTaskRepo([make_task(1, due_at=clock() - HOUR)]),
        notifications,
        FakeEmailSender(),
        clock=clock,
    )
    sleep = _StopAfter(2)
    scheduler = NotificationScheduler(engine, interval_seconds=600, sleep=sleep, monotonic=sleep.monotonic)

    with pytest.raises(asyncio.CancelledError):
        await scheduler.run_forever()

    # startup + two periodic cycles
    assert scheduler.cycles_run == 3
    assert sleep.delays[:2] == [600.0, 600.0]
    # Same instant every cycle: the dedup window keeps it to one record.
    assert len(notifications.records) == 1
    assert scheduler.last_report is not None
    assert scheduler.last_report.suppressed == 1


@pytest.mark.asyncio
async def test_scheduler_can_skip_startup_cycle(clock: FakeClock) -> None:
    engine = NotificationEngine(FakeTaskRepo([]), FakeNotificationRepo(), FakeEmailSender(), clock=clock)
    sleep = _StopAfter(0)
    scheduler = NotificationScheduler(engine, run_on_start=False, sleep=sleep, monotonic=sleep.monotonic)

    with pytest.raises(asyncio.CancelledError):
        await scheduler.run_forever()

    assert scheduler.cycles_run == 0


@pytest.mark.asyncio
async def test_crashing_cycle_does_not_stop_the_loop() -> None:
    engine = _CrashingEngine()
    sleep = _StopAfter(2)
    scheduler = NotificationScheduler(engine, sleep=sleep, monotonic=sleep.monotonic)  # type: ignore[arg-type]

    with pytest.raises(asyncio.CancelledError):
        await scheduler.run_forever()

    assert engine.calls == 3
    assert scheduler.cycles_run == 0


@pytest.mark.asyncio
async def test_run_once_returns_report(clock: FakeClock) -> None:
    engine = NotificationEngine(
        FakeTaskRepo([make_task(1, due_at=clock() + 2 * HOUR)]),
        FakeNotificationRepo(),
        FakeEmailSender(),
        clock=clock,
    )
    scheduler = NotificationScheduler(engine)

    report = await scheduler.run_once()

    assert report.created == 1
    assert scheduler.cycles_run == 1


@pytest.mark.asyncio
async def test_real_timer_loop_can_be_cancelled(clock: FakeClock) -> None:
    engine = NotificationEngine(FakeTaskRepo([]), FakeNotificationRepo(), FakeEmailSender(), clock=clock)
    scheduler = NotificationScheduler(engine, interval_seconds=0.01)

    runner = asyncio.create_task(scheduler.run_forever())
    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert scheduler.cycles_run >= 2
