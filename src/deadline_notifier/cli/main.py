# src/deadline_notifier/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs the notification scheduler until SIGINT/SIGTERM (default),
- runs exactly one cycle and prints its summary (--once),
- sends a test email through the configured SMTP account (--test-email).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from datetime import datetime, timezone

from ..cli.bootstrap import create_initial_state, create_scheduler
from ..config import get_settings
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..notifications import templates

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="deadline-notifier", description=__doc__.splitlines()[1])
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="run one notification cycle and exit")
    mode.add_argument("--test-email", metavar="ADDRESS", help="send a test email and exit")
    return p.parse_args(argv)


async def _run_once(state: AppState) -> int:
    report = await state.engine.run_cycle()
    print(report.summary())
    return 1 if report.errors else 0


async def _send_test_email(state: AppState, address: str) -> int:
    settings = state.settings
    result = await state.email_sender.send_email(
        to=address,
        subject=f"{getattr(settings, 'app_name', 'deadline-notifier')} test email",
        html_body=templates.smtp_check_email(
            getattr(settings, "app_name", "deadline-notifier"),
            datetime.now(timezone.utc).isoformat(),
        ),
    )
    if result.success:
        print(f"Test email sent to {address} (message id {result.message_id})")
        return 0
    print(f"Test email failed: {result.error}")
    return 1


async def _run_forever(state: AppState) -> None:
    scheduler = create_scheduler(state)
    runner = asyncio.create_task(scheduler.run_forever())

    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        runner.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handle_signal, sig)
        except (NotImplementedError, RuntimeError):
            # Some platforms may not support signal handlers on the loop.
            pass

    try:
        await runner
    except asyncio.CancelledError:
        pass
    logger.info("Scheduler stopped after %d cycle(s).", scheduler.cycles_run)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=getattr(settings, "data_dir", ".local/notifier"), console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "deadline-notifier"))

    state = create_initial_state(settings=settings)

    try:
        if args.test_email:
            return asyncio.run(_send_test_email(state, args.test_email))
        if args.once:
            return asyncio.run(_run_once(state))
        asyncio.run(_run_forever(state))
        return 0
    except KeyboardInterrupt:
        return 0
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    raise SystemExit(main())
