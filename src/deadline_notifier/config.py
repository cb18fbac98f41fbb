# src/deadline_notifier/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (email is optional; without SMTP
  credentials the sender reports "not configured" instead of failing).
- The legacy EMAIL_USER / EMAIL_PASS / FRONTEND_URL names keep working.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "NOTIFIER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    notifications_db_path: Path

    # ---- Engine / scheduling ----
    cycle_interval_seconds: float
    run_on_start: bool
    cycle_soft_deadline_seconds: float
    max_concurrency: int

    # ---- Links ----
    frontend_url: str

    # ---- Email (SMTP) ----
    smtp_host: str
    smtp_port: int
    smtp_user: Optional[str]
    smtp_password: Optional[str]
    smtp_from_name: str

    @property
    def email_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "deadline-notifier")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/notifier"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        notifications_db_path = _env_path(
            _k("NOTIFICATIONS_DB_PATH"), data_dir / "notifications.sqlite3"
        )

        # Reference policy: every 10 minutes, plus once at startup.
        cycle_interval_seconds = _env_float(_k("CYCLE_INTERVAL_SECONDS"), 600.0)
        run_on_start = _env_bool(_k("RUN_ON_START"), True)
        # 0 disables the soft deadline.
        cycle_soft_deadline_seconds = _env_float(_k("CYCLE_SOFT_DEADLINE_SECONDS"), 0.0)
        max_concurrency = _env_int(_k("MAX_CONCURRENCY"), 4)

        frontend_url = (
            _first_env(_k("FRONTEND_URL"), "FRONTEND_URL", default="http://localhost:5173")
            or "http://localhost:5173"
        ).rstrip("/")

        smtp_host = _env(_k("SMTP_HOST"), "smtp.gmail.com")
        smtp_port = _env_int(_k("SMTP_PORT"), 587)
        smtp_user = _first_env(_k("SMTP_USER"), "EMAIL_USER", default=None)
        smtp_password = _first_env(_k("SMTP_PASSWORD"), "EMAIL_PASS", default=None)
        smtp_from_name = _env(_k("SMTP_FROM_NAME"), "Task Manager")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            notifications_db_path=notifications_db_path,
            cycle_interval_seconds=cycle_interval_seconds,
            run_on_start=run_on_start,
            cycle_soft_deadline_seconds=cycle_soft_deadline_seconds,
            max_concurrency=max_concurrency,
            frontend_url=frontend_url,
            smtp_host=smtp_host,
            smtp_port=smtp_port,
            smtp_user=smtp_user,
            smtp_password=smtp_password,
            smtp_from_name=smtp_from_name,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
