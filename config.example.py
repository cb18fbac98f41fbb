# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Put SMTP credentials in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "NOTIFIER_APP_NAME": "App display name (default: deadline-notifier).",
    "NOTIFIER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "NOTIFIER_DATA_DIR": "Local data directory (default: .local/notifier).",
    "NOTIFIER_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    "NOTIFIER_NOTIFICATIONS_DB_PATH": (
        "NotificationStore SQLite path (default: <data_dir>/notifications.sqlite3)."
    ),
    # Engine / scheduling
    "NOTIFIER_CYCLE_INTERVAL_SECONDS": "Seconds between cycle starts (default: 600).",
    "NOTIFIER_RUN_ON_START": "Run one cycle immediately at startup (default: true).",
    "NOTIFIER_CYCLE_SOFT_DEADLINE_SECONDS": (
        "Tasks not started within this many seconds are deferred to the next cycle (0 = off)."
    ),
    "NOTIFIER_MAX_CONCURRENCY": "Tasks processed concurrently within a sub-scan (default: 4).",
    # Links
    "NOTIFIER_FRONTEND_URL": "Base URL used in email buttons (fallback: FRONTEND_URL).",
    # Email (SMTP)
    "NOTIFIER_SMTP_HOST": "SMTP host (default: smtp.gmail.com).",
    "NOTIFIER_SMTP_PORT": "SMTP port, STARTTLS (default: 587).",
    "NOTIFIER_SMTP_USER": "SMTP user / sender address (fallback: EMAIL_USER).",
    "NOTIFIER_SMTP_PASSWORD": "SMTP password (fallback: EMAIL_PASS). Empty => email disabled.",
    "NOTIFIER_SMTP_FROM_NAME": "Display name in the From header (default: Task Manager).",
}
