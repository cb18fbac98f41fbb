# src/deadline_notifier/notifications/mailer.py

from __future__ import annotations

"""
SMTP email dispatcher.

send_email() never raises: configuration gaps, connection errors and SMTP
rejections are all reported through EmailResult so one failed email can never
abort a notification cycle.
"""

import asyncio
import logging
import smtplib
import time
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EmailResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class SmtpEmailSender:
    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        from_name: str = "Task Manager",
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = int(port)
        self.user = user
        self.password = password
        self.from_name = from_name
        self.timeout = float(timeout)

    @classmethod
    def from_settings(cls, settings) -> SmtpEmailSender:
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            from_name=settings.smtp_from_name,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password)

    def _build_message(self, to: str, subject: str, html_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.user}>"
        msg["To"] = to
        msg["Message-ID"] = make_msgid()
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def _send_sync(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user or "", self.password or "")
            server.send_message(msg)

    async def send_email(self, *, to: str, subject: str, html_body: str) -> EmailResult:
        if not self.configured:
            logger.info("Email credentials not configured. Skipping email send.")
            return EmailResult(success=False, error="Email not configured")
        if not to or not to.strip():
            return EmailResult(success=False, error="Recipient has no email address")

        try:
            msg = self._build_message(to.strip(), subject, html_body)
            started = time.monotonic()
            # smtplib blocks; keep it off the event loop.
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._send_sync, msg)
            logger.info(
                "Email sent to=%s message_id=%s in %.2fs",
                to,
                msg["Message-ID"],
                time.monotonic() - started,
            )
            return EmailResult(success=True, message_id=str(msg["Message-ID"]))
        except Exception as e:
            logger.exception("Error sending email to=%s", to)
            return EmailResult(success=False, error=str(e) or e.__class__.__name__)
