"""OTP delivery: console (development) and SMTP."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from collections import deque
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.application.interfaces.services import IOtpSender
    from app.core.config import Settings

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your verification code"


def _render(code: str, expires_at: datetime) -> tuple[str, str]:
    expires = expires_at.strftime("%H:%M UTC")
    text = f"Your verification code is {code}. It expires at {expires}."
    html = (
        "<p>Your verification code is</p>"
        f"<p style=\"font-size:24px;letter-spacing:4px\"><strong>{code}</strong></p>"
        f"<p>It expires at {expires}. If you did not request it, ignore this email.</p>"
    )
    return text, html


class ConsoleOtpSender:
    """Logs the code instead of sending it. Development and tests only.

    The most recent codes are kept in sent (bounded by history).
    """

    def __init__(self, history: int = 100) -> None:
        self.sent: deque[tuple[str, str]] = deque(maxlen=history)

    async def send_otp(self, email: str, code: str, expires_at: datetime) -> None:
        self.sent.append((email, code))
        logger.info("OTP for %s: %s (expires %s)", email, code, expires_at.isoformat())


class SmtpOtpSender:
    """Send the code by email. smtplib is blocking, so it runs in a worker thread."""

    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send_otp(self, email: str, code: str, expires_at: datetime) -> None:
        text, html = _render(code, expires_at)
        msg = MIMEMultipart("alternative")
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = self.from_address
        msg["To"] = email
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        await asyncio.to_thread(self._send, email, msg.as_string())
        logger.info("OTP email sent to %s", email)

    def _send(self, to_address: str, body: str) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_address, [to_address], body)


def build_otp_sender(settings: Settings) -> IOtpSender:
    """Pick the sender named by OTP_DELIVERY."""
    if settings.otp_delivery == "smtp":
        return SmtpOtpSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_address=settings.smtp_from_address,
            username=settings.smtp_username,
            password=(
                settings.smtp_password.get_secret_value()
                if settings.smtp_password
                else None
            ),
            use_tls=settings.smtp_use_tls,
        )
    return ConsoleOtpSender()
