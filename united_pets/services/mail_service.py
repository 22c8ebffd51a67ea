"""
United Pets Backend — SMTP Mailer
==================================

What:  Sends HTML e-mails (adoption notifications, donation receipts) through
       the platform's mail account.
How:   smtplib + email.mime, executed in a worker thread so the blocking SMTP
       conversation never stalls the event loop. STARTTLS by default.
Who:   POST /send-mail.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from united_pets.config import settings
from united_pets.exceptions import NotificationError
from united_pets.services.adapter_base import Mailer

logger = logging.getLogger(__name__)


class SmtpMailer(Mailer):

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username if username is not None else settings.smtp_username
        self.password = password if password is not None else settings.smtp_password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.timeout = timeout or settings.smtp_timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    async def send(self, sender: str, to: str, subject: str, html: str) -> None:
        if not self.is_configured:
            raise NotificationError(message="Mail is not configured on this server.")

        message = self._build_message(sender, to, subject, html)
        try:
            await asyncio.to_thread(self._deliver, sender, to, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send mail to %s: %s", to, exc)
            raise NotificationError(context={"error_type": type(exc).__name__})

        logger.info("Mail sent to %s (subject=%r)", to, subject)

    @staticmethod
    def _build_message(sender: str, to: str, subject: str, html: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = sender
        message["To"] = to
        message.attach(MIMEText(html, "html"))
        return message

    def _deliver(self, sender: str, to: str, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            server.login(self.username, self.password)
            server.sendmail(sender, [to], message.as_string())
