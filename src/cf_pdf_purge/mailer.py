"""Outbound mail."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from cf_pdf_purge.models.settings import EnvSettings

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to: str, subject: str, body: str) -> bool:
        """Send a plain-text message. Returns whether it was handed off."""


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int = 25,
        sender: str = "",
        username: str | None = None,
        password: str | None = None,
        starttls: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    @classmethod
    def from_env(cls, env: EnvSettings) -> SmtpMailer:
        return cls(
            host=env.smtp_host,
            port=env.smtp_port,
            sender=env.mail_sender,
            username=env.smtp_username,
            password=env.smtp_password,
            starttls=env.smtp_starttls,
            timeout=env.smtp_timeout,
        )

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def send(self, to: str, subject: str, body: str) -> bool:
        msg = self.build_message(to, subject, body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Failed to send mail to %s: %s", to, e)
            return False
        return True
