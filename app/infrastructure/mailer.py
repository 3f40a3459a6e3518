"""SMTP Mailer — delivers OutgoingEmail through aiosmtplib.

Invariants:
    - From header is always `"<sender name>" <email_user>`
    - Every transport failure is mapped to EmailDeliveryError (core/errors.py)
    - One SMTP connection per send; nothing is pooled between requests

Design Decisions:
    - Implicit TLS by default (Titan Mail, port 465); STARTTLS available via settings
    - get_mailer is a FastAPI dependency so tests swap in a recording fake
"""

import logging
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import aiosmtplib

from app.config import Settings, get_settings
from app.core.email_templates import OutgoingEmail
from app.core.errors import EmailDeliveryError, ErrorContext

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends plain-text email over SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender_name: str,
        use_tls: bool = True,
        start_tls: bool = False,
        timeout_seconds: int = 30,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_name = sender_name
        self.use_tls = use_tls
        self.start_tls = start_tls
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpMailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            sender_name=settings.mail_sender_name,
            use_tls=settings.smtp_use_tls,
            start_tls=settings.smtp_start_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
        )

    def build_message(self, email: OutgoingEmail) -> EmailMessage:
        """Turn an OutgoingEmail into a MIME message with our From header."""
        msg = EmailMessage()
        msg["From"] = formataddr((self.sender_name, self.username))
        msg["To"] = email.to
        msg["Subject"] = email.subject
        msg["Message-ID"] = make_msgid(domain=self.username.rpartition("@")[2] or None)
        if email.reply_to:
            msg["Reply-To"] = email.reply_to
        msg.set_content(email.text)
        return msg

    async def send(
        self, email: OutgoingEmail, context: ErrorContext | None = None,
    ) -> None:
        """Deliver one email; raise EmailDeliveryError on any transport failure.

        A header value the email package refuses (ValueError) is reported
        the same way as a refused delivery.
        """
        try:
            message = self.build_message(email)
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                use_tls=self.use_tls,
                start_tls=self.start_tls,
                timeout=self.timeout_seconds,
            )
        except (aiosmtplib.SMTPException, OSError, ValueError) as e:
            logger.error(
                f"SMTP delivery to {email.to} failed: {e}",
                extra={"submission_type": context.submission_type if context else None},
            )
            raise EmailDeliveryError(str(e), email.to, context=context)
        logger.info(
            f"Email sent to {email.to}: {email.subject}",
            extra={"submission_type": context.submission_type if context else None},
        )


def get_mailer() -> SmtpMailer:
    """FastAPI dependency for the SMTP mailer."""
    return SmtpMailer.from_settings(get_settings())
