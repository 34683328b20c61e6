"""
Email delivery for submission reminders.

The sender builds multipart (plain text + HTML) messages and hands them
to a transport. The SMTP transport opens a fresh connection for every
message; tests substitute any object with a matching ``send`` method.
"""

import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Iterable, Protocol

from ..config.models import Encryption, SmtpSettings, Student, is_valid_email
from ..utils.logging import get_logger
from .templates import render_reminder

logger = get_logger(__name__)

SMTP_TIMEOUT = 30


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class SendError(Exception):
    """A message could not be built or delivered."""

    pass


# -----------------------------------------------------------------------------
# Transports
# -----------------------------------------------------------------------------


class Transport(Protocol):
    """Anything able to deliver a built message."""

    def send(self, message: EmailMessage) -> None:
        """Deliver a message, raising SendError on failure."""
        ...


class SmtpTransport:
    """Delivers messages over SMTP, one connection per message."""

    def __init__(self, settings: SmtpSettings):
        """Initialize the transport.

        Args:
            settings: SMTP server settings

        Raises:
            SendError: If the server is missing or TLS cannot be set up
        """
        if not settings.server:
            raise SendError("SMTP server is not configured")

        self.settings = settings
        self._tls_context: ssl.SSLContext | None = None
        if settings.encryption is not Encryption.NONE:
            try:
                self._tls_context = ssl.create_default_context()
            except ssl.SSLError as e:
                raise SendError(f"Cannot create TLS parameters for {settings.server}: {e}") from e

    def _connect(self) -> smtplib.SMTP:
        host, port = self.settings.server, self.settings.port
        if self.settings.encryption is Encryption.TLS:
            return smtplib.SMTP_SSL(host, port, timeout=SMTP_TIMEOUT, context=self._tls_context)

        client = smtplib.SMTP(host, port, timeout=SMTP_TIMEOUT)
        if self.settings.encryption is Encryption.STARTTLS:
            try:
                client.starttls(context=self._tls_context)
            except (smtplib.SMTPException, OSError):
                client.close()
                raise
        return client

    def send(self, message: EmailMessage) -> None:
        try:
            with self._connect() as client:
                if self.settings.username:
                    client.login(self.settings.username, self.settings.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise SendError(f"SMTP delivery to {message['To']} failed: {e}") from e


# -----------------------------------------------------------------------------
# Sender
# -----------------------------------------------------------------------------


class EmailSender:
    """Builds and sends reminder emails."""

    def __init__(
        self,
        from_address: str,
        smtp_settings: SmtpSettings,
        transport: Transport | None = None,
    ):
        """Initialize the sender.

        Args:
            from_address: Sender email address
            smtp_settings: SMTP server settings
            transport: Delivery transport. Defaults to an SmtpTransport
                for ``smtp_settings``

        Raises:
            SendError: If the sender address is invalid or the transport
                cannot be initialized
        """
        if not is_valid_email(from_address):
            raise SendError(f"Invalid sender email address: {from_address!r}")

        self.from_address = from_address
        self.smtp_settings = smtp_settings
        self.transport = transport if transport is not None else SmtpTransport(smtp_settings)

    def build_message(
        self,
        to: str,
        subject: str,
        text_body: str,
        html_body: str,
    ) -> EmailMessage:
        """Build a multipart/alternative message.

        Raises:
            SendError: If the recipient address is invalid
        """
        if not is_valid_email(to):
            raise SendError(f"Invalid recipient email address: {to!r}")

        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject
        try:
            message.set_content(text_body, subtype="plain", charset="utf-8")
            message.add_alternative(html_body, subtype="html", charset="utf-8")
        except (ValueError, TypeError) as e:
            raise SendError(f"Cannot build email for {to}: {e}") from e
        return message

    def send(self, to: str, subject: str, text_body: str, html_body: str) -> None:
        """Build a message and deliver it synchronously.

        Args:
            to: Recipient email address
            subject: Subject line
            text_body: Plain text alternative
            html_body: HTML alternative

        Raises:
            SendError: If building or delivering the message fails
        """
        message = self.build_message(to, subject, text_body, html_body)
        try:
            self.transport.send(message)
        except SendError as e:
            logger.error(f"Sending to {to} failed: {e}")
            raise
        logger.info(f"Email sent to {to}")

    def notify_student(self, homework_name: str, student: Student) -> None:
        """Send the missing-homework reminder to one student."""
        subject, text_body, html_body = render_reminder(student.name, homework_name)
        self.send(student.email, subject, text_body, html_body)


# -----------------------------------------------------------------------------
# Batch dispatch
# -----------------------------------------------------------------------------


@dataclass
class NotificationResult:
    """Outcome of reminding one student."""

    student: Student
    success: bool
    error_message: str | None = None

    def __repr__(self) -> str:
        if self.success:
            return f"NotificationResult(success=True, email={self.student.email})"
        return (
            f"NotificationResult(success=False, email={self.student.email}, "
            f"error={self.error_message})"
        )


def notify_students(
    sender: EmailSender,
    homework_name: str,
    students: Iterable[Student],
) -> list[NotificationResult]:
    """
    Remind each student in order, one send at a time.

    A failure for one student is logged and recorded; the remaining
    students are still attempted.

    Returns:
        One result per student, in input order
    """
    results = []
    for student in students:
        try:
            sender.notify_student(homework_name, student)
        except SendError as e:
            logger.warning(f"Failed to send reminder to {student.email}: {e}")
            results.append(NotificationResult(student, success=False, error_message=str(e)))
        else:
            results.append(NotificationResult(student, success=True))

    sent = sum(1 for r in results if r.success)
    logger.info(f"Notification run complete: {sent}/{len(results)} sent")
    return results
