"""
Notification module.

Sends missing-homework reminders by email.
"""

from .sender import (
    EmailSender,
    NotificationResult,
    SendError,
    SmtpTransport,
    Transport,
    notify_students,
)
from .templates import MessageTemplate, render_reminder

__all__ = [
    "EmailSender",
    "MessageTemplate",
    "NotificationResult",
    "SendError",
    "SmtpTransport",
    "Transport",
    "notify_students",
    "render_reminder",
]
