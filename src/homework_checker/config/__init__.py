"""
Configuration module.

Handles layered loading and validation of mail server settings,
the student roster, and logging options.
"""

from .loader import ConfigError, ConfigLoader, load, merge_documents
from .models import (
    AppConfig,
    Encryption,
    LoggingSettings,
    MailRetrievalSettings,
    SmtpSettings,
    Student,
    StudentConfig,
    ValidationError,
    is_valid_email,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "ConfigLoader",
    "Encryption",
    "LoggingSettings",
    "MailRetrievalSettings",
    "SmtpSettings",
    "Student",
    "StudentConfig",
    "ValidationError",
    "is_valid_email",
    "load",
    "merge_documents",
]
