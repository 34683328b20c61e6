"""Configuration data models."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

VALID_LOG_LEVELS = ("error", "warn", "info", "debug", "trace")

MAX_PORT = 65535


class ValidationError(ValueError):
    """A configuration value violates one of its rules."""

    pass


def is_valid_email(address: str) -> bool:
    """Check an address against the accepted email grammar."""
    return bool(EMAIL_PATTERN.fullmatch(address))


def _get_str(data: dict[str, Any], key: str, default: str, section: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ValidationError(f"{section}.{key} must be a string, got {value!r}")
    return value


def _get_port(data: dict[str, Any], default: int, section: str) -> int:
    value = data.get("port", default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{section}.port must be an integer, got {value!r}")
    return value


def _check_port(port: int, label: str) -> None:
    if port <= 0:
        raise ValidationError(f"{label} port must be greater than 0")
    if port > MAX_PORT:
        raise ValidationError(f"{label} port must be at most {MAX_PORT}")


class Encryption(str, Enum):
    """Connection security used for the SMTP server."""

    TLS = "tls"
    STARTTLS = "starttls"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> "Encryption":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValidationError(f"smtp_config.encryption must be a string, got {value!r}")
        try:
            return cls(value.lower())
        except ValueError:
            choices = ", ".join(e.value for e in cls)
            raise ValidationError(
                f"Invalid SMTP encryption: {value}. Valid values are: {choices}"
            ) from None


@dataclass(frozen=True)
class Student:
    """A student expected to hand in homework."""

    name: str
    email: str

    def check_email(self) -> None:
        """Raise ValidationError if the student's email is malformed."""
        if not is_valid_email(self.email):
            raise ValidationError(f"Invalid email format for student: {self.name}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Student":
        if not isinstance(data, dict):
            raise ValidationError(f"Student entry must be a mapping, got {data!r}")
        if "name" not in data or "email" not in data:
            raise ValidationError(f"Student entry requires 'name' and 'email': {data!r}")
        return cls(
            name=_get_str(data, "name", "", "stu_config.list"),
            email=_get_str(data, "email", "", "stu_config.list"),
        )


@dataclass
class SmtpSettings:
    """Outgoing mail server settings."""

    encryption: Encryption
    server: str = "smtp.163.com"
    port: int = 465
    username: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SmtpSettings":
        if "encryption" not in data:
            raise ValidationError("smtp_config.encryption is required")
        return cls(
            encryption=Encryption.parse(data["encryption"]),
            server=_get_str(data, "server", "smtp.163.com", "smtp_config"),
            port=_get_port(data, 465, "smtp_config"),
            username=_get_str(data, "username", "", "smtp_config"),
            password=_get_str(data, "password", "", "smtp_config"),
        )

    def validate(self, strict: bool = False) -> None:
        if not self.server:
            raise ValidationError("SMTP server cannot be empty")
        _check_port(self.port, "SMTP")
        if strict and (not self.username or not self.password):
            raise ValidationError("SMTP username and password are required in production")


@dataclass
class MailRetrievalSettings:
    """Incoming mail (IMAP) server settings."""

    server: str = "imap.qq.com"
    port: int = 993
    username: str = ""
    password: str = ""
    output_directory: str = "/out"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MailRetrievalSettings":
        return cls(
            server=_get_str(data, "server", "imap.qq.com", "imap_config"),
            port=_get_port(data, 993, "imap_config"),
            username=_get_str(data, "username", "", "imap_config"),
            password=_get_str(data, "password", "", "imap_config"),
            output_directory=_get_str(data, "out_dir", "/out", "imap_config"),
        )

    def validate(self, strict: bool = False) -> None:
        if not self.server:
            raise ValidationError("IMAP server cannot be empty")
        _check_port(self.port, "IMAP")
        if strict and (not self.username or not self.password):
            raise ValidationError("IMAP username and password are required in production")
        if not self.output_directory:
            raise ValidationError("Output directory cannot be empty")


@dataclass
class StudentConfig:
    """The roster, in configuration order."""

    students: list[Student] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StudentConfig":
        entries = data.get("list", [])
        if not isinstance(entries, list):
            raise ValidationError(f"stu_config.list must be a list, got {entries!r}")
        return cls(students=[Student.from_dict(s) for s in entries])

    def validate(self, strict: bool = False) -> None:
        for student in self.students:
            student.check_email()
        if strict and not self.students:
            raise ValidationError("Student list cannot be empty in production")


@dataclass
class LoggingSettings:
    """Log level and console mirroring."""

    level: str = "info"
    console_output: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LoggingSettings":
        console_output = data.get("console_output", False)
        if not isinstance(console_output, bool):
            raise ValidationError(
                f"log_config.console_output must be a boolean, got {console_output!r}"
            )
        return cls(
            level=_get_str(data, "level", "info", "log_config"),
            console_output=console_output,
        )

    def validate(self, strict: bool = False) -> None:
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValidationError(
                f"Invalid log level: {self.level}. "
                f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}"
            )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{key} must be a table of settings, got {value!r}")
    return value


@dataclass
class AppConfig:
    """Complete application configuration."""

    smtp: SmtpSettings
    mail_retrieval: MailRetrievalSettings = field(default_factory=MailRetrievalSettings)
    roster: StudentConfig = field(default_factory=StudentConfig)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        return cls(
            smtp=SmtpSettings.from_dict(_section(data, "smtp_config")),
            mail_retrieval=MailRetrievalSettings.from_dict(_section(data, "imap_config")),
            roster=StudentConfig.from_dict(_section(data, "stu_config")),
            logging=LoggingSettings.from_dict(_section(data, "log_config")),
        )

    @property
    def students(self) -> list[Student]:
        return self.roster.students

    def validate(self, strict: bool = False) -> None:
        """Validate every section, stopping at the first failure.

        Sections are checked in a fixed order: SMTP, mail retrieval,
        roster, logging.

        Args:
            strict: Also require credentials and a non-empty roster

        Raises:
            ValidationError: Describing the first violated rule
        """
        self.smtp.validate(strict)
        self.mail_retrieval.validate(strict)
        self.roster.validate(strict)
        self.logging.validate(strict)
