"""
Pytest configuration and fixtures for all tests.
"""

import io
from email.message import EmailMessage
from pathlib import Path

import pytest
import yaml
from rich.console import Console

from homework_checker.config.models import Encryption, SmtpSettings, Student
from homework_checker.notify.sender import SendError


class FakeTransport:
    """Records messages instead of delivering them."""

    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.sent: list[EmailMessage] = []
        self.attempted: list[str] = []

    def send(self, message: EmailMessage) -> None:
        recipient = message["To"]
        self.attempted.append(recipient)
        if recipient in self.fail_for:
            raise SendError(f"Delivery to {recipient} refused")
        self.sent.append(message)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def smtp_settings():
    return SmtpSettings(
        encryption=Encryption.TLS,
        server="smtp.example.com",
        port=465,
        username="teacher@example.com",
        password="secret",
    )


@pytest.fixture
def students():
    return [
        Student("A", "a@x.com"),
        Student("B", "b@x.com"),
    ]


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / "cfg"
    path.mkdir()
    return path


@pytest.fixture
def write_config(config_dir):
    """Write a YAML document into the config directory."""

    def _write(name: str, data: dict) -> Path:
        path = config_dir / f"{name}.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


@pytest.fixture
def transport_factory():
    return FakeTransport
