"""Global test fixtures for the Trustprint test suite."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import pytest

from trustprint.cli.config import reset_cli_config
from trustprint.core.config import clear_config_cache
from trustprint.core.models import MessageRecord

BASE_TIME = datetime(2026, 2, 1, 10, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _reset_config():
    """Each test sees freshly loaded settings."""
    clear_config_cache()
    reset_cli_config()
    yield
    clear_config_cache()
    reset_cli_config()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all TRUSTPRINT_ and adapter environment variables."""
    env_prefixes = ("TRUSTPRINT_", "INTUITION_", "INTERCOM_")
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the settings under test
    monkeypatch.chdir(os.path.dirname(__file__))


def make_message(sender: str, minutes: float, length: int = 100, recipient: str | None = None) -> MessageRecord:
    """Message from ``sender`` at BASE_TIME + ``minutes``."""
    if recipient is None:
        recipient = "veritas" if sender == "axiom" else "axiom"
    return MessageRecord(
        sender=sender,
        recipient=recipient,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
        body_length=length,
    )


@pytest.fixture
def msg():
    """Factory fixture for message records."""
    return make_message


@pytest.fixture
def conversation() -> list[MessageRecord]:
    """A short axiom/veritas exchange with one overnight-style gap."""
    return [
        make_message("axiom", 0, 120),
        make_message("veritas", 10, 80),
        make_message("veritas", 15, 40),
        make_message("axiom", 45, 200),
        make_message("veritas", 300, 60),
    ]
