"""Shared fixtures.

Environment is patched before any project import so server.config picks up
an in-memory database and never starts the WhatsApp watchdog.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("START_BACKGROUND", "false")
os.environ.setdefault("ACCESS_TOKEN", "test-token")
os.environ.setdefault("PHONE_NUMBER_ID", "1234567890")
os.environ.setdefault("VERSION", "v21.0")

from datetime import datetime

import pytest

from tests.fakes import FakeChannel, FakeClock


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 12, 0)


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def channel():
    return FakeChannel()
