import pytest
from fastapi.testclient import TestClient

from reminders.gateway import DeliveryGateway
from server.dependencies import get_channel, get_otp_service, get_reminder_scheduler
from server.main import app
from server.otp import OtpService

from tests.fakes import FakeChannel, FakeClock


class FakeScheduler:
    armed = False


@pytest.fixture
def fake_channel():
    return FakeChannel()


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def otp_clock(now):
    return FakeClock(now)


@pytest.fixture
def otp_service(fake_channel, otp_clock):
    return OtpService(DeliveryGateway(fake_channel), clock=otp_clock)


@pytest.fixture
def api_client(otp_service, fake_channel, fake_scheduler):
    app.dependency_overrides[get_otp_service] = lambda: otp_service
    app.dependency_overrides[get_channel] = lambda: fake_channel
    app.dependency_overrides[get_reminder_scheduler] = lambda: fake_scheduler
    # No context manager: startup hooks (DB, watchdog) stay off
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
