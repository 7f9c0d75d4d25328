from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import config
from database import TelemetryStore
from main import app
from routes.deps import get_store

# A Monday, noon UTC
T0 = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually driven clock so tests can jump days without sleeping."""

    def __init__(self, start=T0):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)
        return self.current

    def set(self, when):
        self.current = when


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TelemetryStore(clock=clock)


@pytest.fixture(autouse=True)
def no_webhook(monkeypatch):
    """No test may reach Discord unless it opts in explicitly."""
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", "")


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
