"""HTTP-level tests using FastAPI's TestClient.

The store behind the app is swapped for a fresh one driven by the
fake clock (see the `client` fixture in conftest.py).
"""
from datetime import datetime, timedelta

import alerts
import config
from database import TelemetryStore
from main import app
from routes.deps import get_store

from conftest import T0


def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_create_visit_returns_camel_case_record(client):
    response = client.post(
        "/api/visits",
        json={"country": "Germany", "countryCode": "DE", "userAgent": "Mozilla/5.0", "referrer": ""},
        headers={"X-Forwarded-For": "203.0.113.7"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == 1
    assert body["countryCode"] == "DE"
    assert body["userAgent"] == "Mozilla/5.0"
    assert body["referrer"] is None
    assert body["city"] is None
    assert body["ip"] == "203.0.113.7"
    assert datetime.fromisoformat(body["visitedAt"].replace("Z", "+00:00")) == T0


def test_forwarded_for_chain_uses_first_address(client):
    response = client.post(
        "/api/visits",
        json={},
        headers={"X-Forwarded-For": "198.51.100.1, 10.0.0.1", "X-Real-IP": "10.0.0.2"},
    )
    assert response.json()["ip"] == "198.51.100.1"


def test_real_ip_header_used_without_forwarded_for(client):
    response = client.post("/api/visits", json={"ip": "1.1.1.1"}, headers={"X-Real-IP": "192.0.2.9"})
    assert response.json()["ip"] == "192.0.2.9"


def test_create_visit_rejects_wrong_types(client, store):
    response = client.post("/api/visits", json={"country": ["not", "a", "string"]})

    assert response.status_code == 422
    assert store.get_total_visits() == 0


def test_list_visits(client):
    for _ in range(3):
        client.post("/api/visits", json={})

    body = client.get("/api/visits").json()
    assert body["total"] == 3
    assert [v["id"] for v in body["visits"]] == [1, 2, 3]


def test_visit_stats_shape(client, clock):
    client.post("/api/visits", json={})
    clock.advance(days=10)
    client.post("/api/visits", json={})

    body = client.get("/api/visits/stats").json()
    assert body["total"] == 2
    assert len(body["daily"]) == 7
    assert len(body["labels"]) == 7
    assert sum(body["daily"]) == 1
    assert body["daily"][-1] == 1


def test_recent_visits_window(client, clock):
    client.post("/api/visits", json={"country": "old"})
    clock.advance(days=3)
    client.post("/api/visits", json={"country": "new"})

    assert [v["country"] for v in client.get("/api/visits/recent?days=1").json()] == ["new"]
    assert len(client.get("/api/visits/recent?days=5").json()) == 2
    assert client.get("/api/visits/recent?days=-1").status_code == 422


def test_health_records_a_check(client, store, clock):
    clock.advance(hours=2, minutes=30)
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["uptimeHours"] == 2.5
    assert body["uptime"] == 2.5 * 3600
    assert body["totalVisits"] == 0
    assert body["checksInWindow"] == 1
    assert body["environment"] == config.ENVIRONMENT
    assert store.get_uptime_stats().last_check == T0 + timedelta(hours=2, minutes=30)


def test_uptime_endpoint_does_not_record_checks(client, store, clock):
    clock.advance(hours=1)
    body = client.get("/api/uptime").json()

    assert body["serverStatus"] == "online"
    assert body["uptime"] == 1.0
    assert datetime.fromisoformat(body["lastCheck"].replace("Z", "+00:00")) == T0
    assert store.get_uptime_stats().checks_in_window == 0


class BrokenStore(TelemetryStore):
    def get_uptime_stats(self):
        raise RuntimeError("boom")


def test_health_reports_unhealthy_on_failure():
    from fastapi.testclient import TestClient

    app.dependency_overrides[get_store] = lambda: BrokenStore()
    try:
        client = TestClient(app)
        response = client.get("/health")
        uptime = client.get("/api/uptime")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["error"] == "Service unavailable"
    assert uptime.status_code == 500
    assert uptime.json()["detail"] == "Failed to get uptime statistics"


def test_visit_triggers_webhook_in_background(client, monkeypatch):
    sent = []
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", "https://discord.invalid/hook")
    monkeypatch.setattr(alerts, "send_webhook", lambda url, payload: sent.append((url, payload)) or True)

    response = client.post("/api/visits", json={"country": "Japan"})

    assert response.status_code == 200
    assert len(sent) == 1
    url, payload = sent[0]
    assert url == "https://discord.invalid/hook"
    assert "**Country:** Japan" in payload["embeds"][0]["fields"][0]["value"]
    assert "**Total Visits:** 1" in payload["embeds"][0]["fields"][2]["value"]


class CrowdedStore(TelemetryStore):
    """Reports extra visits that other requests inserted meanwhile."""

    def get_total_visits(self):
        return super().get_total_visits() + 5


def test_webhook_total_is_the_visit_position(clock, monkeypatch):
    from fastapi.testclient import TestClient

    sent = []
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", "https://discord.invalid/hook")
    monkeypatch.setattr(alerts, "send_webhook", lambda url, payload: sent.append(payload) or True)

    app.dependency_overrides[get_store] = lambda: CrowdedStore(clock=clock)
    try:
        response = TestClient(app).post("/api/visits", json={})
    finally:
        app.dependency_overrides.clear()

    assert response.json()["id"] == 1
    assert "**Total Visits:** 1" in sent[0]["embeds"][0]["fields"][2]["value"]
