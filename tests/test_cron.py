import pytest

from app.core.config import settings
from app.services.sync import ReconciliationError

RESULTS = [{"table": "users", "scanned": 1, "succeeded": 0, "status": "success"}]


@pytest.fixture
def job(monkeypatch):
    calls = []

    def fake_run():
        calls.append(True)
        return RESULTS

    monkeypatch.setattr("app.routers.cron.run_full_reconciliation", fake_run)
    return calls


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")


def test_development_runs_without_secret(client, job):
    response = client.get("/api/cron/sync-db")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["results"] == RESULTS
    assert body["timestamp"]
    assert job == [True]


def test_production_requires_bearer_secret(client, job, production):
    assert client.get("/api/cron/sync-db").status_code == 401
    assert client.get("/api/cron/sync-db", headers={"Authorization": "Bearer wrong"}).status_code == 401
    assert client.get("/api/cron/sync-db", headers={"Authorization": "s3cret"}).status_code == 401
    assert job == []

    ok = client.get("/api/cron/sync-db", headers={"Authorization": "Bearer s3cret"})
    assert ok.status_code == 200
    assert job == [True]


def test_unset_secret_rejects_everything(client, job, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    monkeypatch.setattr(settings, "CRON_SECRET", "")

    response = client.get("/api/cron/sync-db", headers={"Authorization": "Bearer "})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


def test_fatal_job_error_is_a_500(client, monkeypatch):
    def broken():
        raise ReconciliationError("Database URLs not configured for reconciliation.")

    monkeypatch.setattr("app.routers.cron.run_full_reconciliation", broken)

    response = client.get("/api/cron/sync-db")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Database URLs not configured for reconciliation."}
