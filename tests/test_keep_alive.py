from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from tracker.modules import KeepAlive
from tracker.workers.celery_worker import celery_app, keep_alive_ping


def test_keep_alive_creates_then_updates_sentinel(client, db):
    first = client.get("/api/keep-alive")
    second = client.get("/api/keep-alive")

    assert first.status_code == 200
    body = second.json()
    assert body["success"] is True
    assert body["message"] == "Database pinged successfully"
    assert body["timestamp"]
    assert db.query(KeepAlive).count() == 1


def test_keep_alive_reports_database_failure(client):
    failure = OperationalError("UPDATE keep_alive", {}, Exception("database is gone"))
    with patch("tracker.modules.system.service.touch_keep_alive", side_effect=failure):
        response = client.get("/api/keep-alive")

    assert response.status_code == 500
    assert "error" in response.json()


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert "running" in client.get("/").json()["message"]


def test_beat_schedule_registers_keep_alive():
    entry = celery_app.conf.beat_schedule["keep-alive-ping"]

    assert entry["task"] == "tasks.keep_alive_ping"
    assert keep_alive_ping.name == "tasks.keep_alive_ping"


def test_keep_alive_task_touches_row(db):
    with patch("tracker.workers.celery_worker.SessionLocal", return_value=db):
        result = keep_alive_ping.apply().get()

    assert result["success"] is True
    assert db.query(KeepAlive).count() == 1
