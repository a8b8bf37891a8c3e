"""Demo data seeder."""
from datetime import datetime

from fastapi.testclient import TestClient
from sqlalchemy import func
from sqlmodel import select

from pt_tracker.models import Client, TrainingSession, WorkoutLog
from scripts.seed_demo import seed

# Wednesday
NOW = datetime(2030, 6, 5, 12, 0)


def test_seed_loads_demo_rows(db):
    counts = seed(db, NOW)
    assert counts == {
        "clients": 8,
        "sessions": 32,
        "templates": 4,
        "workout_logs": 11,
        "measurements": 10,
        "exercises": 12,
    }
    inactive = db.exec(select(Client).where(Client.is_active == False)).all()  # noqa: E712
    assert [c.access_code for c in inactive] == ["DER108"]

    logged_statuses = db.exec(
        select(TrainingSession.status).join(WorkoutLog, WorkoutLog.session_id == TrainingSession.id).distinct()
    ).all()
    assert logged_statuses == ["completed"]


def test_seed_flags_past_sessions_as_reminded(db):
    seed(db, NOW)
    past = db.exec(select(TrainingSession).where(TrainingSession.scheduled_at <= NOW)).all()
    assert past and all(s.reminder_sent for s in past)
    upcoming = db.exec(select(TrainingSession).where(TrainingSession.scheduled_at > NOW)).all()
    assert upcoming and not any(s.reminder_sent for s in upcoming)


def test_seed_replaces_existing_data(db):
    seed(db, NOW)
    seed(db, NOW)
    assert db.exec(select(func.count(Client.id))).one() == 8


def test_seeded_client_can_log_in(db, client: TestClient):
    seed(db, NOW)
    r = client.post("/api/auth/client-login", json={"access_code": "sar101"})
    assert r.status_code == 200
    assert r.json()["user"]["firstName"] == "Sarah"
    assert client.post("/api/auth/client-login", json={"access_code": "DER108"}).status_code == 401
