"""Trainer dashboard numbers."""
from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from pt_tracker.api.analytics import build_dashboard
from pt_tracker.models import Client, Measurement, TrainingSession

# Wednesday
NOW = datetime(2030, 6, 5, 12, 0)


def _seed(db):
    active = Client(first_name="Ann", last_name="Active", access_code="AAA111", created_at=NOW - timedelta(days=3))
    inactive = Client(first_name="Ian", last_name="Inactive", access_code="BBB222", is_active=False, created_at=NOW - timedelta(days=40))
    db.add(active)
    db.add(inactive)
    db.commit()
    db.refresh(active)
    rows = [
        # today
        (NOW.replace(hour=9), "completed"),
        (NOW.replace(hour=17), "scheduled"),
        # earlier this week (Monday) and next Monday
        (datetime(2030, 6, 3, 10, 0), "cancelled"),
        (datetime(2030, 6, 10, 10, 0), "scheduled"),
        # inside the 30-day window, previous week
        (datetime(2030, 5, 28, 10, 0), "completed"),
        (datetime(2030, 5, 27, 10, 0), "no_show"),
        # outside the 30-day window
        (datetime(2030, 4, 1, 10, 0), "cancelled"),
    ]
    for when, status in rows:
        db.add(TrainingSession(client_id=active.id, scheduled_at=when, status=status, updated_at=when))
    db.add(Measurement(client_id=active.id, weight_lbs=170, created_at=NOW - timedelta(hours=1)))
    db.commit()
    return active


def test_dashboard_stats(db):
    _seed(db)
    d = build_dashboard(db, NOW)
    assert d["stats"]["active_clients"] == 1
    assert d["stats"]["today_sessions"] == 2
    assert d["stats"]["week_sessions"] == 3
    # completed 2 of 4 closed sessions in the last 30 days
    assert d["stats"]["completion_rate"] == 50
    assert [s["scheduled_at"] for s in d["today_sessions"]] == ["2030-06-05T09:00:00Z", "2030-06-05T17:00:00Z"]
    assert d["today_sessions"][0]["first_name"] == "Ann"


def test_weekly_trend_starts_monday(db):
    _seed(db)
    trend = build_dashboard(db, NOW)["weekly_trend"]
    assert [t["day"] for t in trend] == [f"2030-06-{d:02d}" for d in range(3, 10)]
    assert [t["count"] for t in trend] == [1, 0, 2, 0, 0, 0, 0]


def test_recent_activity_newest_first(db):
    _seed(db)
    activity = build_dashboard(db, NOW)["recent_activity"]
    assert len(activity) <= 10
    assert activity[0] == {
        "type": "measurement_recorded",
        "description": "Measurement recorded for Ann Active",
        "timestamp": "2030-06-05T11:00:00Z",
    }
    timestamps = [a["timestamp"] for a in activity]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {a["type"] for a in activity} == {"measurement_recorded", "session_completed", "new_client"}


def test_completion_rate_zero_without_closed_sessions(db):
    assert build_dashboard(db, NOW)["stats"]["completion_rate"] == 0


def test_dashboard_endpoint_is_trainer_only(client: TestClient, trainer_headers: dict, client_headers: dict):
    r = client.get("/api/analytics/dashboard", headers=trainer_headers)
    assert r.status_code == 200
    assert set(r.json()) == {"stats", "today_sessions", "weekly_trend", "recent_activity"}
    assert len(r.json()["weekly_trend"]) == 7
    assert client.get("/api/analytics/dashboard", headers=client_headers).status_code == 403
