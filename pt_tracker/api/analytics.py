"""Trainer dashboard. Day and week boundaries are UTC; weeks start on Monday."""
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, require_trainer
from pt_tracker.api.sessions import session_read
from pt_tracker.core.database import get_db
from pt_tracker.models import Client, Measurement, TrainingSession
from pt_tracker.schemas.common import iso_utc

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

RECENT_ACTIVITY_LIMIT = 10
COMPLETION_WINDOW_DAYS = 30
CLOSED_STATUSES = ("completed", "cancelled", "no_show")


def _completion_rate(db: Session, now: datetime) -> int:
    since = now - timedelta(days=COMPLETION_WINDOW_DAYS)
    counts = dict(
        db.exec(
            select(TrainingSession.status, func.count(TrainingSession.id))
            .where(TrainingSession.scheduled_at >= since, TrainingSession.status.in_(CLOSED_STATUSES))
            .group_by(TrainingSession.status)
        ).all()
    )
    closed = sum(counts.values())
    if not closed:
        return 0
    return round(100 * counts.get("completed", 0) / closed)


def _recent_activity(db: Session) -> list[dict]:
    events = []
    completed = db.exec(
        select(TrainingSession, Client)
        .join(Client, Client.id == TrainingSession.client_id)
        .where(TrainingSession.status == "completed")
        .order_by(TrainingSession.updated_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    ).all()
    for s, c in completed:
        events.append(("session_completed", f"Completed session with {c.full_name}", s.updated_at))
    for c in db.exec(select(Client).order_by(Client.created_at.desc()).limit(RECENT_ACTIVITY_LIMIT)).all():
        events.append(("new_client", f"New client: {c.full_name}", c.created_at))
    measured = db.exec(
        select(Measurement, Client)
        .join(Client, Client.id == Measurement.client_id)
        .order_by(Measurement.created_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    ).all()
    for m, c in measured:
        events.append(("measurement_recorded", f"Measurement recorded for {c.full_name}", m.created_at))
    events.sort(key=lambda e: e[2], reverse=True)
    return [
        {"type": kind, "description": text, "timestamp": iso_utc(ts)}
        for kind, text, ts in events[:RECENT_ACTIVITY_LIMIT]
    ]


def build_dashboard(db: Session, now: datetime) -> dict:
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    today_end = today_start + timedelta(days=1)
    week_start = today_start - timedelta(days=today_start.weekday())
    week_end = week_start + timedelta(days=7)

    active_clients = db.exec(
        select(func.count(Client.id)).where(Client.is_active == True)  # noqa: E712
    ).one()
    today = db.exec(
        select(TrainingSession, Client)
        .join(Client, Client.id == TrainingSession.client_id)
        .where(TrainingSession.scheduled_at >= today_start, TrainingSession.scheduled_at < today_end)
        .order_by(TrainingSession.scheduled_at)
    ).all()
    week_times = db.exec(
        select(TrainingSession.scheduled_at).where(
            TrainingSession.scheduled_at >= week_start, TrainingSession.scheduled_at < week_end
        )
    ).all()

    per_day = {(week_start + timedelta(days=i)).date(): 0 for i in range(7)}
    for scheduled_at in week_times:
        per_day[scheduled_at.date()] += 1

    return {
        "stats": {
            "active_clients": active_clients,
            "today_sessions": len(today),
            "week_sessions": len(week_times),
            "completion_rate": _completion_rate(db, now),
        },
        "today_sessions": [session_read(s, c).model_dump(mode="json") for s, c in today],
        "weekly_trend": [{"day": day.isoformat(), "count": count} for day, count in per_day.items()],
        "recent_activity": _recent_activity(db),
    }


@router.get("/dashboard")
def dashboard(_: CurrentUser = Depends(require_trainer), db: Session = Depends(get_db)):
    return build_dashboard(db, datetime.utcnow())
