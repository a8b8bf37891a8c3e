"""Per-recipient notification preferences and the gate that honours them."""
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from pt_tracker.models import NotificationPreference

DEFAULT_REMINDER_MINUTES = 60
DEFAULT_PREFERENCES = {
    "session_reminders": True,
    "workout_logged": True,
    "measurement_recorded": True,
    "reminder_minutes_before": DEFAULT_REMINDER_MINUTES,
}

# Event type (push data["type"]) -> preference toggle. Unlisted types are never gated.
EVENT_PREFERENCE_FIELD = {
    "session_reminder": "session_reminders",
    "session_scheduled": "session_reminders",
    "workout_logged": "workout_logged",
    "measurement_recorded": "measurement_recorded",
}


def get_preference_row(db: Session, role: str, client_id: int | None) -> NotificationPreference | None:
    stmt = select(NotificationPreference).where(NotificationPreference.role == role)
    if client_id is None:
        stmt = stmt.where(NotificationPreference.client_id.is_(None))
    else:
        stmt = stmt.where(NotificationPreference.client_id == client_id)
    return db.exec(stmt).first()


def preferences_dict(row: NotificationPreference | None) -> dict:
    if row is None:
        return dict(DEFAULT_PREFERENCES)
    return {key: getattr(row, key) for key in DEFAULT_PREFERENCES}


def save_preferences(db: Session, role: str, client_id: int | None, changes: dict) -> dict:
    row = get_preference_row(db, role, client_id)
    if row is None:
        row = NotificationPreference(role=role, client_id=client_id, **DEFAULT_PREFERENCES)
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent first save created the row; merge into that one
            db.rollback()
            row = get_preference_row(db, role, client_id)
    for key, value in changes.items():
        if key in DEFAULT_PREFERENCES and value is not None:
            setattr(row, key, value)
    row.updated_at = datetime.utcnow()
    db.add(row)
    db.commit()
    db.refresh(row)
    return preferences_dict(row)


def is_enabled(db: Session, role: str, client_id: int | None, event_type: str | None) -> bool:
    """False only when the recipient has a preference row with this event's toggle switched off."""
    field_name = EVENT_PREFERENCE_FIELD.get(event_type or "")
    if field_name is None:
        return True
    row = get_preference_row(db, role, client_id)
    if row is None:
        return True
    return bool(getattr(row, field_name))
