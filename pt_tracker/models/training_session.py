"""Scheduled appointment between the trainer and one client."""
from datetime import datetime

from sqlmodel import Field, SQLModel

SESSION_STATUSES = ("scheduled", "completed", "cancelled", "no_show")


class TrainingSession(SQLModel, table=True):
    __tablename__ = "sessions"
    id: int | None = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="clients.id", index=True)
    scheduled_at: datetime = Field(index=True)  # naive UTC
    duration_min: int = 60
    status: str = Field(default="scheduled", index=True)  # scheduled | completed | cancelled | no_show
    notes: str | None = None
    # Flipped false -> true exactly once, by the reminder scheduler
    reminder_sent: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
