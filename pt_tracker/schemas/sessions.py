from typing import Literal

from pydantic import BaseModel, Field

from .common import ORMModel, UtcDateTime

SessionStatus = Literal["scheduled", "completed", "cancelled", "no_show"]


class SessionCreate(BaseModel):
    client_id: int
    scheduled_at: UtcDateTime
    duration_min: int = Field(default=60, ge=1, le=24 * 60)
    notes: str | None = None


class SessionUpdate(BaseModel):
    client_id: int | None = None
    scheduled_at: UtcDateTime | None = None
    duration_min: int | None = Field(default=None, ge=1, le=24 * 60)
    status: SessionStatus | None = None
    notes: str | None = None


class SessionRead(ORMModel):
    id: int
    client_id: int
    scheduled_at: UtcDateTime
    duration_min: int
    status: SessionStatus
    notes: str | None = None
    reminder_sent: bool = False
    first_name: str | None = None
    last_name: str | None = None
    created_at: UtcDateTime
    updated_at: UtcDateTime
