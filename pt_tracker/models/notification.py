"""Push tokens (Expo) and per-recipient notification preferences."""
from datetime import datetime

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import Field, SQLModel


class PushToken(SQLModel, table=True):
    __tablename__ = "push_tokens"
    id: int | None = Field(default=None, primary_key=True)
    role: str = Field(index=True)  # trainer | client
    client_id: int | None = Field(default=None, index=True)
    expo_push_token: str = Field(unique=True, index=True)  # ExponentPushToken[...]
    device_name: str | None = None
    # Off after unregister or when the provider reports DeviceNotRegistered
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class NotificationPreference(SQLModel, table=True):
    """One row per recipient (role + client_id). No row means every category on, 60 min lead."""
    __tablename__ = "notification_preferences"
    __table_args__ = (
        UniqueConstraint("role", "client_id", name="uq_notification_preferences_identity"),
        # NULL client_id rows are distinct to UNIQUE, so the trainer row gets its own index
        Index(
            "uq_notification_preferences_role_no_client",
            "role",
            unique=True,
            sqlite_where=text("client_id IS NULL"),
            postgresql_where=text("client_id IS NULL"),
        ),
    )
    id: int | None = Field(default=None, primary_key=True)
    role: str = Field(index=True)
    client_id: int | None = Field(default=None, index=True)
    session_reminders: bool = True
    workout_logged: bool = True
    measurement_recorded: bool = True
    reminder_minutes_before: int = 60
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
