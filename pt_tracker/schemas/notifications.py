from pydantic import BaseModel, Field

MAX_REMINDER_MINUTES = 24 * 60


class PushTokenRegister(BaseModel):
    expo_push_token: str = ""
    device_name: str | None = None


class PushTokenUnregister(BaseModel):
    expo_push_token: str = ""


class PreferencesUpdate(BaseModel):
    """Partial update: omitted fields keep their stored (or default) value."""
    session_reminders: bool | None = None
    workout_logged: bool | None = None
    measurement_recorded: bool | None = None
    reminder_minutes_before: int | None = Field(default=None, ge=1, le=MAX_REMINDER_MINUTES)


class PreferencesRead(BaseModel):
    session_reminders: bool = True
    workout_logged: bool = True
    measurement_recorded: bool = True
    reminder_minutes_before: int = 60
