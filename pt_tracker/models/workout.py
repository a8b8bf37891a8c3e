"""Workout logs (per session) and reusable workout templates."""
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class WorkoutLog(SQLModel, table=True):
    __tablename__ = "workout_logs"
    id: int | None = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="sessions.id", index=True)
    exercise_name: str
    exercise_id: int | None = Field(default=None, foreign_key="exercises.id")
    sets: int | None = None
    reps: int | None = None
    weight: float | None = None
    sort_order: int = 0
    # [{"set_number": 1, "reps": 10, "weight": 135, "completed": true}, ...]
    sets_detail: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class WorkoutTemplate(SQLModel, table=True):
    __tablename__ = "workout_templates"
    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    # [{"exercise_name": "Squat", "sets": 3, "reps": 10, "weight": 135}, ...]
    exercises: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
