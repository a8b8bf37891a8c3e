from pydantic import BaseModel, field_validator

from .common import ORMModel, UtcDateTime


class ExerciseWrite(BaseModel):
    exercise_name: str
    description: str | None = None
    video_url: str | None = None
    thumbnail_url: str | None = None

    @field_validator("exercise_name")
    @classmethod
    def exercise_name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("exercise_name is required.")
        return v


class ExerciseRead(ORMModel):
    id: int
    exercise_name: str
    description: str | None = None
    video_url: str | None = None
    video_path: str | None = None
    thumbnail_url: str | None = None
    created_at: UtcDateTime
    updated_at: UtcDateTime
