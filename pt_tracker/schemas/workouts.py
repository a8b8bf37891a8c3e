from pydantic import BaseModel, Field, field_validator

from .common import ORMModel, UtcDateTime


class SetDetail(BaseModel):
    set_number: int = Field(ge=1)
    reps: int | None = None
    weight: float | None = None
    completed: bool = False


class WorkoutLogCreate(BaseModel):
    exercise_name: str
    exercise_id: int | None = None
    sets: int | None = None
    reps: int | None = None
    weight: float | None = None
    sort_order: int = 0
    sets_detail: list[SetDetail] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("exercise_name")
    @classmethod
    def exercise_name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("exercise_name is required.")
        return v


class WorkoutLogUpdate(BaseModel):
    exercise_name: str | None = None
    exercise_id: int | None = None
    sets: int | None = None
    reps: int | None = None
    weight: float | None = None
    sort_order: int | None = None
    sets_detail: list[SetDetail] | None = None
    notes: str | None = None


class WorkoutLogBatch(BaseModel):
    """Save-all from the workout screen: every row is inserted or none is."""
    logs: list[WorkoutLogCreate] = Field(min_length=1)


class ReorderItem(BaseModel):
    id: int
    sort_order: int


class WorkoutLogReorder(BaseModel):
    order: list[ReorderItem] = Field(min_length=1)


class WorkoutLogRead(ORMModel):
    id: int
    session_id: int
    exercise_name: str
    exercise_id: int | None = None
    sets: int | None = None
    reps: int | None = None
    weight: float | None = None
    sort_order: int
    sets_detail: list[SetDetail] = Field(default_factory=list)
    notes: str | None = None
    created_at: UtcDateTime


class TemplateExercise(BaseModel):
    exercise_name: str
    sets: int | None = None
    reps: int | None = None
    weight: float | None = None


class TemplateWrite(BaseModel):
    name: str
    exercises: list[TemplateExercise] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Template name is required.")
        return v


class TemplateRead(ORMModel):
    id: int
    name: str
    exercises: list[TemplateExercise] = Field(default_factory=list)
    created_at: UtcDateTime
    updated_at: UtcDateTime
