from pydantic import BaseModel

from .common import ORMModel, UtcDateTime


class MeasurementWrite(BaseModel):
    recorded_at: UtcDateTime | None = None  # defaults to now on create
    weight_lbs: float | None = None
    body_fat_pct: float | None = None
    chest_in: float | None = None
    waist_in: float | None = None
    hips_in: float | None = None
    arm_in: float | None = None
    thigh_in: float | None = None


class MeasurementRead(ORMModel):
    id: int
    client_id: int
    recorded_at: UtcDateTime
    weight_lbs: float | None = None
    body_fat_pct: float | None = None
    chest_in: float | None = None
    waist_in: float | None = None
    hips_in: float | None = None
    arm_in: float | None = None
    thigh_in: float | None = None
    created_at: UtcDateTime
