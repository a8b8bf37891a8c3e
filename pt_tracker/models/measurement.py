from datetime import datetime

from sqlmodel import Field, SQLModel


class Measurement(SQLModel, table=True):
    __tablename__ = "measurements"
    id: int | None = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="clients.id", index=True)
    recorded_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    weight_lbs: float | None = None
    body_fat_pct: float | None = None
    chest_in: float | None = None
    waist_in: float | None = None
    hips_in: float | None = None
    arm_in: float | None = None
    thigh_in: float | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
