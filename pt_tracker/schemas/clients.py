from pydantic import BaseModel, EmailStr, field_validator

from .common import ORMModel, UtcDateTime


class ClientCreate(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr | None = None
    phone: str | None = None
    goals: str | None = None
    notes: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Name is required.")
        return v


class ClientUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    goals: str | None = None
    notes: str | None = None
    is_active: bool | None = None


class ClientRead(ORMModel):
    id: int
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    goals: str | None = None
    notes: str | None = None
    photo_url: str | None = None
    access_code: str | None = None
    is_active: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime
