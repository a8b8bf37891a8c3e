from datetime import datetime

from sqlmodel import Field, SQLModel


class Client(SQLModel, table=True):
    __tablename__ = "clients"
    id: int | None = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    goals: str | None = None
    notes: str | None = None
    photo_url: str | None = None  # "/uploads/clients/..." relative to the API host
    access_code: str = Field(unique=True, index=True, max_length=16)  # client portal login
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
