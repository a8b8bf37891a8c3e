from datetime import datetime

from sqlmodel import Field, SQLModel

PHOTO_CATEGORIES = ("front", "side", "back", "other")


class ProgressPhoto(SQLModel, table=True):
    __tablename__ = "progress_photos"
    id: int | None = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="clients.id", index=True)
    photo_url: str
    category: str = "front"  # front | side | back | other
    notes: str | None = None
    taken_at: datetime = Field(default_factory=datetime.utcnow)
    created_at: datetime = Field(default_factory=datetime.utcnow)
