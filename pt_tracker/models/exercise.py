from datetime import datetime

from sqlmodel import Field, SQLModel


class Exercise(SQLModel, table=True):
    __tablename__ = "exercises"
    id: int | None = Field(default=None, primary_key=True)
    exercise_name: str = Field(index=True)
    description: str | None = None
    video_url: str | None = None  # external link (YouTube)
    video_path: str | None = None  # uploaded file, "/uploads/videos/..."
    thumbnail_url: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
