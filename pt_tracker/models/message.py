"""Trainer <-> client chat; one thread per client."""
from datetime import datetime

from sqlmodel import Field, SQLModel


class Message(SQLModel, table=True):
    __tablename__ = "messages"
    id: int | None = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="clients.id", index=True)
    sender_role: str  # trainer | client
    sender_id: int | None = None  # client id when the client sent it
    content: str
    read_at: datetime | None = None  # set by the recipient's read action
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
