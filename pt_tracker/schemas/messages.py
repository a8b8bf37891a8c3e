from pydantic import BaseModel

from .common import ORMModel, UtcDateTime


class MessageCreate(BaseModel):
    content: str = ""


class MessageRead(ORMModel):
    id: int
    client_id: int
    sender_role: str
    sender_id: int | None = None
    content: str
    read_at: UtcDateTime | None = None
    created_at: UtcDateTime


class ConversationSummary(BaseModel):
    client_id: int
    first_name: str | None = None
    last_name: str | None = None
    photo_url: str | None = None
    last_message: str | None = None
    last_message_at: UtcDateTime | None = None
    sender_role: str | None = None
    unread_count: int = 0
