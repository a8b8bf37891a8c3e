from .common import ORMModel, UtcDateTime


class ProgressPhotoRead(ORMModel):
    id: int
    client_id: int
    photo_url: str
    category: str
    notes: str | None = None
    taken_at: UtcDateTime
    created_at: UtcDateTime
