"""Trainer <-> client messaging. Each client has exactly one thread, keyed by client_id."""
from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy import func, update
from sqlmodel import Session, select

from pt_tracker.api.clients import get_client_or_404
from pt_tracker.api.deps import CurrentUser, get_current_user, require_own_client
from pt_tracker.core.database import get_db
from pt_tracker.models import Client, Message
from pt_tracker.schemas import ConversationSummary, MessageCreate, MessageRead
from pt_tracker.schemas.common import to_naive_utc
from pt_tracker.services.notify import notify_client, notify_trainer, run_notification

router = APIRouter(prefix="/api/messages", tags=["messages"])

PREVIEW_CHARS = 50


def _other_role(role: str) -> str:
    return "client" if role == "trainer" else "trainer"


def _unread_counts(db: Session, sender_role: str, client_id: int | None = None) -> dict[int, int]:
    stmt = (
        select(Message.client_id, func.count(Message.id))
        .where(Message.sender_role == sender_role, Message.read_at.is_(None))
        .group_by(Message.client_id)
    )
    if client_id is not None:
        stmt = stmt.where(Message.client_id == client_id)
    return {cid: count for cid, count in db.exec(stmt).all()}


def _last_messages(db: Session, client_ids: list[int]) -> dict[int, Message]:
    if not client_ids:
        return {}
    latest_ids = (
        select(func.max(Message.id)).where(Message.client_id.in_(client_ids)).group_by(Message.client_id)
    )
    rows = db.exec(select(Message).where(Message.id.in_(latest_ids))).all()
    return {m.client_id: m for m in rows}


def _summary(client: Client | None, client_id: int, last: Message | None, unread: int) -> ConversationSummary:
    return ConversationSummary(
        client_id=client_id,
        first_name=client.first_name if client else None,
        last_name=client.last_name if client else None,
        photo_url=client.photo_url if client else None,
        last_message=last.content if last else None,
        last_message_at=last.created_at if last else None,
        sender_role=last.sender_role if last else None,
        unread_count=unread,
    )


@router.get("/conversations", response_model=list[ConversationSummary])
def list_conversations(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Trainer: one row per active client, most recent thread first. Client: its own thread."""
    if not user.is_trainer:
        client = db.get(Client, user.client_id)
        last = _last_messages(db, [user.client_id]).get(user.client_id)
        unread = _unread_counts(db, "trainer", user.client_id).get(user.client_id, 0)
        return [_summary(client, user.client_id, last, unread)]

    clients = db.exec(select(Client).where(Client.is_active == True)).all()  # noqa: E712
    last_by_client = _last_messages(db, [c.id for c in clients])
    unread_by_client = _unread_counts(db, "client")
    summaries = [_summary(c, c.id, last_by_client.get(c.id), unread_by_client.get(c.id, 0)) for c in clients]
    # Threads with messages first (newest first), silent clients after by name
    summaries.sort(key=lambda s: ((s.last_name or "").lower(), (s.first_name or "").lower()))
    summaries.sort(key=lambda s: s.last_message_at or datetime.min, reverse=True)
    return summaries


@router.get("/conversations/{client_id}", response_model=list[MessageRead])
def get_conversation(
    client_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    before: datetime | None = None,
    _: CurrentUser = Depends(require_own_client),
    db: Session = Depends(get_db),
):
    """Latest `limit` messages (older than `before` when given), returned oldest first."""
    stmt = select(Message).where(Message.client_id == client_id)
    if before is not None:
        stmt = stmt.where(Message.created_at < to_naive_utc(before))
    stmt = stmt.order_by(Message.created_at.desc(), Message.id.desc()).limit(limit)
    return list(reversed(db.exec(stmt).all()))


@router.post("/conversations/{client_id}", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_message(
    client_id: int,
    body: MessageCreate,
    background_tasks: BackgroundTasks,
    user: CurrentUser = Depends(require_own_client),
    db: Session = Depends(get_db),
):
    content = (body.content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="content is required")
    client = get_client_or_404(db, client_id)
    message = Message(
        client_id=client_id,
        sender_role=user.role,
        sender_id=None if user.is_trainer else user.client_id,
        content=content,
    )
    db.add(message)
    db.commit()
    db.refresh(message)

    data = {"type": "message", "clientId": client_id}
    if user.is_trainer:
        background_tasks.add_task(
            run_notification, notify_client, client_id, "New Message", "Your trainer sent you a message", data
        )
    else:
        background_tasks.add_task(
            run_notification, notify_trainer, "New Message", f"{client.full_name}: {content[:PREVIEW_CHARS]}", data
        )
    return message


@router.put("/conversations/{client_id}/read")
def mark_conversation_read(
    client_id: int,
    user: CurrentUser = Depends(require_own_client),
    db: Session = Depends(get_db),
):
    """Marks the other side's unread messages in this thread as read."""
    res = db.exec(
        update(Message)
        .where(
            Message.client_id == client_id,
            Message.sender_role == _other_role(user.role),
            Message.read_at.is_(None),
        )
        .values(read_at=datetime.utcnow())
    )
    db.commit()
    return {"success": True, "updated": res.rowcount or 0}


@router.get("/unread-count")
def unread_count(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    stmt = select(func.count(Message.id)).where(
        Message.sender_role == _other_role(user.role), Message.read_at.is_(None)
    )
    if not user.is_trainer:
        stmt = stmt.where(Message.client_id == user.client_id)
    return {"count": db.exec(stmt).one() or 0}
