from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from sqlalchemy import delete
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, ensure_client_access, get_current_user, require_trainer
from pt_tracker.core.database import get_db
from pt_tracker.models import Client, TrainingSession, WorkoutLog
from pt_tracker.schemas import SessionCreate, SessionRead, SessionUpdate
from pt_tracker.schemas.common import to_naive_utc
from pt_tracker.services.notify import notify_client, run_notification

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def session_read(session: TrainingSession, client: Client | None) -> SessionRead:
    return SessionRead.model_validate(
        {
            **session.model_dump(),
            "first_name": client.first_name if client else None,
            "last_name": client.last_name if client else None,
        }
    )


def get_session_for_user(db: Session, session_id: int, user: CurrentUser) -> TrainingSession:
    """404 when missing, 403 when a client asks for someone else's session."""
    session = db.get(TrainingSession, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    ensure_client_access(user, session.client_id)
    return session


@router.get("", response_model=list[SessionRead])
def list_sessions(
    from_: datetime | None = Query(default=None, alias="from"),
    to: datetime | None = None,
    client_id: int | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    stmt = select(TrainingSession, Client).join(Client, Client.id == TrainingSession.client_id)
    if not user.is_trainer:
        stmt = stmt.where(TrainingSession.client_id == user.client_id)
    elif client_id is not None:
        stmt = stmt.where(TrainingSession.client_id == client_id)
    if from_ is not None:
        stmt = stmt.where(TrainingSession.scheduled_at >= to_naive_utc(from_))
    if to is not None:
        stmt = stmt.where(TrainingSession.scheduled_at <= to_naive_utc(to))
    stmt = stmt.order_by(TrainingSession.scheduled_at)
    return [session_read(s, c) for s, c in db.exec(stmt).all()]


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def create_session(
    body: SessionCreate,
    background_tasks: BackgroundTasks,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    client = db.get(Client, body.client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    session = TrainingSession(**body.model_dump())
    db.add(session)
    db.commit()
    db.refresh(session)
    when = session.scheduled_at.strftime("%b %d at %H:%M UTC")
    background_tasks.add_task(
        run_notification,
        notify_client,
        client.id,
        "New Session Scheduled",
        f"Your session is scheduled for {when}",
        {"type": "session_scheduled", "sessionId": session.id},
    )
    return session_read(session, client)


@router.get("/{session_id}", response_model=SessionRead)
def get_session(
    session_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session = get_session_for_user(db, session_id, user)
    return session_read(session, db.get(Client, session.client_id))


@router.put("/{session_id}", response_model=SessionRead)
def update_session(
    session_id: int,
    body: SessionUpdate,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    session = db.get(TrainingSession, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    changes = body.model_dump(exclude_unset=True)
    if changes.get("client_id") is not None and not db.get(Client, changes["client_id"]):
        raise HTTPException(status_code=404, detail="Client not found")
    for key, value in changes.items():
        if value is None and key in ("client_id", "scheduled_at", "duration_min", "status"):
            continue
        setattr(session, key, value)
    session.updated_at = datetime.utcnow()
    db.add(session)
    db.commit()
    db.refresh(session)
    return session_read(session, db.get(Client, session.client_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    session = db.get(TrainingSession, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    db.exec(delete(WorkoutLog).where(WorkoutLog.session_id == session_id))
    db.delete(session)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
