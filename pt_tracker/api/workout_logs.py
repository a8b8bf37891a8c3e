"""Exercise rows logged against one training session."""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, get_current_user, require_trainer
from pt_tracker.api.sessions import get_session_for_user
from pt_tracker.core.database import get_db
from pt_tracker.models import TrainingSession, WorkoutLog
from pt_tracker.schemas import WorkoutLogBatch, WorkoutLogCreate, WorkoutLogRead, WorkoutLogReorder, WorkoutLogUpdate
from pt_tracker.services.notify import notify_client, run_notification

log = logging.getLogger("pt_tracker.api")

router = APIRouter(prefix="/api/sessions/{session_id}/logs", tags=["workout-logs"])


def _session_or_404(db: Session, session_id: int) -> TrainingSession:
    session = db.get(TrainingSession, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _log_or_404(db: Session, session_id: int, log_id: int) -> WorkoutLog:
    row = db.get(WorkoutLog, log_id)
    if not row or row.session_id != session_id:
        raise HTTPException(status_code=404, detail="Workout log not found")
    return row


def _new_log(session_id: int, item: WorkoutLogCreate) -> WorkoutLog:
    data = item.model_dump()
    data["sets_detail"] = [s.model_dump() for s in item.sets_detail]
    return WorkoutLog(session_id=session_id, **data)


@router.get("", response_model=list[WorkoutLogRead])
def list_logs(
    session_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_session_for_user(db, session_id, user)
    stmt = select(WorkoutLog).where(WorkoutLog.session_id == session_id).order_by(WorkoutLog.sort_order, WorkoutLog.id)
    return db.exec(stmt).all()


@router.post("", response_model=WorkoutLogRead, status_code=status.HTTP_201_CREATED)
def create_log(
    session_id: int,
    body: WorkoutLogCreate,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    _session_or_404(db, session_id)
    row = _new_log(session_id, body)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.post("/batch", response_model=list[WorkoutLogRead], status_code=status.HTTP_201_CREATED)
def create_logs_batch(
    session_id: int,
    body: WorkoutLogBatch,
    background_tasks: BackgroundTasks,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    """Insert every row in one transaction; on any failure nothing is kept."""
    session = _session_or_404(db, session_id)
    client_id = session.client_id
    rows = [_new_log(session_id, item) for item in body.logs]
    try:
        db.add_all(rows)
        db.commit()
    except Exception as e:
        db.rollback()
        log.exception("Workout log batch failed for session %s", session_id)
        raise HTTPException(status_code=500, detail="Failed to save workout logs") from e
    for row in rows:
        db.refresh(row)
    background_tasks.add_task(
        run_notification,
        notify_client,
        client_id,
        "Workout Logged",
        f"{len(rows)} exercise{'s' if len(rows) != 1 else ''} logged for your session",
        {"type": "workout_logged", "sessionId": session_id},
    )
    return rows


@router.put("/reorder", response_model=list[WorkoutLogRead])
def reorder_logs(
    session_id: int,
    body: WorkoutLogReorder,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    _session_or_404(db, session_id)
    ids = [item.id for item in body.order]
    rows = {
        row.id: row
        for row in db.exec(
            select(WorkoutLog).where(WorkoutLog.id.in_(ids), WorkoutLog.session_id == session_id)
        ).all()
    }
    missing = [i for i in ids if i not in rows]
    if missing:
        raise HTTPException(status_code=404, detail=f"Workout log not found: {missing[0]}")
    try:
        for item in body.order:
            rows[item.id].sort_order = item.sort_order
            db.add(rows[item.id])
        db.commit()
    except Exception as e:
        db.rollback()
        log.exception("Workout log reorder failed for session %s", session_id)
        raise HTTPException(status_code=500, detail="Failed to reorder workout logs") from e
    stmt = select(WorkoutLog).where(WorkoutLog.session_id == session_id).order_by(WorkoutLog.sort_order, WorkoutLog.id)
    return db.exec(stmt).all()


@router.put("/{log_id}", response_model=WorkoutLogRead)
def update_log(
    session_id: int,
    log_id: int,
    body: WorkoutLogUpdate,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    row = _log_or_404(db, session_id, log_id)
    changes = body.model_dump(exclude_unset=True)
    if "exercise_name" in changes:
        name = (changes["exercise_name"] or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="exercise_name cannot be empty")
        changes["exercise_name"] = name
    if "sets_detail" in changes:
        changes["sets_detail"] = changes["sets_detail"] or []
    for key, value in changes.items():
        if key == "sort_order" and value is None:
            continue
        setattr(row, key, value)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_log(
    session_id: int,
    log_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    row = _log_or_404(db, session_id, log_id)
    db.delete(row)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
