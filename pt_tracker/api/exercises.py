from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, get_current_user, require_trainer
from pt_tracker.core.database import get_db
from pt_tracker.models import Exercise
from pt_tracker.schemas import ExerciseRead, ExerciseWrite
from pt_tracker.services.storage import ALLOWED_VIDEO_TYPES, VIDEO_MAX_BYTES, delete_upload, read_upload, save_upload

router = APIRouter(prefix="/api/exercises", tags=["exercises"])

SEARCH_LIMIT = 10


def _exercise_or_404(db: Session, exercise_id: int) -> Exercise:
    exercise = db.get(Exercise, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.get("/search", response_model=list[ExerciseRead])
def search_exercises(
    q: str = "",
    _: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Autocomplete for the workout screen: case-insensitive substring match on the name."""
    q = q.strip()
    if not q:
        return []
    stmt = (
        select(Exercise)
        .where(Exercise.exercise_name.ilike(f"%{q}%"))
        .order_by(Exercise.exercise_name)
        .limit(SEARCH_LIMIT)
    )
    return db.exec(stmt).all()


@router.get("", response_model=list[ExerciseRead])
def list_exercises(_: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.exec(select(Exercise).order_by(Exercise.exercise_name)).all()


@router.get("/{exercise_id}", response_model=ExerciseRead)
def get_exercise(
    exercise_id: int,
    _: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _exercise_or_404(db, exercise_id)


@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(
    body: ExerciseWrite,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    exercise = Exercise(**body.model_dump())
    db.add(exercise)
    db.commit()
    db.refresh(exercise)
    return exercise


@router.put("/{exercise_id}", response_model=ExerciseRead)
def update_exercise(
    exercise_id: int,
    body: ExerciseWrite,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    exercise = _exercise_or_404(db, exercise_id)
    for key, value in body.model_dump().items():
        setattr(exercise, key, value)
    exercise.updated_at = datetime.utcnow()
    db.add(exercise)
    db.commit()
    db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(
    exercise_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    exercise = _exercise_or_404(db, exercise_id)
    video_path = exercise.video_path
    db.delete(exercise)
    db.commit()
    delete_upload(video_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{exercise_id}/video", response_model=ExerciseRead)
async def upload_exercise_video(
    exercise_id: int,
    video: UploadFile = File(...),
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    exercise = _exercise_or_404(db, exercise_id)
    content = await read_upload(video, VIDEO_MAX_BYTES, allowed_types=ALLOWED_VIDEO_TYPES)
    old_path = exercise.video_path
    exercise.video_path = save_upload("videos", content, video.filename)
    exercise.updated_at = datetime.utcnow()
    db.add(exercise)
    db.commit()
    db.refresh(exercise)
    delete_upload(old_path)
    return exercise
