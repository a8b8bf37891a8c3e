from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlmodel import Session, select

from pt_tracker.api.clients import get_client_or_404
from pt_tracker.api.deps import CurrentUser, require_own_client, require_trainer
from pt_tracker.core.database import get_db
from pt_tracker.models import PHOTO_CATEGORIES, ProgressPhoto
from pt_tracker.schemas import ProgressPhotoRead
from pt_tracker.schemas.common import to_naive_utc
from pt_tracker.services.storage import PROGRESS_PHOTO_MAX_BYTES, delete_upload, read_upload, save_upload

router = APIRouter(prefix="/api/clients/{client_id}/progress-photos", tags=["progress-photos"])


@router.get("", response_model=list[ProgressPhotoRead])
def list_progress_photos(
    client_id: int,
    category: str | None = None,
    _: CurrentUser = Depends(require_own_client),
    db: Session = Depends(get_db),
):
    get_client_or_404(db, client_id)
    stmt = select(ProgressPhoto).where(ProgressPhoto.client_id == client_id)
    if category:
        stmt = stmt.where(ProgressPhoto.category == category)
    stmt = stmt.order_by(ProgressPhoto.taken_at.desc(), ProgressPhoto.id.desc())
    return db.exec(stmt).all()


@router.post("", response_model=ProgressPhotoRead, status_code=status.HTTP_201_CREATED)
async def upload_progress_photo(
    client_id: int,
    photo: UploadFile = File(...),
    category: str = Form("front"),
    notes: str | None = Form(None),
    taken_at: datetime | None = Form(None),
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    get_client_or_404(db, client_id)
    if category not in PHOTO_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"category must be one of: {', '.join(PHOTO_CATEGORIES)}")
    content = await read_upload(photo, PROGRESS_PHOTO_MAX_BYTES, type_prefix="image/")
    row = ProgressPhoto(
        client_id=client_id,
        photo_url=save_upload("progress", content, photo.filename),
        category=category,
        notes=notes,
        taken_at=to_naive_utc(taken_at) if taken_at else datetime.utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_progress_photo(
    client_id: int,
    photo_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    row = db.get(ProgressPhoto, photo_id)
    if not row or row.client_id != client_id:
        raise HTTPException(status_code=404, detail="Photo not found")
    photo_url = row.photo_url
    db.delete(row)
    db.commit()
    delete_upload(photo_url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
