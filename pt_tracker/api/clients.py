import logging
import secrets
from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy import delete
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, require_own_client, require_trainer
from pt_tracker.core.database import get_db
from pt_tracker.models import (
    Client,
    Measurement,
    Message,
    NotificationPreference,
    ProgressPhoto,
    PushToken,
    TrainingSession,
    WorkoutLog,
)
from pt_tracker.schemas import ClientCreate, ClientRead, ClientUpdate
from pt_tracker.services.storage import CLIENT_PHOTO_MAX_BYTES, delete_upload, read_upload, save_upload

log = logging.getLogger("pt_tracker.api")

router = APIRouter(prefix="/api/clients", tags=["clients"])


def generate_access_code(db: Session) -> str:
    """Six uppercase hex characters, unique among clients."""
    while True:
        code = secrets.token_hex(3).upper()
        if not db.exec(select(Client.id).where(Client.access_code == code)).first():
            return code


def get_client_or_404(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.get("", response_model=list[ClientRead])
def list_clients(_: CurrentUser = Depends(require_trainer), db: Session = Depends(get_db)):
    return db.exec(select(Client).order_by(Client.last_name, Client.first_name)).all()


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientCreate,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    client = Client(**body.model_dump(), access_code=generate_access_code(db))
    db.add(client)
    db.commit()
    db.refresh(client)
    log.info("Client created: id=%s", client.id)
    return client


@router.get("/{client_id}", response_model=ClientRead)
def get_client(
    client_id: int,
    _: CurrentUser = Depends(require_own_client),
    db: Session = Depends(get_db),
):
    return get_client_or_404(db, client_id)


@router.put("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: int,
    body: ClientUpdate,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    client = get_client_or_404(db, client_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        if key in ("first_name", "last_name"):
            value = (value or "").strip()
            if not value:
                raise HTTPException(status_code=400, detail="Name cannot be empty")
        setattr(client, key, value)
    client.updated_at = datetime.utcnow()
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    """Removes the client with all of their sessions, logs, measurements, photos, messages and devices."""
    client = get_client_or_404(db, client_id)
    photo_urls = [client.photo_url] + list(
        db.exec(select(ProgressPhoto.photo_url).where(ProgressPhoto.client_id == client_id)).all()
    )
    session_ids = select(TrainingSession.id).where(TrainingSession.client_id == client_id)
    try:
        db.exec(delete(WorkoutLog).where(WorkoutLog.session_id.in_(session_ids)))
        db.exec(delete(TrainingSession).where(TrainingSession.client_id == client_id))
        db.exec(delete(Measurement).where(Measurement.client_id == client_id))
        db.exec(delete(ProgressPhoto).where(ProgressPhoto.client_id == client_id))
        db.exec(delete(Message).where(Message.client_id == client_id))
        db.exec(delete(PushToken).where(PushToken.role == "client", PushToken.client_id == client_id))
        db.exec(
            delete(NotificationPreference).where(
                NotificationPreference.role == "client", NotificationPreference.client_id == client_id
            )
        )
        db.delete(client)
        db.commit()
    except Exception as e:
        db.rollback()
        log.exception("Client delete failed: id=%s", client_id)
        raise HTTPException(status_code=500, detail="Failed to delete client") from e
    for url in photo_urls:
        delete_upload(url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{client_id}/photo", response_model=ClientRead)
async def upload_client_photo(
    client_id: int,
    photo: UploadFile = File(...),
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    client = get_client_or_404(db, client_id)
    content = await read_upload(photo, CLIENT_PHOTO_MAX_BYTES, type_prefix="image/")
    old_url = client.photo_url
    client.photo_url = save_upload("clients", content, photo.filename)
    client.updated_at = datetime.utcnow()
    db.add(client)
    db.commit()
    db.refresh(client)
    delete_upload(old_url)
    return client


@router.post("/{client_id}/regenerate-code", response_model=ClientRead)
def regenerate_access_code(
    client_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    client = get_client_or_404(db, client_id)
    client.access_code = generate_access_code(db)
    client.updated_at = datetime.utcnow()
    db.add(client)
    db.commit()
    db.refresh(client)
    log.info("Access code regenerated for client %s", client_id)
    return client
