from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, require_own_client, require_trainer
from pt_tracker.api.clients import get_client_or_404
from pt_tracker.core.database import get_db
from pt_tracker.models import Measurement
from pt_tracker.schemas import MeasurementRead, MeasurementWrite
from pt_tracker.services.notify import notify_client, run_notification

router = APIRouter(prefix="/api/clients/{client_id}/measurements", tags=["measurements"])


def _measurement_or_404(db: Session, client_id: int, measurement_id: int) -> Measurement:
    row = db.get(Measurement, measurement_id)
    if not row or row.client_id != client_id:
        raise HTTPException(status_code=404, detail="Measurement not found")
    return row


@router.get("", response_model=list[MeasurementRead])
def list_measurements(
    client_id: int,
    _: CurrentUser = Depends(require_own_client),
    db: Session = Depends(get_db),
):
    get_client_or_404(db, client_id)
    stmt = (
        select(Measurement)
        .where(Measurement.client_id == client_id)
        .order_by(Measurement.recorded_at.desc(), Measurement.id.desc())
    )
    return db.exec(stmt).all()


@router.post("", response_model=MeasurementRead, status_code=status.HTTP_201_CREATED)
def create_measurement(
    client_id: int,
    body: MeasurementWrite,
    background_tasks: BackgroundTasks,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    get_client_or_404(db, client_id)
    data = body.model_dump()
    data["recorded_at"] = data["recorded_at"] or datetime.utcnow()
    row = Measurement(client_id=client_id, **data)
    db.add(row)
    db.commit()
    db.refresh(row)
    parts = []
    if row.weight_lbs is not None:
        parts.append(f"weight {row.weight_lbs:g} lbs")
    if row.body_fat_pct is not None:
        parts.append(f"body fat {row.body_fat_pct:g}%")
    body_text = "New measurements recorded" + (f": {', '.join(parts)}" if parts else "")
    background_tasks.add_task(
        run_notification,
        notify_client,
        client_id,
        "Measurements Updated",
        body_text,
        {"type": "measurement_recorded", "measurementId": row.id},
    )
    return row


@router.put("/{measurement_id}", response_model=MeasurementRead)
def update_measurement(
    client_id: int,
    measurement_id: int,
    body: MeasurementWrite,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    row = _measurement_or_404(db, client_id, measurement_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        if key == "recorded_at" and value is None:
            continue
        setattr(row, key, value)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{measurement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_measurement(
    client_id: int,
    measurement_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    db.delete(_measurement_or_404(db, client_id, measurement_id))
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
