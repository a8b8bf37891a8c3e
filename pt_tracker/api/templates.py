from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session, select

from pt_tracker.api.deps import CurrentUser, require_trainer
from pt_tracker.core.database import get_db
from pt_tracker.models import WorkoutTemplate
from pt_tracker.schemas import TemplateRead, TemplateWrite

router = APIRouter(prefix="/api/templates", tags=["templates"])


def _template_or_404(db: Session, template_id: int) -> WorkoutTemplate:
    template = db.get(WorkoutTemplate, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.get("", response_model=list[TemplateRead])
def list_templates(_: CurrentUser = Depends(require_trainer), db: Session = Depends(get_db)):
    return db.exec(select(WorkoutTemplate).order_by(WorkoutTemplate.name)).all()


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(
    body: TemplateWrite,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    template = WorkoutTemplate(name=body.name, exercises=[e.model_dump() for e in body.exercises])
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


@router.get("/{template_id}", response_model=TemplateRead)
def get_template(
    template_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    return _template_or_404(db, template_id)


@router.put("/{template_id}", response_model=TemplateRead)
def update_template(
    template_id: int,
    body: TemplateWrite,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    template = _template_or_404(db, template_id)
    template.name = body.name
    template.exercises = [e.model_dump() for e in body.exercises]
    template.updated_at = datetime.utcnow()
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: int,
    _: CurrentUser = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    db.delete(_template_or_404(db, template_id))
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
