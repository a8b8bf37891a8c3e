from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session, select

from pt_tracker.core.config import is_trainer_login_configured
from pt_tracker.core.database import get_db
from pt_tracker.core.rate_limit import LOGIN_RATE_LIMIT, client_ip, limiter
from pt_tracker.core.security import create_access_token, verify_trainer_password
from pt_tracker.models import Client, SecurityLog
from pt_tracker.schemas import AuthUser, ClientLoginRequest, LoginResponse, TrainerLoginRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _failed_login(db: Session, request: Request, role: str, detail: str) -> None:
    try:
        db.add(SecurityLog(event="failed_login", role=role, ip=client_ip(request), endpoint=request.url.path, detail=detail))
        db.commit()
    except Exception:
        db.rollback()


@router.post("/trainer-login", response_model=LoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def trainer_login(
    request: Request,
    body: TrainerLoginRequest,
    db: Session = Depends(get_db),
):
    if not is_trainer_login_configured():
        raise HTTPException(status_code=500, detail="TRAINER_PASSWORD env var not set")
    if not body.password or not verify_trainer_password(body.password):
        _failed_login(db, request, "trainer", "bad_password")
        raise HTTPException(status_code=401, detail="Invalid password")
    return LoginResponse(token=create_access_token("trainer"), user=AuthUser(role="trainer"))


@router.post("/client-login", response_model=LoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def client_login(
    request: Request,
    body: ClientLoginRequest,
    db: Session = Depends(get_db),
):
    """Client portal login with the access code the trainer handed out."""
    code = (body.access_code or "").strip().upper()
    if not code:
        raise HTTPException(status_code=400, detail="Access code is required")
    client = db.exec(select(Client).where(Client.access_code == code)).first()
    if not client:
        _failed_login(db, request, "client", "unknown_code")
        raise HTTPException(status_code=401, detail="Invalid access code")
    if not client.is_active:
        _failed_login(db, request, "client", f"inactive client_id={client.id}")
        raise HTTPException(status_code=401, detail="Account is inactive")
    return LoginResponse(
        token=create_access_token("client", client.id),
        user=AuthUser(
            role="client",
            client_id=client.id,
            first_name=client.first_name,
            last_name=client.last_name,
        ),
    )
