from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from pt_tracker.core.database import get_db
from pt_tracker.core.security import decode_access_token
from pt_tracker.models import Client

security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    role: str  # trainer | client
    client_id: int | None = None

    @property
    def is_trainer(self) -> bool:
        return self.role == "trainer"


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    role = (payload or {}).get("role")
    if role not in ("trainer", "client"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    if role == "trainer":
        return CurrentUser(role="trainer")
    client_id = payload.get("client_id")
    if not isinstance(client_id, int):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    # Deactivated or deleted clients lose access even with an unexpired token
    client = db.get(Client, client_id)
    if not client or not client.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")
    return CurrentUser(role="client", client_id=client_id)


def require_trainer(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_trainer:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Trainer access required")
    return user


def ensure_client_access(user: CurrentUser, client_id: int) -> None:
    """Trainer sees every client; a client only its own data."""
    if user.is_trainer:
        return
    if user.client_id != client_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def require_own_client(client_id: int, user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """For routes with a {client_id} path parameter."""
    ensure_client_access(user, client_id)
    return user
