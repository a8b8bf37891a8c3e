"""
Push delivery through the Expo push API.

Messages go out in batches of PUSH_BATCH_SIZE (the provider rejects bigger
requests). Tokens the provider reports as DeviceNotRegistered are switched
off. Nothing here raises to the caller: a failed delivery is logged and the
caller's own work carries on.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from urllib.request import Request, urlopen

from sqlalchemy import update
from sqlmodel import Session, select

from pt_tracker.core.config import settings
from pt_tracker.models import PushToken

log = logging.getLogger("pt_tracker.push")

PUSH_BATCH_SIZE = 100
INVALID_TOKEN_ERROR = "DeviceNotRegistered"


@dataclass
class PushMessage:
    to: str
    title: str
    body: str
    data: dict | None = field(default=None)

    def to_payload(self) -> dict:
        payload = {"to": self.to, "title": self.title, "body": self.body}
        if self.data is not None:
            payload["data"] = self.data
        return payload


def _post_to_provider(batch: list[dict]) -> dict:
    """POST one batch to the provider and return its decoded JSON response."""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if settings.push_access_token:
        headers["Authorization"] = f"Bearer {settings.push_access_token}"
    req = Request(
        settings.push_api_url,
        data=json.dumps(batch).encode("utf-8"),
        headers=headers,
        method="POST",
    )
    with urlopen(req, timeout=settings.push_timeout_seconds) as r:
        return json.loads(r.read().decode("utf-8") or "{}")


def _invalid_tokens(batch: list[PushMessage], result: dict) -> list[str]:
    """Tokens of this batch the provider marked permanently undeliverable (results follow request order)."""
    tickets = result.get("data") if isinstance(result, dict) else None
    if not isinstance(tickets, list):
        return []
    invalid = []
    for message, ticket in zip(batch, tickets):
        if not isinstance(ticket, dict) or ticket.get("status") != "error":
            continue
        details = ticket.get("details") or {}
        if details.get("error") == INVALID_TOKEN_ERROR:
            invalid.append(message.to)
    return invalid


def deactivate_tokens(db: Session, tokens: list[str]) -> int:
    if not tokens:
        return 0
    res = db.exec(
        update(PushToken)
        .where(PushToken.expo_push_token.in_(tokens))
        .values(is_active=False, updated_at=datetime.utcnow())
    )
    db.commit()
    return res.rowcount or 0


def send_push_notifications(db: Session, messages: list[PushMessage]) -> int:
    """
    Deliver messages in provider-sized batches.
    Returns the number of provider calls attempted (250 messages -> 3 calls).
    """
    calls = 0
    for start in range(0, len(messages), PUSH_BATCH_SIZE):
        batch = messages[start : start + PUSH_BATCH_SIZE]
        calls += 1
        try:
            result = _post_to_provider([m.to_payload() for m in batch])
        except Exception:
            log.exception("Push batch failed: size=%d", len(batch))
            continue
        invalid = _invalid_tokens(batch, result)
        if not invalid:
            continue
        try:
            n = deactivate_tokens(db, invalid)
            log.info("Deactivated %d unregistered push token(s)", n)
        except Exception:
            db.rollback()
            log.exception("Push token deactivation failed: tokens=%d", len(invalid))
    return calls


def get_active_tokens(db: Session, role: str, client_id: int | None = None) -> list[str]:
    stmt = select(PushToken.expo_push_token).where(PushToken.role == role, PushToken.is_active == True)  # noqa: E712
    if client_id is not None:
        stmt = stmt.where(PushToken.client_id == client_id)
    return list(db.exec(stmt).all())


def register_token(
    db: Session,
    role: str,
    client_id: int | None,
    token: str,
    device_name: str | None = None,
) -> PushToken:
    """Upsert by token value; a device moving between accounts follows the latest login."""
    now = datetime.utcnow()
    row = db.exec(select(PushToken).where(PushToken.expo_push_token == token)).first()
    if row:
        row.role = role
        row.client_id = client_id
        row.device_name = device_name
        row.is_active = True
        row.updated_at = now
    else:
        row = PushToken(role=role, client_id=client_id, expo_push_token=token, device_name=device_name)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def unregister_token(db: Session, token: str) -> bool:
    return deactivate_tokens(db, [token]) > 0
