"""
Notification side effects of API writes.

Endpoints hand these to FastAPI BackgroundTasks via run_notification once
their own write has committed; the response never waits on the push provider
and a failure here is only logged.
"""
import logging
from typing import Callable

from sqlmodel import Session

from pt_tracker.core.database import engine
from pt_tracker.services.preferences import is_enabled
from pt_tracker.services.push import PushMessage, get_active_tokens, send_push_notifications

log = logging.getLogger("pt_tracker.notify")


def _event_type(data: dict | None) -> str | None:
    return (data or {}).get("type")


def notify_client(db: Session, client_id: int, title: str, body: str, data: dict | None = None) -> int:
    """Push to every active device of one client. Returns the number of messages handed to the dispatcher."""
    if not is_enabled(db, "client", client_id, _event_type(data)):
        log.info("Client %s has %s notifications off", client_id, _event_type(data))
        return 0
    tokens = get_active_tokens(db, "client", client_id)
    if not tokens:
        return 0
    send_push_notifications(db, [PushMessage(to=t, title=title, body=body, data=data) for t in tokens])
    return len(tokens)


def notify_trainer(db: Session, title: str, body: str, data: dict | None = None) -> int:
    if not is_enabled(db, "trainer", None, _event_type(data)):
        log.info("Trainer has %s notifications off", _event_type(data))
        return 0
    tokens = get_active_tokens(db, "trainer")
    if not tokens:
        return 0
    send_push_notifications(db, [PushMessage(to=t, title=title, body=body, data=data) for t in tokens])
    return len(tokens)


def run_notification(func: Callable[..., int], *args, **kwargs) -> None:
    """Background task body: own DB session, exceptions logged and swallowed."""
    try:
        with Session(engine) as db:
            func(db, *args, **kwargs)
    except Exception:
        log.exception("Notification %s failed", getattr(func, "__name__", func))
