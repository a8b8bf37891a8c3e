"""
Session reminder scheduler.

Every tick looks for scheduled sessions that start within the client's lead
time (preference row, else 60 minutes) and have not been reminded yet, pushes
a reminder to the client and to the trainer, then flips the session's
reminder_sent flag. The flag flip is a conditional UPDATE and is the commit
point: a flagged session is never selected again.

Ticks never overlap inside one process. ReminderScheduler owns the asyncio
task; the FastAPI lifespan starts and stops it.
"""
import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import and_, update
from sqlmodel import Session, select

from pt_tracker.core.database import engine
from pt_tracker.models import Client, NotificationPreference, TrainingSession
from pt_tracker.schemas.notifications import MAX_REMINDER_MINUTES
from pt_tracker.services.preferences import DEFAULT_REMINDER_MINUTES, is_enabled
from pt_tracker.services.push import PushMessage, get_active_tokens, send_push_notifications

log = logging.getLogger("pt_tracker.scheduler")

REMINDER_EVENT = "session_reminder"


@dataclass(frozen=True)
class DueSession:
    """Plain values read before any commit; ORM rows in the tick expire on every commit."""
    session_id: int
    scheduled_at: datetime
    client_id: int
    client_name: str


def find_due_sessions(db: Session, now: datetime) -> list[DueSession]:
    """Scheduled, unreminded sessions starting in (now, now + lead], one entry per session."""
    stmt = (
        select(TrainingSession, Client, NotificationPreference.reminder_minutes_before)
        .join(Client, Client.id == TrainingSession.client_id)
        .join(
            NotificationPreference,
            and_(
                NotificationPreference.role == "client",
                NotificationPreference.client_id == TrainingSession.client_id,
            ),
            isouter=True,
        )
        .where(
            TrainingSession.status == "scheduled",
            TrainingSession.reminder_sent == False,  # noqa: E712
            TrainingSession.scheduled_at > now,
            # Widest possible window; the per-client lead is applied below
            TrainingSession.scheduled_at <= now + timedelta(minutes=MAX_REMINDER_MINUTES),
        )
        .order_by(TrainingSession.scheduled_at)
    )
    due: list[DueSession] = []
    seen: set[int] = set()
    for session, client, lead_minutes in db.exec(stmt).all():
        if session.id in seen:
            continue
        lead = lead_minutes if lead_minutes is not None else DEFAULT_REMINDER_MINUTES
        if session.scheduled_at <= now + timedelta(minutes=lead):
            seen.add(session.id)
            due.append(DueSession(session.id, session.scheduled_at, client.id, client.full_name))
    return due


def build_reminder_messages(db: Session, due: DueSession, now: datetime) -> list[PushMessage]:
    minutes_until = round((due.scheduled_at - now).total_seconds() / 60)
    data = {"type": REMINDER_EVENT, "sessionId": due.session_id}
    messages: list[PushMessage] = []
    if is_enabled(db, "client", due.client_id, REMINDER_EVENT):
        messages.extend(
            PushMessage(
                to=token,
                title="Session Reminder",
                body=f"Your session is in {minutes_until} minutes",
                data=data,
            )
            for token in get_active_tokens(db, "client", due.client_id)
        )
    if is_enabled(db, "trainer", None, REMINDER_EVENT):
        messages.extend(
            PushMessage(
                to=token,
                title="Upcoming Session",
                body=f"{due.client_name} session coming up",
                data=data,
            )
            for token in get_active_tokens(db, "trainer")
        )
    return messages


def mark_reminder_sent(db: Session, session_id: int) -> bool:
    """Set the flag only if still unset. False means another writer got there first."""
    res = db.exec(
        update(TrainingSession)
        .where(TrainingSession.id == session_id, TrainingSession.reminder_sent == False)  # noqa: E712
        .values(reminder_sent=True)
    )
    db.commit()
    return (res.rowcount or 0) == 1


def send_session_reminders(db: Session, now: datetime | None = None) -> int:
    """One scheduler tick. Returns how many sessions were marked reminded."""
    now = now or datetime.utcnow()
    due = find_due_sessions(db, now)
    reminded = 0
    for item in due:
        session_id = item.session_id
        # One session at a time; a failure is rolled back and logged, the next session still runs
        try:
            messages = build_reminder_messages(db, item, now)
            if messages:
                send_push_notifications(db, messages)
            if mark_reminder_sent(db, session_id):
                reminded += 1
            else:
                log.warning("Session %s was already marked reminded", session_id)
        except Exception:
            db.rollback()
            log.exception("Reminder failed for session %s", session_id)
    if due:
        log.info("Reminder tick: due=%d reminded=%d", len(due), reminded)
    return reminded


class ReminderScheduler:
    """Owns the recurring reminder task. start() runs a tick right away, then every interval_seconds."""

    def __init__(self, interval_seconds: float):
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _tick(self) -> int:
        with Session(engine) as db:
            return send_session_reminders(db)

    async def run_once(self) -> int | None:
        """Run one tick; None when a tick is already in progress or the tick failed."""
        if self._lock.locked():
            log.info("Reminder tick skipped: previous tick still running")
            return None
        async with self._lock:
            try:
                return await asyncio.to_thread(self._tick)
            except Exception:
                log.exception("Reminder tick failed")
                return None

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        log.info("Starting reminder scheduler (%ss interval)", self.interval_seconds)
        self._task = asyncio.get_running_loop().create_task(self._loop(), name="reminder-scheduler")

    async def stop(self) -> None:
        """Cancel the loop. A tick already inside its worker thread finishes on its own."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        log.info("Reminder scheduler stopped")
