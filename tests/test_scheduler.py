"""Reminder scheduler: due window, at-most-once flag, preference suppression, tick isolation."""
import asyncio
import threading
from datetime import datetime

import pytest
from sqlalchemy import delete, update
from sqlmodel import Session, select

from pt_tracker.core.database import engine
from pt_tracker.models import Client, TrainingSession
from pt_tracker.services import scheduler as scheduler_module
from pt_tracker.services.preferences import save_preferences
from pt_tracker.services.push import register_token
from pt_tracker.services.scheduler import ReminderScheduler, find_due_sessions, send_session_reminders

START = datetime(2030, 6, 1, 14, 0)


def _client(db, first="Jane", last="Doe", code="AAA111") -> Client:
    c = Client(first_name=first, last_name=last, access_code=code)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def _session(db, client: Client, scheduled_at=START, status="scheduled", reminder_sent=False) -> TrainingSession:
    s = TrainingSession(client_id=client.id, scheduled_at=scheduled_at, status=status, reminder_sent=reminder_sent)
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@pytest.mark.parametrize(
    "now,due",
    [
        (datetime(2030, 6, 1, 13, 10), True),
        (datetime(2030, 6, 1, 13, 0), True),
        (datetime(2030, 6, 1, 12, 50), False),
        (datetime(2030, 6, 1, 14, 5), False),
        (datetime(2030, 6, 1, 14, 0), False),
    ],
)
def test_due_window_default_lead(db, now, due):
    s = _session(db, _client(db))
    assert [d.session_id for d in find_due_sessions(db, now)] == ([s.id] if due else [])


def test_due_window_uses_client_lead_time(db):
    c = _client(db)
    save_preferences(db, "client", c.id, {"reminder_minutes_before": 180})
    s = _session(db, c)
    assert [d.session_id for d in find_due_sessions(db, datetime(2030, 6, 1, 11, 30))] == [s.id]
    assert find_due_sessions(db, datetime(2030, 6, 1, 10, 30)) == []


def test_only_scheduled_unreminded_sessions_are_due(db):
    c = _client(db)
    _session(db, c, status="cancelled")
    _session(db, c, reminder_sent=True)
    assert find_due_sessions(db, datetime(2030, 6, 1, 13, 30)) == []


def test_tick_sends_to_client_and_trainer_then_flags(db, push_provider):
    c = _client(db)
    s = _session(db, c)
    register_token(db, "client", c.id, "ExponentPushToken[client]")
    register_token(db, "trainer", None, "ExponentPushToken[trainer]")

    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 15)) == 1

    by_token = {m["to"]: m for m in push_provider.messages}
    assert by_token["ExponentPushToken[client]"]["title"] == "Session Reminder"
    assert by_token["ExponentPushToken[client]"]["body"] == "Your session is in 45 minutes"
    assert by_token["ExponentPushToken[trainer]"]["title"] == "Upcoming Session"
    assert by_token["ExponentPushToken[trainer]"]["body"] == "Jane Doe session coming up"
    assert by_token["ExponentPushToken[client]"]["data"] == {"type": "session_reminder", "sessionId": s.id}
    db.refresh(s)
    assert s.reminder_sent is True


def test_flagged_session_is_never_reminded_again(db, push_provider):
    c = _client(db)
    _session(db, c)
    register_token(db, "client", c.id, "ExponentPushToken[client]")
    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 10)) == 1
    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 20)) == 0
    assert len(push_provider.messages) == 1


def test_session_without_tokens_is_still_flagged(db, push_provider):
    s = _session(db, _client(db))
    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 30)) == 1
    assert push_provider.calls == []
    db.refresh(s)
    assert s.reminder_sent is True


def test_disabled_session_reminders_suppress_only_that_recipient(db, push_provider):
    c = _client(db)
    s = _session(db, c)
    register_token(db, "client", c.id, "ExponentPushToken[client]")
    register_token(db, "trainer", None, "ExponentPushToken[trainer]")
    save_preferences(db, "client", c.id, {"session_reminders": False})

    send_session_reminders(db, now=datetime(2030, 6, 1, 13, 30))

    assert [m["to"] for m in push_provider.messages] == ["ExponentPushToken[trainer]"]
    db.refresh(s)
    assert s.reminder_sent is True


def test_one_failing_session_does_not_stop_the_tick(db, push_provider, monkeypatch):
    first = _client(db, "Ann", "Fail", "AAA111")
    second = _client(db, "Bob", "Fine", "BBB222")
    bad = _session(db, first, scheduled_at=datetime(2030, 6, 1, 13, 40))
    good = _session(db, second)

    real_build = scheduler_module.build_reminder_messages

    def flaky_build(db_, due, now):
        if due.session_id == bad.id:
            raise RuntimeError("boom")
        return real_build(db_, due, now)

    monkeypatch.setattr(scheduler_module, "build_reminder_messages", flaky_build)
    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 30)) == 1

    flags = {s.id: s.reminder_sent for s in db.exec(select(TrainingSession)).all()}
    assert flags == {bad.id: False, good.id: True}


def test_session_deleted_mid_tick_does_not_stop_later_sessions(db, push_provider, monkeypatch):
    c = _client(db)
    first = _session(db, c, scheduled_at=datetime(2030, 6, 1, 13, 20))
    doomed = _session(db, c, scheduled_at=datetime(2030, 6, 1, 13, 40))
    last = _session(db, c)
    doomed_id = doomed.id
    register_token(db, "client", c.id, "ExponentPushToken[client]")

    real_send = scheduler_module.send_push_notifications
    calls = []

    def send_then_delete(db_, messages):
        calls.append(messages[0].data["sessionId"])
        if len(calls) == 1:
            # Trainer removes a later session while the tick is running
            with Session(engine) as other:
                other.exec(delete(TrainingSession).where(TrainingSession.id == doomed_id))
                other.commit()
        return real_send(db_, messages)

    monkeypatch.setattr(scheduler_module, "send_push_notifications", send_then_delete)
    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 10)) == 2

    assert calls == [first.id, doomed_id, last.id]
    flags = {s.id: s.reminder_sent for s in db.exec(select(TrainingSession)).all()}
    assert flags == {first.id: True, last.id: True}


def test_flag_set_by_another_writer_is_not_counted(db, push_provider, monkeypatch):
    c = _client(db)
    s = _session(db, c)
    session_id = s.id
    register_token(db, "client", c.id, "ExponentPushToken[client]")

    real_send = scheduler_module.send_push_notifications

    def send_while_other_flags(db_, messages):
        result = real_send(db_, messages)
        with Session(engine) as other:
            other.exec(update(TrainingSession).where(TrainingSession.id == session_id).values(reminder_sent=True))
            other.commit()
        return result

    monkeypatch.setattr(scheduler_module, "send_push_notifications", send_while_other_flags)
    assert send_session_reminders(db, now=datetime(2030, 6, 1, 13, 30)) == 0

    db.expire_all()
    assert db.get(TrainingSession, session_id).reminder_sent is True
    assert find_due_sessions(db, datetime(2030, 6, 1, 13, 40)) == []


def test_run_once_skips_while_a_tick_is_running():
    sched = ReminderScheduler(interval_seconds=60)
    started = threading.Event()
    release = threading.Event()

    def slow_tick():
        started.set()
        release.wait(5)
        return 3

    sched._tick = slow_tick

    async def scenario():
        first = asyncio.create_task(sched.run_once())
        await asyncio.to_thread(started.wait, 5)
        skipped = await sched.run_once()
        release.set()
        return await first, skipped

    first, skipped = asyncio.run(scenario())
    assert first == 3
    assert skipped is None


def test_failed_tick_is_logged_and_next_tick_runs():
    sched = ReminderScheduler(interval_seconds=60)
    results = iter([RuntimeError("db down"), 2])

    def tick():
        item = next(results)
        if isinstance(item, Exception):
            raise item
        return item

    sched._tick = tick

    async def scenario():
        return await sched.run_once(), await sched.run_once()

    assert asyncio.run(scenario()) == (None, 2)


def test_start_runs_a_tick_immediately_and_stop_cancels():
    sched = ReminderScheduler(interval_seconds=3600)
    ticked = threading.Event()

    def tick():
        ticked.set()
        return 0

    sched._tick = tick

    async def scenario():
        sched.start()
        assert sched.running
        await asyncio.to_thread(ticked.wait, 5)
        await sched.stop()
        return sched.running

    assert asyncio.run(scenario()) is False
    assert ticked.is_set()
