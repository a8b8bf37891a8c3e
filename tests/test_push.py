"""Push dispatcher: batching, token deactivation, failure isolation, registration."""
from sqlmodel import select

from pt_tracker.models import PushToken
from pt_tracker.services.push import (
    PUSH_BATCH_SIZE,
    PushMessage,
    get_active_tokens,
    register_token,
    send_push_notifications,
    unregister_token,
)


def _messages(n: int) -> list[PushMessage]:
    return [PushMessage(to=f"ExponentPushToken[{i}]", title="t", body="b") for i in range(n)]


def test_250_messages_make_three_provider_calls(db, push_provider):
    calls = send_push_notifications(db, _messages(250))
    assert calls == 3
    assert [len(batch) for batch in push_provider.calls] == [PUSH_BATCH_SIZE, PUSH_BATCH_SIZE, 50]


def test_no_messages_no_calls(db, push_provider):
    assert send_push_notifications(db, []) == 0
    assert push_provider.calls == []


def test_payload_shape(db, push_provider):
    send_push_notifications(db, [PushMessage(to="tok", title="Hi", body="There", data={"type": "test"})])
    send_push_notifications(db, [PushMessage(to="tok", title="Hi", body="There")])
    assert push_provider.calls[0] == [{"to": "tok", "title": "Hi", "body": "There", "data": {"type": "test"}}]
    assert push_provider.calls[1] == [{"to": "tok", "title": "Hi", "body": "There"}]


def test_device_not_registered_token_is_deactivated(db, push_provider):
    register_token(db, "client", 1, "ExponentPushToken[good]")
    register_token(db, "client", 1, "ExponentPushToken[gone]")
    push_provider.unregistered.add("ExponentPushToken[gone]")

    send_push_notifications(
        db,
        [PushMessage(to=t, title="t", body="b") for t in get_active_tokens(db, "client", 1)],
    )
    assert get_active_tokens(db, "client", 1) == ["ExponentPushToken[good]"]


def test_deactivation_maps_results_to_request_order(db, push_provider):
    tokens = [f"ExponentPushToken[{i}]" for i in range(150)]
    for t in tokens:
        register_token(db, "trainer", None, t)
    push_provider.unregistered.update({tokens[3], tokens[120]})
    send_push_notifications(db, [PushMessage(to=t, title="t", body="b") for t in tokens])
    active = set(get_active_tokens(db, "trainer"))
    assert tokens[3] not in active
    assert tokens[120] not in active
    assert len(active) == 148


def test_transport_error_is_swallowed(db, push_provider):
    push_provider.error = TimeoutError("timed out")
    assert send_push_notifications(db, _messages(120)) == 2
    assert len(push_provider.calls) == 2


def test_register_unregister_register_restores_token(db):
    register_token(db, "client", 7, "ExponentPushToken[phone]", "Old phone")
    assert unregister_token(db, "ExponentPushToken[phone]") is True
    assert get_active_tokens(db, "client", 7) == []

    row = register_token(db, "client", 7, "ExponentPushToken[phone]", "New phone")
    assert row.is_active is True
    assert row.device_name == "New phone"
    assert get_active_tokens(db, "client", 7) == ["ExponentPushToken[phone]"]
    assert len(db.exec(select(PushToken)).all()) == 1


def test_token_moves_to_latest_identity(db):
    register_token(db, "client", 1, "ExponentPushToken[shared]")
    register_token(db, "trainer", None, "ExponentPushToken[shared]")
    assert get_active_tokens(db, "client", 1) == []
    assert get_active_tokens(db, "trainer") == ["ExponentPushToken[shared]"]
