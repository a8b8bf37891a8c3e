"""Sessions: CRUD, filters, ownership, scheduling notification."""
from fastapi.testclient import TestClient

from pt_tracker.services.preferences import save_preferences
from pt_tracker.services.push import register_token


def _create(client, headers, client_id, when="2030-03-01T14:00:00Z", **extra):
    r = client.post("/api/sessions", json={"client_id": client_id, "scheduled_at": when, **extra}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_session_returns_names_and_utc(client: TestClient, pt_client: dict, trainer_headers: dict):
    j = _create(client, trainer_headers, pt_client["id"], when="2030-03-01T16:00:00+02:00", duration_min=45)
    assert j["scheduled_at"] == "2030-03-01T14:00:00Z"
    assert j["status"] == "scheduled"
    assert j["duration_min"] == 45
    assert j["reminder_sent"] is False
    assert (j["first_name"], j["last_name"]) == ("Jane", "Doe")


def test_create_session_unknown_client_404(client: TestClient, trainer_headers: dict):
    r = client.post("/api/sessions", json={"client_id": 999, "scheduled_at": "2030-01-01T10:00:00Z"}, headers=trainer_headers)
    assert r.status_code == 404


def test_list_sessions_filters_and_order(client: TestClient, make_client, trainer_headers: dict):
    a = make_client("A", "One")
    b = make_client("B", "Two")
    _create(client, trainer_headers, a["id"], when="2030-03-03T10:00:00Z")
    _create(client, trainer_headers, b["id"], when="2030-03-01T10:00:00Z")
    _create(client, trainer_headers, a["id"], when="2030-03-02T10:00:00Z")

    r = client.get("/api/sessions", headers=trainer_headers)
    assert [s["scheduled_at"] for s in r.json()] == [
        "2030-03-01T10:00:00Z",
        "2030-03-02T10:00:00Z",
        "2030-03-03T10:00:00Z",
    ]
    r = client.get("/api/sessions", params={"client_id": a["id"]}, headers=trainer_headers)
    assert len(r.json()) == 2
    r = client.get(
        "/api/sessions",
        params={"from": "2030-03-02T00:00:00Z", "to": "2030-03-02T23:59:59Z"},
        headers=trainer_headers,
    )
    assert [s["client_id"] for s in r.json()] == [a["id"]]


def test_client_sees_only_own_sessions(client: TestClient, make_client, pt_client: dict, client_headers: dict, trainer_headers: dict):
    other = make_client("Other", "Client")
    mine = _create(client, trainer_headers, pt_client["id"])
    theirs = _create(client, trainer_headers, other["id"])
    r = client.get("/api/sessions", params={"client_id": other["id"]}, headers=client_headers)
    assert [s["id"] for s in r.json()] == [mine["id"]]
    assert client.get(f"/api/sessions/{theirs['id']}", headers=client_headers).status_code == 403
    assert client.get(f"/api/sessions/{mine['id']}", headers=client_headers).status_code == 200


def test_update_session_status(client: TestClient, pt_client: dict, trainer_headers: dict):
    s = _create(client, trainer_headers, pt_client["id"])
    r = client.put(f"/api/sessions/{s['id']}", json={"status": "completed", "notes": "Good work"}, headers=trainer_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "completed"
    assert r.json()["notes"] == "Good work"


def test_update_session_rejects_unknown_status(client: TestClient, pt_client: dict, trainer_headers: dict):
    s = _create(client, trainer_headers, pt_client["id"])
    r = client.put(f"/api/sessions/{s['id']}", json={"status": "postponed"}, headers=trainer_headers)
    assert r.status_code == 422


def test_delete_session(client: TestClient, pt_client: dict, trainer_headers: dict):
    s = _create(client, trainer_headers, pt_client["id"])
    assert client.delete(f"/api/sessions/{s['id']}", headers=trainer_headers).status_code == 204
    assert client.get(f"/api/sessions/{s['id']}", headers=trainer_headers).status_code == 404


def test_create_session_notifies_client(client: TestClient, pt_client: dict, trainer_headers: dict, db, push_provider):
    register_token(db, "client", pt_client["id"], "ExponentPushToken[client-1]")
    s = _create(client, trainer_headers, pt_client["id"])
    assert len(push_provider.messages) == 1
    msg = push_provider.messages[0]
    assert msg["to"] == "ExponentPushToken[client-1]"
    assert msg["title"] == "New Session Scheduled"
    assert msg["data"] == {"type": "session_scheduled", "sessionId": s["id"]}


def test_create_session_notification_respects_preference(client: TestClient, pt_client: dict, trainer_headers: dict, db, push_provider):
    register_token(db, "client", pt_client["id"], "ExponentPushToken[client-1]")
    save_preferences(db, "client", pt_client["id"], {"session_reminders": False})
    _create(client, trainer_headers, pt_client["id"])
    assert push_provider.calls == []


def test_push_failure_does_not_fail_session_create(client: TestClient, pt_client: dict, trainer_headers: dict, db, push_provider):
    register_token(db, "client", pt_client["id"], "ExponentPushToken[client-1]")
    push_provider.error = ConnectionError("provider down")
    _create(client, trainer_headers, pt_client["id"])
    assert len(push_provider.calls) == 1
    assert len(client.get("/api/sessions", headers=trainer_headers).json()) == 1
