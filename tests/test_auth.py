"""Auth: trainer and client login, token checks, role rules."""
from fastapi.testclient import TestClient
from sqlmodel import select

from pt_tracker.core.security import create_access_token, decode_access_token
from pt_tracker.models import SecurityLog


def test_trainer_login_success(client: TestClient):
    r = client.post("/api/auth/trainer-login", json={"password": "trainer-pass"})
    assert r.status_code == 200
    j = r.json()
    assert j["user"] == {"role": "trainer", "clientId": None, "firstName": None, "lastName": None}
    payload = decode_access_token(j["token"])
    assert payload["role"] == "trainer"
    assert payload["sub"] == "trainer"


def test_trainer_login_wrong_password_is_logged(client: TestClient, db):
    r = client.post("/api/auth/trainer-login", json={"password": "nope"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid password"
    logs = db.exec(select(SecurityLog).where(SecurityLog.event == "failed_login")).all()
    assert len(logs) == 1
    assert logs[0].role == "trainer"


def test_client_login_with_access_code(client: TestClient, pt_client: dict):
    code = pt_client["access_code"]
    r = client.post("/api/auth/client-login", json={"access_code": f"  {code.lower()} "})
    assert r.status_code == 200
    j = r.json()
    assert j["user"]["role"] == "client"
    assert j["user"]["clientId"] == pt_client["id"]
    assert j["user"]["firstName"] == "Jane"
    assert decode_access_token(j["token"])["client_id"] == pt_client["id"]


def test_client_login_missing_or_unknown_code(client: TestClient):
    assert client.post("/api/auth/client-login", json={"access_code": ""}).status_code == 400
    assert client.post("/api/auth/client-login", json={"access_code": "ZZZZZZ"}).status_code == 401


def test_client_login_inactive_client(client: TestClient, pt_client: dict, trainer_headers: dict):
    client.put(f"/api/clients/{pt_client['id']}", json={"is_active": False}, headers=trainer_headers)
    r = client.post("/api/auth/client-login", json={"access_code": pt_client["access_code"]})
    assert r.status_code == 401


def test_missing_and_bad_token_are_401(client: TestClient):
    assert client.get("/api/clients").status_code == 401
    r = client.get("/api/clients", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_client_cannot_use_trainer_routes(client: TestClient, client_headers: dict):
    r = client.get("/api/clients", headers=client_headers)
    assert r.status_code == 403
    r = client.post("/api/templates", json={"name": "Push day"}, headers=client_headers)
    assert r.status_code == 403


def test_client_cannot_read_other_client(client: TestClient, make_client, client_headers: dict):
    other = make_client("Other", "Person")
    assert client.get(f"/api/clients/{other['id']}", headers=client_headers).status_code == 403
    assert client.get(f"/api/clients/{other['id']}/measurements", headers=client_headers).status_code == 403


def test_deactivated_client_token_rejected(client: TestClient, pt_client: dict, client_headers: dict, trainer_headers: dict):
    assert client.get(f"/api/clients/{pt_client['id']}", headers=client_headers).status_code == 200
    client.put(f"/api/clients/{pt_client['id']}", json={"is_active": False}, headers=trainer_headers)
    assert client.get(f"/api/clients/{pt_client['id']}", headers=client_headers).status_code == 403


def test_token_for_deleted_client_rejected(client: TestClient):
    headers = {"Authorization": f"Bearer {create_access_token('client', 9999)}"}
    assert client.get("/api/sessions", headers=headers).status_code == 403
