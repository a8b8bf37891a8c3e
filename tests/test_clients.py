"""Client CRUD, access codes, photo upload."""
from fastapi.testclient import TestClient
from sqlmodel import select

from pt_tracker.models import Measurement, Message, TrainingSession


def test_create_client_generates_access_code(client: TestClient, make_client):
    j = make_client("Ann", "Lee", email="ann@example.com", goals="Run a 10k")
    assert len(j["access_code"]) == 6
    assert j["access_code"] == j["access_code"].upper()
    assert j["is_active"] is True
    assert j["created_at"].endswith("Z")


def test_create_client_blank_name_rejected(client: TestClient, trainer_headers: dict):
    r = client.post("/api/clients", json={"first_name": "  ", "last_name": "X"}, headers=trainer_headers)
    assert r.status_code == 422


def test_list_clients_ordered_by_name(client: TestClient, make_client, trainer_headers: dict):
    make_client("Zed", "Brown")
    make_client("Amy", "Adams")
    make_client("Bob", "Brown")
    r = client.get("/api/clients", headers=trainer_headers)
    assert r.status_code == 200
    assert [(c["last_name"], c["first_name"]) for c in r.json()] == [
        ("Adams", "Amy"),
        ("Brown", "Bob"),
        ("Brown", "Zed"),
    ]


def test_client_reads_own_record(client: TestClient, pt_client: dict, client_headers: dict):
    r = client.get(f"/api/clients/{pt_client['id']}", headers=client_headers)
    assert r.status_code == 200
    assert r.json()["id"] == pt_client["id"]


def test_get_missing_client_404(client: TestClient, trainer_headers: dict):
    r = client.get("/api/clients/4242", headers=trainer_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Client not found"


def test_update_client_partial(client: TestClient, pt_client: dict, trainer_headers: dict):
    r = client.put(f"/api/clients/{pt_client['id']}", json={"phone": "555-0100"}, headers=trainer_headers)
    assert r.status_code == 200
    j = r.json()
    assert j["phone"] == "555-0100"
    assert j["first_name"] == "Jane"


def test_regenerate_code_invalidates_old_code(client: TestClient, pt_client: dict, trainer_headers: dict):
    old = pt_client["access_code"]
    r = client.post(f"/api/clients/{pt_client['id']}/regenerate-code", headers=trainer_headers)
    assert r.status_code == 200
    new = r.json()["access_code"]
    assert len(new) == 6
    if new != old:
        assert client.post("/api/auth/client-login", json={"access_code": old}).status_code == 401
    assert client.post("/api/auth/client-login", json={"access_code": new}).status_code == 200


def test_delete_client_removes_related_rows(client: TestClient, pt_client: dict, trainer_headers: dict, db):
    cid = pt_client["id"]
    client.post(
        "/api/sessions",
        json={"client_id": cid, "scheduled_at": "2030-01-01T10:00:00Z"},
        headers=trainer_headers,
    )
    client.post(f"/api/clients/{cid}/measurements", json={"weight_lbs": 180}, headers=trainer_headers)
    client.post(f"/api/messages/conversations/{cid}", json={"content": "hi"}, headers=trainer_headers)

    r = client.delete(f"/api/clients/{cid}", headers=trainer_headers)
    assert r.status_code == 204
    assert client.get(f"/api/clients/{cid}", headers=trainer_headers).status_code == 404
    assert db.exec(select(TrainingSession).where(TrainingSession.client_id == cid)).all() == []
    assert db.exec(select(Measurement).where(Measurement.client_id == cid)).all() == []
    assert db.exec(select(Message).where(Message.client_id == cid)).all() == []


def test_upload_client_photo(client: TestClient, pt_client: dict, trainer_headers: dict):
    r = client.post(
        f"/api/clients/{pt_client['id']}/photo",
        files={"photo": ("me.png", b"\x89PNG fake image bytes", "image/png")},
        headers=trainer_headers,
    )
    assert r.status_code == 200
    url = r.json()["photo_url"]
    assert url.startswith("/uploads/clients/") and url.endswith(".png")
    served = client.get(url)
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake image bytes"


def test_upload_client_photo_rejects_non_image(client: TestClient, pt_client: dict, trainer_headers: dict):
    r = client.post(
        f"/api/clients/{pt_client['id']}/photo",
        files={"photo": ("notes.txt", b"hello", "text/plain")},
        headers=trainer_headers,
    )
    assert r.status_code == 400
