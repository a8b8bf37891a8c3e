"""Pytest fixtures: test client, in-memory SQLite, fake push provider, role tokens."""
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Must be set before the app (and its Settings) is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TRAINER_PASSWORD", "trainer-pass")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
# High limits so the whole suite fits in one window
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "100000")
os.environ.setdefault("RATE_LIMIT_LOGIN_PER_MINUTE", "100000")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="pt-tracker-uploads-"))

from sqlmodel import Session, SQLModel

from pt_tracker.core.database import engine
from pt_tracker.core.security import create_access_token
from pt_tracker.main import app
from pt_tracker.services import push


class FakePushProvider:
    """Stands in for the provider HTTP call; records every batch."""

    def __init__(self):
        self.calls: list[list[dict]] = []
        self.unregistered: set[str] = set()
        self.error: Exception | None = None

    def __call__(self, batch: list[dict]) -> dict:
        self.calls.append(batch)
        if self.error is not None:
            raise self.error
        tickets = []
        for message in batch:
            if message["to"] in self.unregistered:
                tickets.append({"status": "error", "details": {"error": "DeviceNotRegistered"}})
            else:
                tickets.append({"status": "ok", "id": f"ticket-{len(tickets)}"})
        return {"data": tickets}

    @property
    def messages(self) -> list[dict]:
        return [m for batch in self.calls for m in batch]


@pytest.fixture(autouse=True)
def reset_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture(autouse=True)
def push_provider(monkeypatch):
    fake = FakePushProvider()
    monkeypatch.setattr(push, "_post_to_provider", fake)
    return fake


@pytest.fixture
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture(scope="function")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def trainer_headers():
    return {"Authorization": f"Bearer {create_access_token('trainer')}"}


@pytest.fixture
def make_client(client: TestClient, trainer_headers: dict):
    """Create a client through the API; returns its JSON."""

    def _make(first_name="Jane", last_name="Doe", **extra):
        r = client.post(
            "/api/clients",
            json={"first_name": first_name, "last_name": last_name, **extra},
            headers=trainer_headers,
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def pt_client(make_client):
    return make_client()


@pytest.fixture
def client_headers(pt_client):
    return {"Authorization": f"Bearer {create_access_token('client', pt_client['id'])}"}