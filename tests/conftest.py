import os

# must be set before smartsync.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./smartsync_test.db")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("APP_URL", "https://testserver")

import pytest
from fastapi.testclient import TestClient

from smartsync.database import Base, SessionLocal, engine
from smartsync.main import app


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # https so the Secure session cookie is sent back
    return TestClient(app, base_url="https://testserver")


@pytest.fixture
def make_client():
    """Fresh clients, each with its own cookie jar."""
    return lambda: TestClient(app, base_url="https://testserver")


@pytest.fixture
def register():
    def _register(client, name="Ana", email="ana@x.com", password="secret"):
        r = client.post("/auth/register", json={"name": name, "email": email, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["token"]
    return _register


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def google(monkeypatch):
    """Fake Google: code exchange always succeeds, the service is in memory."""
    from fakes import FakeCalendarService, grant
    from smartsync.services import google_calendar

    service = FakeCalendarService()

    def fake_build(name, version, credentials=None, **kwargs):
        assert (name, version) == ("calendar", "v3")
        service.credentials.append(credentials)
        return service

    monkeypatch.setattr(google_calendar, "build", fake_build)
    monkeypatch.setattr(google_calendar, "exchange_code", lambda code: grant(f"token-for-{code}"))
    return service
