"""Pytest fixtures: SQLite database, recreated for every test."""
import os

# Must be set before datepoll.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from datepoll.database import Base, get_db  # noqa: E402
from datepoll.main import app  # noqa: E402

# Import all models so they register with Base.metadata
from datepoll.models.event import Event, CandidateDate            # noqa: E402,F401
from datepoll.models.participant import Participant, Response     # noqa: E402,F401
from datepoll.models.decision_record import DecisionRecord        # noqa: E402,F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def iso(dt: datetime) -> str:
    return dt.isoformat()


def future(days: int = 7) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def create_test_event(client: TestClient, title: str = "Team Dinner", dates: list = None, **settings) -> dict:
    """POST /api/events/ and return the full event (GET) as JSON."""
    if dates is None:
        dates = [
            "2026-03-01T19:00:00+09:00",
            "2026-03-02T19:00:00+09:00",
            "2026-03-03T19:00:00+09:00",
        ]
    resp = client.post("/api/events/", json={
        "title": title,
        "description": "Pick a night",
        "creator_name": "Organizer",
        "candidate_dates": dates,
        "settings": settings,
    })
    assert resp.status_code == 201, resp.text
    event = client.get(f"/api/events/{resp.json()['id']}")
    assert event.status_code == 200, event.text
    return event.json()


def register(client: TestClient, event: dict, participant_id: int, name: str = None,
             available: list = (), maybe: list = (), unavailable: list = ()):
    """POST /api/events/{id}/participants; lists hold candidate date ids."""
    return client.post(f"/api/events/{event['id']}/participants", json={
        "participant_id": participant_id,
        "name": name or f"P{participant_id}",
        "available_candidate_dates": [{"id": i} for i in available],
        "maybe_candidate_dates": [{"id": i} for i in maybe],
        "unavailable_candidate_dates": [{"id": i} for i in unavailable],
    })
