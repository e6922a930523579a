"""Pytest fixtures — per-test SQLite database and a recording notification dispatcher."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_app.db")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.notifications.dispatcher import get_dispatcher  # noqa: E402

# Import all models so they register with Base.metadata
from app.models.user import User, ProviderAccount  # noqa: E402,F401
from app.models.availability import Availability, SlotStatus  # noqa: E402,F401
from app.models.call import Call, CallResponse  # noqa: E402,F401
from app.models.match import Match  # noqa: E402,F401

SQLITE_URL = "sqlite:///./test.db"
MATCH_DAY = date(2024, 6, 10)


class RecordingDispatcher:
    """Stands in for the threaded dispatcher; records every message synchronously."""

    def __init__(self):
        self.sent: list[tuple[dict, bool]] = []

    def send(self, message: dict, mention_all: bool = False):
        self.sent.append((message, mention_all))

    def titles(self) -> list[str]:
        return [m["title"] for m, _ in self.sent]

    def count(self, prefix: str) -> int:
        return sum(1 for t in self.titles() if t.startswith(prefix))


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch):
    """Pin match-detection settings so a local .env cannot skew tests."""
    monkeypatch.setattr(settings, "MATCH_SIZE", 10)
    monkeypatch.setattr(settings, "GOLDEN_RUN_LENGTH", 3)
    monkeypatch.setattr(settings, "REMINDER_RUN_LENGTH", 4)
    monkeypatch.setattr(settings, "REMINDER_HORIZON_DAYS", 21)
    monkeypatch.setattr(settings, "OPENING_HOUR", 8)
    monkeypatch.setattr(settings, "CLOSING_HOUR", 23)
    monkeypatch.setattr(settings, "ADMIN_IDENTITIES", "")


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture(scope="function")
def client(db_engine, dispatcher):
    """FastAPI TestClient with the database and dispatcher dependencies overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", email: str = None, discord_id: str = None) -> dict:
    """Helper — POST /api/users and return response JSON."""
    payload = {"name": name, "email": email}
    if discord_id:
        payload.update({"provider": "discord", "provider_account_id": discord_id})
    resp = client.post("/api/users/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth(user: dict) -> dict:
    """Headers identifying ``user`` as the authenticated caller."""
    return {"X-User-Id": user["user_id"]}


def make_users(db, count: int, prefix: str = "Player") -> list[User]:
    """Insert ``count`` users directly and return them."""
    users = [User(name=f"{prefix} {i:02d}") for i in range(count)]
    db.add_all(users)
    db.commit()
    return users


def fill_slots(db, users, day: date, hours) -> None:
    """Insert availability for every user at every hour, bypassing detection."""
    for user in users:
        for hour in hours:
            db.add(Availability(user_id=user.user_id, date=day, hour=hour))
    db.commit()


def hours_of(db, user_id: str, day: date) -> list[int]:
    rows = (
        db.query(Availability.hour)
        .filter(Availability.user_id == user_id, Availability.date == day)
        .order_by(Availability.hour)
        .all()
    )
    return [h for (h,) in rows]
