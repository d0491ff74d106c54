"""
Pytest configuration and fixtures.
"""

import os
from datetime import datetime
from typing import Generator

# Keep the app from touching a file database or real credentials
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("RESEND_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import get_current_user
from app.database import Base, get_db
from app.main import app
from app.models import Client, Gym, GymSettings, User
from app.services.notification_service import NotificationError

# Use in-memory SQLite for testing
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2025, 3, 10, 9, 0, 0)


def fixed_clock() -> datetime:
    return FIXED_NOW


class FakeDispatcher:
    """Records notifications instead of delivering them"""

    def __init__(self):
        self.sent = []

    def notify(self, user_id, title, message, channel=None):
        self.sent.append({"user_id": user_id, "title": title, "message": message})
        return {"app_sent": True, "email_sent": False}


class FailingDispatcher:
    def __init__(self):
        self.attempts = 0

    def notify(self, user_id, title, message, channel=None):
        self.attempts += 1
        raise NotificationError("delivery backend unavailable")


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def other_session(db_session) -> Generator[Session, None, None]:
    """A second session on the same database, standing in for a concurrent writer."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gym(db_session) -> Gym:
    gym = Gym(name="Iron Temple", email="owner@irontemple.it")
    db_session.add(gym)
    db_session.commit()
    db_session.refresh(gym)
    return gym


@pytest.fixture
def gym_settings(db_session, gym) -> GymSettings:
    row = GymSettings(
        gym_id=gym.id,
        days_to_first_followup=5,
        package_confirmation_days=7,
        custom_plan_confirmation_days=14,
        require_default_template_assignment=True,
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


def _make_user(db_session, gym, uid, role, name, email=None) -> User:
    user = User(firebase_uid=uid, full_name=name, email=email, role=role, gym_id=gym.id)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin(db_session, gym) -> User:
    return _make_user(db_session, gym, "uid-admin", "admin", "Anna Admin", "anna@irontemple.it")


@pytest.fixture
def operator(db_session, gym) -> User:
    return _make_user(db_session, gym, "uid-operator", "operator", "Oscar Operator")


@pytest.fixture
def trainer(db_session, gym) -> User:
    return _make_user(db_session, gym, "uid-t1", "trainer", "Tina Trainer", "tina@irontemple.it")


@pytest.fixture
def other_trainer(db_session, gym) -> User:
    return _make_user(db_session, gym, "uid-t2", "trainer", "Tom Trainer", "tom@irontemple.it")


@pytest.fixture
def assistant(db_session, gym) -> User:
    return _make_user(db_session, gym, "uid-assistant", "assistant", "Alex Assistant")


@pytest.fixture
def client_record(db_session, gym) -> Client:
    client = Client(gym_id=gym.id, first_name="Mario", last_name="Rossi", source="walk_in")
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def failing_dispatcher() -> FailingDispatcher:
    return FailingDispatcher()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_service(db_session, dispatcher):
    """Build a LifecycleService pinned to the fixed clock."""
    from app.domain.lifecycle.service import LifecycleService

    def _make(notifier=None):
        return LifecycleService(db_session, dispatcher=notifier or dispatcher, clock=fixed_clock)

    return _make


@pytest.fixture
def acting_user():
    """Mutable holder for the user the API test client authenticates as."""
    return {"user": None}


@pytest.fixture
def api_client(db_session, acting_user, dispatcher) -> Generator[TestClient, None, None]:
    """TestClient with database, auth and lifecycle service overridden."""
    from app.domain.lifecycle.router import get_lifecycle_service
    from app.domain.lifecycle.service import LifecycleService

    def override_get_db():
        yield db_session

    def override_get_current_user():
        return acting_user["user"]

    def override_lifecycle_service():
        return LifecycleService(db_session, dispatcher=dispatcher, clock=fixed_clock)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[get_lifecycle_service] = override_lifecycle_service

    # No context manager: the lifespan would create tables on the app engine
    yield TestClient(app)

    app.dependency_overrides.clear()
