"""Pytest fixtures."""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from swiftaid.core.events import event_bus
from swiftaid.core.security import hash_password
from swiftaid.db.base import Base
from swiftaid.db.session import get_db
from swiftaid.main import app
from swiftaid.models import Admin, ChatMessage, Driver, EmergencyRequest, User  # noqa: F401 - register for create_all

TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "pass"
# bcrypt is slow; hash once for every fixture profile
PASSWORD_HASH = hash_password(PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def unique_email(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}@test.com"


class ProfileFactory:
    """Creates committed profiles of each role with password ``PASSWORD``."""

    def __init__(self, db):
        self.db = db

    def _make(self, cls, **fields):
        fields.setdefault("email", unique_email(cls.__name__.lower()))
        fields.setdefault("name", cls.__name__)
        profile = cls(hashed_password=PASSWORD_HASH, **fields)
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def user(self, **fields) -> User:
        return self._make(User, **fields)

    def admin(self, **fields) -> Admin:
        return self._make(Admin, **fields)

    def driver(self, available=True, on_schedule=False, **fields) -> Driver:
        fields.setdefault("vehicle_number", "KBA 001X")
        fields.setdefault("location", "Nairobi CBD")
        return self._make(Driver, available=available, on_schedule=on_schedule, **fields)


@pytest.fixture(scope="session")
def setup_db():
    """Create tables once for test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(setup_db):
    """Test client with overridden DB."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def api_db(setup_db):
    """Session on the same database the test client uses."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def api_make(api_db):
    return ProfileFactory(api_db)


@pytest.fixture
def token_for(client):
    """Log a profile in through the API and return its bearer token."""

    def _token(profile) -> str:
        r = client.post("/auth/login", json={"email": profile.email, "password": PASSWORD})
        assert r.status_code == 200, r.json()
        return r.json()["access_token"]

    return _token


@pytest.fixture
def headers(token_for):
    def _headers(profile) -> dict:
        return {"Authorization": f"Bearer {token_for(profile)}"}

    return _headers


@pytest.fixture
def db():
    """Fresh in-memory database per test, for service-level tests."""
    mem_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=mem_engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=mem_engine)()
    try:
        yield session
    finally:
        session.close()
        mem_engine.dispose()


@pytest.fixture
def make(db):
    return ProfileFactory(db)


@pytest.fixture
def captured_events():
    """Every (event, payload) published while the test runs."""
    events = []
    unsubscribe = event_bus.subscribe(lambda event, payload: events.append((event, payload)))
    yield events
    unsubscribe()


@pytest.fixture
def payload():
    """A valid emergency request submission."""
    return {
        "patient_name": "Jane Doe",
        "patient_age": "34",
        "location": "CBD",
        "emergency_type": "Cardiac Arrest",
        "additional_info": "",
    }
