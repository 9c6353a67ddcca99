"""
Test configuration for the MedCare backend.
"""
import os

# Keep the application engine off disk before medcare.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medcare.auth.notifications import NotificationDispatcher, get_notifier
from medcare.auth.schemas import AccountRegistration
from medcare.auth.service import register_account
from medcare.database import Base, get_db
from medcare.main import app

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier(NotificationDispatcher):
    """
    Notification dispatcher that records messages instead of sending them.

    Set `fail` to make every send raise.
    """
    def __init__(self):
        super().__init__(base_url="http://testserver")
        self.sent = []
        self.fail = False

    def _record(self, kind, user, key=None):
        if self.fail:
            raise RuntimeError("mail server unreachable")
        self.sent.append((kind, user.login, key))

    def send_activation(self, user):
        self._record("activation", user, user.activation_key)

    def send_reset(self, user, key):
        self._record("reset", user, key)

    def send_creation(self, user):
        self._record("creation", user, user.reset_key)

    def kinds(self):
        return [kind for kind, _, _ in self.sent]


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def register(db, notifier):
    """
    Factory registering an account through the lifecycle service.
    """
    def _register(login, role="ROLE_PATIENT", password="secret-pass", email=None, extra_roles=()):
        registration = AccountRegistration(
            login=login,
            email=email or f"{login.lower()}@example.com",
            password=password,
            authorities=[role, *extra_roles],
        )
        return register_account(db, registration, password, notifier)
    return _register


@pytest.fixture(scope="function")
def client(db, notifier):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    # Override the session and notifier dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    # Create test client
    with TestClient(app) as client:
        yield client

    # Remove dependency override
    app.dependency_overrides = {}


@pytest.fixture(scope="function")
def auth_headers(client):
    """
    Factory returning bearer headers for an already registered login.
    """
    def _auth_headers(login, password="secret-pass"):
        response = client.post("/api/authenticate", json={"username": login, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['id_token']}"}
    return _auth_headers
