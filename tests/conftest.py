"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database import Base, get_db
from src.main import app
from src.models.user import User


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/videolist", "/videolist_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from src import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function", autouse=True)
def email_tasks():
    """Keep email tasks off the broker; expose the mocked enqueue calls."""
    with (
        patch("src.tasks.emails.send_invitation_email.delay") as invitation_delay,
        patch("src.tasks.emails.send_verification_email.delay") as verification_delay,
    ):
        yield {"invitation": invitation_delay, "verification": verification_delay}


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_user(
    client,
    email: str,
    password: str = "testpass123",
    name: str | None = None,
    username: str | None = None,
) -> AuthHeaders:
    """Register a user through the API and return their auth headers."""
    payload = {"email": email, "password": password, "name": name}
    if username:
        payload["username"] = username
    response = client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


def mark_verified(db, user_id: int) -> None:
    """Stamp a user's email as verified without going through a token."""
    user = db.get(User, user_id)
    user.email_verification_time = datetime.now(UTC)
    db.commit()


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register_user(client, "test@example.com", name="Test User")


@pytest.fixture
def verified_headers(client, db):
    """A list owner whose email is verified."""
    headers = register_user(client, "owner@example.com", name="Owner")
    mark_verified(db, headers.user_id)
    return headers


@pytest.fixture
def other_headers(client):
    """A second, unverified user."""
    return register_user(client, "bob@example.com", name="Bob")


@pytest.fixture
def anonymous_headers(client):
    """A guest session."""
    response = client.post("/api/v1/auth/anonymous")
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"}, user_id=data["user"]["id"]
    )


@pytest.fixture
def make_user(client):
    """Factory fixture registering additional users."""
    return lambda email, **kwargs: register_user(client, email, **kwargs)


@pytest.fixture
def verify(db):
    """Factory fixture marking a user's email verified."""
    return lambda headers: mark_verified(db, headers.user_id)
