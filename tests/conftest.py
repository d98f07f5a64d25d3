"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from larder import models  # noqa: F401
from larder.config import Settings
from larder.database import Base, create_db_engine, create_session_factory, get_db
from larder.main import create_app


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and the refresh token."""

    def __init__(self, *args, user_id: int | None = None, refresh_token: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.refresh_token = refresh_token


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    base_url, database_name = os.getenv("DATABASE_URL").rsplit("/", 1)
    SQLALCHEMY_DATABASE_URL = f"{base_url}/{database_name}_test"
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

test_settings = Settings(
    database_url=SQLALCHEMY_DATABASE_URL,
    create_tables=False,
    environment="test",
    jwt_access_secret="test-access-secret",
    jwt_refresh_secret="test-refresh-secret",
    bcrypt_rounds=4,
    log_level="WARNING",
)
engine = create_db_engine(test_settings)
TestingSessionLocal = create_session_factory(engine)
app = create_app(test_settings)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

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


def register(client, email: str, password: str = "testpass123", full_name: str = "Test User"):
    response = client.post(
        "/auth/register",
        json={"email": email, "password": password, "fullName": full_name},
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return AuthHeaders(
        {"Authorization": f"Bearer {data['tokens']['accessToken']}"},
        user_id=data["user"]["id"],
        refresh_token=data["tokens"]["refreshToken"],
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second user, for checking that rows stay private to their owner."""
    return register(client, "other@example.com", full_name="Other User")


@pytest.fixture
def settings():
    """Settings the test app runs with."""
    return test_settings
