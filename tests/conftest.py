import os

import pytest

# Set test environment variables before importing any application code
os.environ.update(
    {
        "DATABASE_URL": "sqlite://",
        "ENVIRONMENT": "test",
        "DEBUG": "false",
        "APPROVED_EMAILS": "tester@example.com",
        "CORS_ORIGINS": "http://localhost:5173",
    }
)

from sqlmodel import Session, SQLModel  # noqa: E402

from weekly_goals_api.database import build_engine  # noqa: E402

APPROVED_HEADERS = {"x-user-id": "user-1", "x-user-email": "tester@example.com"}


@pytest.fixture
def engine():
    """Fresh in-memory database with foreign keys enforced"""
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        SQLModel.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session: Session):
    """Test client with the database dependency bound to the test session"""
    from fastapi.testclient import TestClient

    from weekly_goals_api.database import get_session
    from weekly_goals_api.main import app

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return dict(APPROVED_HEADERS)
