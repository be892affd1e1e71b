"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from collections.abc import Callable, Generator  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from rada_learning import models  # noqa: E402, F401
from rada_learning.core import container  # noqa: E402
from rada_learning.database import Base, get_db  # noqa: E402
from rada_learning.main import app  # noqa: E402

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine; StaticPool keeps the one in-memory database alive
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

START_TIME = datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


class FakeClock:
    """Steppable clock injected in place of utc_now."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> Generator[FakeClock, None, None]:
    """Replace the container clock for the duration of a test."""
    fake = FakeClock(START_TIME)
    container.clock.override(providers.Object(fake))
    try:
        yield fake
    finally:
        container.clock.reset_override()


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session, clock: FakeClock) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_module(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory fixture authoring a module through the API."""

    def _create(
        lessons: list[tuple[str, int]], xp_reward: int = 0, title: str = "Python Basics"
    ) -> dict[str, Any]:
        response = client.post(
            "/api/v1/content/modules",
            json={
                "title": title,
                "xp_reward": xp_reward,
                "lessons": [{"title": name, "xp_reward": xp} for name, xp in lessons],
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["module"]

    return _create


@pytest.fixture
def define_badge(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory fixture defining a badge through the API."""

    def _define(
        name: str, conditions: list[tuple[str, str, int]], xp_reward: int = 0
    ) -> dict[str, Any]:
        response = client.post(
            "/api/v1/content/badges",
            json={
                "name": name,
                "xp_reward": xp_reward,
                "conditions": [
                    {"stat_type": stat, "operator": op, "threshold": threshold}
                    for stat, op, threshold in conditions
                ],
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["badge"]

    return _define


@pytest.fixture
def send_event(client: TestClient) -> Callable[..., Any]:
    """Post one learner event and return the raw response."""

    def _send(event_type: str, **payload: Any) -> Any:
        return client.post("/api/v1/events", json={"type": event_type, **payload})

    return _send
