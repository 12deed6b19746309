"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from tasktrack.container import AppContainer
from tasktrack.main import app
from tasktrack.services.auth import AuthGateway
from tasktrack.services.database import TaskGateway
from tasktrack.services.rate_limiter import limiter
from tasktrack.state import (
    AUTH_STORAGE_KEY,
    TASK_STORAGE_KEY,
    AuthState,
    JsonStateStorage,
    Task,
    TaskState,
    TaskStatus,
)

TEST_USER_ID = "11111111-2222-3333-4444-555555555555"
TEST_EMAIL = "test@example.com"


def _make_task(
    task_id: str | None,
    status: TaskStatus = TaskStatus.PENDING,
    name: str = "Sample task",
    description: str = "Sample description",
    deadline: date | None = None,
    user_id: str | None = TEST_USER_ID,
) -> Task:
    """Build a Task with sensible defaults."""
    return Task(
        id=task_id,
        name=name,
        description=description,
        deadline=deadline or date.today() + timedelta(days=7),
        status=status,
        user_id=user_id,
    )


@pytest.fixture
def make_task():
    """Factory for Task objects owned by the test user."""
    return _make_task


@pytest.fixture(autouse=True)
def reset_rate_limits() -> Iterator[None]:
    """Clear in-memory rate limit counters between tests."""
    limiter.reset()
    yield


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Per-test directory standing in for local storage."""
    return tmp_path / "state"


@pytest.fixture
def auth_state(state_dir: Path) -> AuthState:
    return AuthState(JsonStateStorage.for_key(state_dir, AUTH_STORAGE_KEY))


@pytest.fixture
def task_state(state_dir: Path) -> TaskState:
    return TaskState(JsonStateStorage.for_key(state_dir, TASK_STORAGE_KEY))


@pytest.fixture
def auth_gateway() -> MagicMock:
    """AuthGateway double; tests set return values per operation."""
    return MagicMock(spec=AuthGateway)


@pytest.fixture
def task_gateway() -> MagicMock:
    """TaskGateway double; tests set return values per operation."""
    return MagicMock(spec=TaskGateway)


@pytest.fixture
def container(
    auth_state: AuthState,
    task_state: TaskState,
    auth_gateway: MagicMock,
    task_gateway: MagicMock,
) -> AppContainer:
    return AppContainer(
        auth_state=auth_state,
        task_state=task_state,
        auth_gateway=auth_gateway,
        task_gateway=task_gateway,
    )


@pytest.fixture
def client(container: AppContainer) -> Iterator[TestClient]:
    """
    Provide FastAPI test client wired to the test container.

    The lifespan is not run, so no real Supabase client is created.

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    app.state.container = container
    yield TestClient(app)
    app.state.container = None


@pytest.fixture
def signed_in(auth_state: AuthState) -> AuthState:
    """Authenticated but unverified session."""
    auth_state.set_auth(TEST_USER_ID, TEST_EMAIL, False)
    return auth_state


@pytest.fixture
def verified(auth_state: AuthState) -> AuthState:
    """Authenticated and verified session."""
    auth_state.set_auth(TEST_USER_ID, TEST_EMAIL, True)
    return auth_state
