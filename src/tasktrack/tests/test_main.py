"""Tests for main API endpoints and application lifecycle."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from tasktrack.container import AppContainer
from tasktrack.main import app
from tasktrack.services.auth import IdentityUser
from tasktrack.services.results import GatewayResult
from tasktrack.state import AuthState, TaskState


def test_health_check(client: TestClient) -> None:
    """Test health check endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_api_prefix() -> None:
    """Test that API v1 prefix is configured correctly."""
    from tasktrack.config import settings

    assert settings.api_v1_prefix == "/api/v1"


def test_routes_are_mounted_under_prefix() -> None:
    """Test both routers are published under the API prefix."""
    paths = app.openapi()["paths"]

    assert "/api/v1/auth/login" in paths
    assert "/api/v1/tasks" in paths
    assert "/api/v1/tasks/{task_id}/toggle" in paths


def test_lifespan_attaches_and_detaches_synchronizer(
    container: AppContainer, auth_gateway: MagicMock
) -> None:
    """Test startup subscribes to session events and shutdown releases them."""
    unsubscribe = MagicMock()
    auth_gateway.subscribe.return_value = unsubscribe
    auth_gateway.current_user.return_value = GatewayResult.ok(None)
    app.state.container = container

    try:
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
            auth_gateway.subscribe.assert_called_once_with(container.synchronizer.handle)
    finally:
        app.state.container = None

    unsubscribe.assert_called_once()
    auth_gateway.close.assert_called_once()


def test_missing_container_is_a_server_error() -> None:
    """Test routes fail loudly when startup never attached the container."""
    app.state.container = None
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/v1/auth/session")

    assert response.status_code == 500


def test_startup_clears_session_without_remote_session(
    container: AppContainer,
    auth_gateway: MagicMock,
    verified: AuthState,
    task_state: TaskState,
    make_task,
) -> None:
    """Test a restored Session is dropped when the SDK holds no session."""
    task_state.add_task(make_task("1"))
    auth_gateway.current_user.return_value = GatewayResult.ok(None)
    app.state.container = container

    try:
        with TestClient(app) as client:
            session = client.get("/api/v1/auth/session").json()
            tasks = client.get("/api/v1/tasks")
    finally:
        app.state.container = None

    assert session["is_authenticated"] is False
    assert tasks.status_code == 401
    assert task_state.tasks == []


def test_startup_keeps_session_backed_by_remote_session(
    container: AppContainer,
    auth_gateway: MagicMock,
    verified: AuthState,
    task_state: TaskState,
    make_task,
) -> None:
    task_state.add_task(make_task("1"))
    auth_gateway.current_user.return_value = GatewayResult.ok(
        IdentityUser(
            user_id=verified.user_id, email=verified.email, is_email_verified=True
        )
    )
    app.state.container = container

    try:
        with TestClient(app) as client:
            response = client.get("/api/v1/tasks")
    finally:
        app.state.container = None

    assert response.status_code == 200
    assert [task["id"] for task in response.json()["data"]] == ["1"]
