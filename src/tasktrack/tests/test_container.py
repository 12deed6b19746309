"""Tests for container wiring."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

from tasktrack.config import Settings
from tasktrack.container import build_container
from tasktrack.services.auth import AuthGateway
from tasktrack.services.database import TaskGateway


def test_build_container_from_settings(tmp_path: Path) -> None:
    """Test stores are file-backed under state_dir and gateways share the client."""
    settings = Settings(
        state_dir=tmp_path,
        app_url="https://tasks.example.com",
        tasks_table="todo",
        tasks_newest_first=False,
    )
    client = MagicMock()

    container = build_container(settings, client=client)
    container.auth_state.set_auth("u1", "me@example.com", True)

    assert isinstance(container.auth_gateway, AuthGateway)
    assert container.auth_gateway.client is client
    assert container.auth_gateway.redirect_url == "https://tasks.example.com"
    assert isinstance(container.task_gateway, TaskGateway)
    assert container.task_gateway.db.client is client
    assert container.task_gateway.table == "todo"
    assert container.task_gateway.newest_first is False
    assert (tmp_path / "auth-storage.json").exists()


def test_restart_restores_session(tmp_path: Path) -> None:
    """Test a second container over the same state_dir picks up the saved session."""
    settings = Settings(state_dir=tmp_path)
    first = build_container(settings, client=MagicMock())
    first.auth_state.set_auth("u1", "me@example.com", False)

    second = build_container(settings, client=MagicMock())

    assert second.auth_state.user_id == "u1"
    assert second.auth_state.is_email_verified is False


def test_start_and_stop_manage_remote_subscription(tmp_path: Path) -> None:
    client = MagicMock()
    client.auth.get_session.return_value = None
    container = build_container(Settings(state_dir=tmp_path), client=client)

    container.start()
    client.auth.on_auth_state_change.assert_called_once()

    container.stop()
    client.auth.on_auth_state_change.return_value.unsubscribe.assert_called_once()
    assert container.auth_gateway.channel.listener_count == 0


def test_restart_without_remote_session_signs_out(tmp_path: Path, make_task) -> None:
    """Test a restored Session is cleared when the new client has no SDK session."""
    settings = Settings(state_dir=tmp_path)
    first = build_container(settings, client=MagicMock())
    first.auth_state.set_auth("u1", "me@example.com", True)
    first.task_state.add_task(make_task("1", user_id="u1"))

    client = MagicMock()
    client.auth.get_session.return_value = None
    second = build_container(settings, client=client)
    assert second.auth_state.is_authenticated is True

    second.start()

    assert second.auth_state.is_authenticated is False
    assert second.auth_state.is_email_verified is False
    assert second.task_state.tasks == []
    assert build_container(settings, client=client).auth_state.is_authenticated is False


def test_restart_with_remote_session_keeps_state(tmp_path: Path, make_task) -> None:
    """Test a restored Session backed by the SDK session survives startup."""
    settings = Settings(state_dir=tmp_path)
    first = build_container(settings, client=MagicMock())
    first.auth_state.set_auth("u1", "me@example.com", False)
    first.task_state.add_task(make_task("1", user_id="u1"))

    client = MagicMock()
    client.auth.get_session.return_value = SimpleNamespace(
        user=SimpleNamespace(
            id="u1",
            email="me@example.com",
            email_confirmed_at="2030-01-01T00:00:00Z",
            user_metadata={},
        )
    )
    second = build_container(settings, client=client)

    second.start()

    assert second.auth_state.user_id == "u1"
    assert second.auth_state.is_email_verified is True
    assert [task.id for task in second.task_state.tasks] == ["1"]


def test_unreadable_remote_session_keeps_state(tmp_path: Path) -> None:
    settings = Settings(state_dir=tmp_path)
    build_container(settings, client=MagicMock()).auth_state.set_auth(
        "u1", "me@example.com", True
    )
    client = MagicMock()
    client.auth.get_session.side_effect = ConnectionError("network down")

    container = build_container(settings, client=client)
    container.start()

    assert container.auth_state.user_id == "u1"
