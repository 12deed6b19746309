"""Wiring of stores, gateways and the session event channel."""

import logging
from dataclasses import dataclass, field

from supabase import Client

from tasktrack.config import Settings
from tasktrack.services.auth.events import SessionEventChannel
from tasktrack.services.auth.gateway import AuthGateway
from tasktrack.services.auth.session_sync import SessionSynchronizer
from tasktrack.services.database import SupabaseQueryBuilder, TaskGateway, get_supabase_client
from tasktrack.state import (
    AUTH_STORAGE_KEY,
    TASK_STORAGE_KEY,
    AuthState,
    JsonStateStorage,
    TaskState,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Everything a request handler needs, held on `app.state.container`."""

    auth_state: AuthState
    task_state: TaskState
    auth_gateway: AuthGateway
    task_gateway: TaskGateway
    synchronizer: SessionSynchronizer = field(init=False)

    def __post_init__(self) -> None:
        self.synchronizer = SessionSynchronizer(self.auth_state, self.task_state)

    def start(self) -> None:
        """Check the restored Session against the SDK, then follow remote session changes."""
        self.synchronizer.reconcile(self.auth_gateway)
        self.synchronizer.attach(self.auth_gateway)

    def stop(self) -> None:
        self.synchronizer.detach()
        self.auth_gateway.close()


def build_container(settings: Settings, client: Client | None = None) -> AppContainer:
    """
    Build the container from settings.

    Args:
        settings: Application settings
        client: Supabase client (uses the shared client if None)

    Returns:
        AppContainer with stores loaded from `settings.state_dir`
    """
    client = client or get_supabase_client()
    channel = SessionEventChannel()

    container = AppContainer(
        auth_state=AuthState(JsonStateStorage.for_key(settings.state_dir, AUTH_STORAGE_KEY)),
        task_state=TaskState(JsonStateStorage.for_key(settings.state_dir, TASK_STORAGE_KEY)),
        auth_gateway=AuthGateway(client, redirect_url=settings.app_url, channel=channel),
        task_gateway=TaskGateway(
            SupabaseQueryBuilder(client),
            table=settings.tasks_table,
            newest_first=settings.tasks_newest_first,
        ),
    )
    logger.info(
        "Container built",
        extra={"state_dir": str(settings.state_dir), "tasks_table": settings.tasks_table},
    )
    return container
