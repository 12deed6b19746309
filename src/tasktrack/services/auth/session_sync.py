"""Applies remote session transitions to the local stores."""

import logging
from collections.abc import Callable

from tasktrack.services.auth.gateway import AuthGateway
from tasktrack.services.auth.models import SessionEvent, SessionEventKind
from tasktrack.state import AuthState, TaskState

logger = logging.getLogger(__name__)


class SessionSynchronizer:
    """
    Keeps AuthState in line with the remote identity session.

    Events from the gateway are authoritative: a signed-in event replaces
    the stored session, a signed-out event clears it together with the
    task list. When a different user signs in, the previous user's tasks
    are dropped before the session is replaced.
    """

    def __init__(self, auth_state: AuthState, task_state: TaskState) -> None:
        self.auth_state = auth_state
        self.task_state = task_state
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self, gateway: AuthGateway) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = gateway.subscribe(self.handle)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle(self, event: SessionEvent) -> None:
        if event.kind == SessionEventKind.SIGNED_IN and event.user is not None:
            user = event.user
            previous_owner = self.auth_state.user_id
            if previous_owner is not None and previous_owner != user.user_id:
                logger.info(f"Session owner changed from {previous_owner} to {user.user_id}")
                self.task_state.clear_tasks()
            self.auth_state.set_auth(user.user_id, user.email, user.is_email_verified)
            return

        if self.auth_state.is_authenticated:
            logger.info(
                f"Remote session ended ({event.remote_event}), clearing local state",
                extra={"user_id": self.auth_state.user_id},
            )
        self.auth_state.clear_auth()
        self.task_state.clear_tasks()

    def reconcile(self, gateway: AuthGateway) -> None:
        """
        Align the restored Session with the SDK session at startup.

        A stored Session without a remote session behind it is cleared
        together with the tasks; a remote session replaces the stored one.
        When the remote session cannot be read the stored state is kept.
        """
        result = gateway.current_user()
        if not result.success:
            logger.warning(f"Could not read remote session at startup: {result.error}")
            return

        if result.data is None:
            self.handle(
                SessionEvent(kind=SessionEventKind.SIGNED_OUT, remote_event="INITIAL_SESSION")
            )
        else:
            self.handle(
                SessionEvent(
                    kind=SessionEventKind.SIGNED_IN,
                    user=result.data,
                    remote_event="INITIAL_SESSION",
                )
            )
