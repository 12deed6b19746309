"""FastAPI dependencies resolving the container and guarding routes by session state."""

import logging

from fastapi import Depends, HTTPException, Request, status

from tasktrack.container import AppContainer
from tasktrack.services.auth.gateway import AuthGateway
from tasktrack.services.database import TaskGateway
from tasktrack.state import AuthState, Session, TaskState

logger = logging.getLogger(__name__)


def get_container(request: Request) -> AppContainer:
    """
    Get the application container.

    Raises:
        RuntimeError: If the container was not attached at startup
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError(
            "App container not initialized. "
            "Ensure application startup sets app.state.container."
        )
    return container


def get_auth_state(container: AppContainer = Depends(get_container)) -> AuthState:
    return container.auth_state


def get_task_state(container: AppContainer = Depends(get_container)) -> TaskState:
    return container.task_state


def get_auth_gateway(container: AppContainer = Depends(get_container)) -> AuthGateway:
    return container.auth_gateway


def get_task_gateway(container: AppContainer = Depends(get_container)) -> TaskGateway:
    return container.task_gateway


async def require_session(
    request: Request,
    auth_state: AuthState = Depends(get_auth_state),
) -> Session:
    """
    Require a signed-in session.

    The session is also stored on `request.state.session` so the rate
    limiter can key on the user.

    Raises:
        HTTPException: 401 if nobody is signed in

    Example:
        @router.get("/me")
        async def me(session: Session = Depends(require_session)):
            return {"user_id": session.user_id}
    """
    if not auth_state.is_authenticated or not auth_state.user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in to continue.",
        )

    session = auth_state.session
    request.state.session = session
    return session


async def require_verified_session(session: Session = Depends(require_session)) -> Session:
    """
    Require a signed-in session with a verified email.

    Raises:
        HTTPException: 401 if nobody is signed in, 403 if the email is unverified
    """
    if not session.is_email_verified:
        logger.info(f"Blocked unverified user {session.user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Please verify your email address to continue.",
        )
    return session
