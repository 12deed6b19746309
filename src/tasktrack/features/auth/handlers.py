"""API handlers for registration, login and email verification."""

import logging

from fastapi import APIRouter, Depends, Query, Request, status

from tasktrack.features.auth.schemas import (
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
)
from tasktrack.features.errors import http_error_for
from tasktrack.services import PostHogService
from tasktrack.services.auth import AuthGateway, IdentityUser
from tasktrack.services.auth.dependencies import (
    get_auth_gateway,
    get_auth_state,
    get_task_state,
    require_session,
)
from tasktrack.services.rate_limiter import auth_rate_limit, default_rate_limit
from tasktrack.state import AuthState, Session, TaskState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(auth_state: AuthState) -> SessionResponse:
    return SessionResponse(**auth_state.session.model_dump())


def _start_session(
    auth_state: AuthState, task_state: TaskState, user: IdentityUser, is_email_verified: bool
) -> None:
    # Tasks of a previous owner must never be visible to the new session.
    if auth_state.user_id is not None and auth_state.user_id != user.user_id:
        task_state.clear_tasks()
    auth_state.set_auth(user.user_id, user.email, is_email_verified)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@auth_rate_limit
async def register(
    request: Request,
    payload: RegisterRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
    auth_state: AuthState = Depends(get_auth_state),
    task_state: TaskState = Depends(get_task_state),
) -> RegisterResponse:
    """
    Create an account and sign in as an unverified user.

    The identity service emails a verification link. Task routes stay
    closed (403) until the email is verified. When the project requires
    confirmation before the first sign-in, no remote session exists yet:
    `requires_login_after_verification` is set and the user logs in once
    the link was clicked.

    Raises:
        HTTPException: 400 if the email is taken, malformed or the password is weak
    """
    result = gateway.register(
        payload.email.strip(), payload.password, payload.display_name.strip()
    )
    if not result.success:
        raise http_error_for(result, "Registration failed")

    user = result.data
    _start_session(auth_state, task_state, user, is_email_verified=False)

    analytics = PostHogService()
    analytics.identify(
        distinct_id=user.user_id,
        properties={"email": user.email, "display_name": user.display_name},
    )
    analytics.capture(
        distinct_id=user.user_id,
        event="user_registered",
        properties={"requires_confirmation": not user.has_session},
    )
    logger.info(
        f"User registered: {user.user_id} ({user.email})",
        extra={"has_session": user.has_session},
    )
    return RegisterResponse(
        **auth_state.session.model_dump(),
        requires_login_after_verification=not user.has_session,
    )


@router.post("/login", response_model=SessionResponse)
@auth_rate_limit
async def login(
    request: Request,
    payload: LoginRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
    auth_state: AuthState = Depends(get_auth_state),
    task_state: TaskState = Depends(get_task_state),
) -> SessionResponse:
    """
    Sign in with email and password.

    The session takes the verification flag the identity service reports
    right now, so an already verified user goes straight to a verified
    session.

    Raises:
        HTTPException: 401 for wrong credentials, 400 for other identity errors
    """
    result = gateway.login(payload.email.strip(), payload.password)
    if not result.success:
        PostHogService().capture(
            distinct_id="anonymous",
            event="authentication_failed",
            properties={"error": result.error_code or "login_failed"},
        )
        raise http_error_for(result, "Login failed")

    user = result.data
    _start_session(auth_state, task_state, user, is_email_verified=user.is_email_verified)

    PostHogService().capture(
        distinct_id=user.user_id,
        event="user_logged_in",
        properties={"is_email_verified": user.is_email_verified},
    )
    return _session_response(auth_state)


@router.post("/logout", response_model=SessionResponse)
@default_rate_limit
async def logout(
    request: Request,
    gateway: AuthGateway = Depends(get_auth_gateway),
    auth_state: AuthState = Depends(get_auth_state),
    task_state: TaskState = Depends(get_task_state),
) -> SessionResponse:
    """
    Sign out and forget the local session and tasks.

    Idempotent: logging out while anonymous succeeds.

    Raises:
        HTTPException: 400 if the identity service rejects the sign out
    """
    user_id = auth_state.user_id
    result = gateway.logout()
    if not result.success:
        raise http_error_for(result, "Logout failed")

    auth_state.clear_auth()
    task_state.clear_tasks()

    if user_id:
        PostHogService().capture(distinct_id=user_id, event="user_logged_out")
    return _session_response(auth_state)


@router.post(
    "/password-reset", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED
)
@auth_rate_limit
async def request_password_reset(
    request: Request,
    payload: PasswordResetRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> MessageResponse:
    """
    Email a password reset link.

    Raises:
        HTTPException: 400 if the identity service rejects the request
    """
    result = gateway.request_password_reset(payload.email.strip())
    if not result.success:
        raise http_error_for(result, "Password reset failed")

    return MessageResponse(message="Password reset email sent. Please check your inbox.")


@router.get("/session", response_model=SessionResponse)
@default_rate_limit
async def get_session(
    request: Request,
    auth_state: AuthState = Depends(get_auth_state),
) -> SessionResponse:
    """Return the locally held session (anonymous form if nobody is signed in)."""
    return _session_response(auth_state)


@router.post("/verification/resend", response_model=MessageResponse)
@auth_rate_limit
async def resend_verification(
    request: Request,
    session: Session = Depends(require_session),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> MessageResponse:
    """
    Send the verification email again.

    Works right after a sign-up that requires confirmation: the stored
    Session's email is used when the SDK holds no session.

    Raises:
        HTTPException: 401 if there is no local session
    """
    result = gateway.resend_verification(session.email)
    if not result.success:
        raise http_error_for(result, "Failed to send verification email")

    return MessageResponse(
        message="Verification email sent. Please check your email and click the link."
    )


@router.post("/verification/check", response_model=SessionResponse)
@default_rate_limit
async def check_verification(
    request: Request,
    session: Session = Depends(require_session),
    gateway: AuthGateway = Depends(get_auth_gateway),
    auth_state: AuthState = Depends(get_auth_state),
) -> SessionResponse:
    """
    Re-read the verification flag from the identity service ("I've verified").

    On failure the session is left as it was, so an unverified user stays
    unverified.

    Raises:
        HTTPException: 401 if the user must log in again to confirm (no remote
            session, e.g. right after a sign-up that requires confirmation),
            400 for other identity errors
    """
    result = gateway.refresh_verification_status()
    if not result.success:
        logger.warning(
            f"Verification check failed for user {session.user_id}: {result.error}"
        )
        raise http_error_for(result, "Could not check verification status")

    auth_state.set_email_verified(bool(result.data))
    return _session_response(auth_state)


@router.get("/verify", response_model=SessionResponse)
@auth_rate_limit
async def confirm_email(
    request: Request,
    token_hash: str = Query(..., min_length=1, description="token_hash from the email link"),
    verification_type: str = Query(
        "email", alias="type", description="Verification type from the email link"
    ),
    gateway: AuthGateway = Depends(get_auth_gateway),
    auth_state: AuthState = Depends(get_auth_state),
    task_state: TaskState = Depends(get_task_state),
) -> SessionResponse:
    """
    Handle the link from the verification email.

    Confirming the code also signs the user in, so a session is started if
    none is held locally.

    Raises:
        HTTPException: 400 if the link is invalid or has expired
    """
    result = gateway.confirm_email(token_hash, verification_type)
    if not result.success:
        raise http_error_for(result, "The verification link is invalid or has expired.")

    user = result.data
    if auth_state.user_id != user.user_id:
        _start_session(auth_state, task_state, user, is_email_verified=True)
    else:
        auth_state.set_email_verified(True)
    return _session_response(auth_state)
