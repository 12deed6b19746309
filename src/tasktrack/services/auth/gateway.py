"""Gateway to the Supabase identity service."""

import logging
from collections.abc import Callable
from typing import Any

from supabase import Client

from tasktrack.services.auth.events import SessionEventChannel, SessionListener
from tasktrack.services.auth.exceptions import IdentityError
from tasktrack.services.auth.models import IdentityUser, SessionEvent, SessionEventKind
from tasktrack.services.results import GatewayResult

logger = logging.getLogger(__name__)

SESSION_MISSING = "session_missing"
LOGIN_REQUIRED = "login_required"


def _as_identity_error(error: Exception) -> IdentityError:
    if isinstance(error, IdentityError):
        return error
    # Supabase AuthApiError carries a machine-readable code (e.g. "invalid_credentials").
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error) or error.__class__.__name__
    return IdentityError(message, code=str(code) if code else None)


class AuthGateway:
    """
    Wraps remote identity operations of the Supabase auth client.

    Every operation returns a GatewayResult. Emails sent by the backend
    (verification, password reset) link back to `redirect_url`.

    Remote session changes reported by the SDK, including ones that happen
    outside any request (token refresh or expiry), are translated into
    SessionEvents and published on `channel`.

    Example:
        >>> gateway = AuthGateway(get_supabase_client(), redirect_url="http://localhost:5173")
        >>> result = gateway.login("user@example.com", "secret123")
        >>> result.data.is_email_verified
        True
    """

    def __init__(
        self,
        client: Client,
        redirect_url: str | None = None,
        channel: SessionEventChannel | None = None,
    ) -> None:
        self.client = client
        self.redirect_url = redirect_url
        self.channel = channel or SessionEventChannel()
        self._remote_subscription: Any = None

    def register(
        self, email: str, password: str, display_name: str
    ) -> GatewayResult[IdentityUser]:
        """
        Create an account and trigger the verification email.

        Returns:
            Result carrying the new user, always unverified. `has_session` is
            False when the project requires email confirmation before the
            first sign-in.
        """
        try:
            options: dict[str, Any] = {"data": {"display_name": display_name}}
            if self.redirect_url:
                options["email_redirect_to"] = self.redirect_url

            response = self.client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
            if response.user is None:
                raise IdentityError("Sign up did not return a user", code="signup_failed")

            user = IdentityUser.from_supabase(response.user)
            user = user.model_copy(
                update={
                    "display_name": display_name,
                    "is_email_verified": False,
                    "has_session": response.session is not None,
                }
            )
            logger.info(f"Registered user {user.user_id}")
            return GatewayResult[IdentityUser].ok(user)

        except Exception as e:
            error = _as_identity_error(e)
            logger.error(f"Sign up error: {error}", extra={"error_code": error.code})
            return GatewayResult[IdentityUser].fail(error)

    def login(self, email: str, password: str) -> GatewayResult[IdentityUser]:
        """Sign in; the result carries the current remote verification flag."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
            if response.user is None:
                raise IdentityError("Invalid login credentials", code="invalid_credentials")

            user = IdentityUser.from_supabase(response.user)
            logger.info(f"User signed in: {user.user_id}")
            return GatewayResult[IdentityUser].ok(user)

        except Exception as e:
            error = _as_identity_error(e)
            logger.warning(f"Sign in error: {error}", extra={"error_code": error.code})
            return GatewayResult[IdentityUser].fail(error)

    def logout(self) -> GatewayResult[None]:
        """Invalidate the remote session. Signing out without a session succeeds."""
        try:
            self.client.auth.sign_out()
            return GatewayResult.ok()
        except Exception as e:
            error = _as_identity_error(e)
            logger.error(f"Sign out error: {error}")
            return GatewayResult.fail(error)

    def request_password_reset(self, email: str) -> GatewayResult[None]:
        """Ask the backend to email a password reset link."""
        try:
            options = {"redirect_to": self.redirect_url} if self.redirect_url else {}
            self.client.auth.reset_password_for_email(email, options)
            return GatewayResult.ok()
        except Exception as e:
            error = _as_identity_error(e)
            logger.error(f"Password reset error: {error}")
            return GatewayResult.fail(error)

    def resend_verification(self, email: str | None = None) -> GatewayResult[None]:
        """
        Send the verification email again.

        The address of the current SDK session is used when there is one.
        Otherwise `email` is used: a sign-up that requires confirmation
        leaves no session, and resending only needs the address.

        Args:
            email: Address of the locally held Session

        Returns:
            Empty result; fails with code "session_missing" when neither a
            session nor `email` is available
        """
        try:
            session = self.client.auth.get_session()
            user = getattr(session, "user", None) if session is not None else None
            address = (user.email if user is not None else None) or email
            if not address:
                raise IdentityError("No user logged in", code=SESSION_MISSING)

            credentials: dict[str, Any] = {"type": "signup", "email": address}
            if self.redirect_url:
                credentials["options"] = {"email_redirect_to": self.redirect_url}

            self.client.auth.resend(credentials)
            return GatewayResult.ok()

        except Exception as e:
            error = _as_identity_error(e)
            logger.error(f"Email verification error: {error}")
            return GatewayResult.fail(error)

    def refresh_verification_status(self) -> GatewayResult[bool]:
        """
        Re-read the verification flag of the current remote user.

        Without an SDK session (sign-up pending confirmation, or a session
        that expired) the flag cannot be read and the result fails with code
        "login_required": the user has to log in once the link was clicked.
        """
        try:
            response = self.client.auth.get_user()
            if response is None or response.user is None:
                raise IdentityError(
                    "Please log in to finish verifying your email.", code=LOGIN_REQUIRED
                )

            verified = response.user.email_confirmed_at is not None
            return GatewayResult[bool].ok(verified)

        except Exception as e:
            error = _as_identity_error(e)
            logger.warning(f"Verification check error: {error}")
            return GatewayResult[bool].fail(error)

    def current_user(self) -> GatewayResult[IdentityUser]:
        """
        Read the user of the SDK's current session.

        Returns:
            Result carrying the user, or data=None when there is no remote session
        """
        try:
            session = self.client.auth.get_session()
            user = getattr(session, "user", None) if session is not None else None
            if user is None:
                return GatewayResult[IdentityUser].ok(None)
            return GatewayResult[IdentityUser].ok(IdentityUser.from_supabase(user))

        except Exception as e:
            error = _as_identity_error(e)
            logger.warning(f"Session lookup error: {error}")
            return GatewayResult[IdentityUser].fail(error)

    def confirm_email(
        self, token_hash: str, verification_type: str = "email"
    ) -> GatewayResult[IdentityUser]:
        """
        Apply the verification code carried by an email link.

        Args:
            token_hash: `token_hash` query parameter of the link
            verification_type: `type` query parameter ("email" or "signup")
        """
        try:
            response = self.client.auth.verify_otp(
                {"token_hash": token_hash, "type": verification_type}
            )
            if response.user is None:
                raise IdentityError(
                    "The verification link is invalid or has expired.", code="otp_expired"
                )

            user = IdentityUser.from_supabase(response.user)
            logger.info(f"Email verified for user {user.user_id}")
            return GatewayResult[IdentityUser].ok(user)

        except Exception as e:
            error = _as_identity_error(e)
            logger.warning(f"Email confirmation error: {error}")
            return GatewayResult[IdentityUser].fail(error)

    def subscribe(self, on_change: SessionListener) -> Callable[[], None]:
        """
        Register a listener for remote session transitions.

        The SDK callback is attached on first use and shared by every
        listener.

        Returns:
            Unsubscribe callable
        """
        if self._remote_subscription is None:
            self._remote_subscription = self.client.auth.on_auth_state_change(
                self._on_remote_change
            )
        return self.channel.subscribe(on_change)

    def close(self) -> None:
        """Detach from the SDK's auth state callback."""
        if self._remote_subscription is None:
            return
        try:
            self._remote_subscription.unsubscribe()
        except Exception as e:
            logger.warning(f"Failed to unsubscribe from auth state changes: {e}")
        self._remote_subscription = None

    def _on_remote_change(self, event: Any, session: Any) -> None:
        remote_event = getattr(event, "value", event)
        user = getattr(session, "user", None) if session is not None else None

        if user is not None:
            session_event = SessionEvent(
                kind=SessionEventKind.SIGNED_IN,
                user=IdentityUser.from_supabase(user),
                remote_event=str(remote_event),
            )
        else:
            session_event = SessionEvent(
                kind=SessionEventKind.SIGNED_OUT,
                remote_event=str(remote_event),
            )

        logger.debug(f"Auth state change {remote_event} -> {session_event.kind.value}")
        self.channel.publish(session_event)
