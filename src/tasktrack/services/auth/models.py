"""Data models for authentication."""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class IdentityUser(BaseModel):
    """
    User data returned by the identity service.

    Attributes:
        user_id: Supabase user ID
        email: Account email
        display_name: Name given at registration (stored in user metadata)
        is_email_verified: Whether the email address has been confirmed
        has_session: Whether the call that produced the user left a remote session

    Example:
        >>> user = IdentityUser(
        ...     user_id="123e4567-e89b-12d3-a456-426614174000",
        ...     email="user@example.com",
        ...     display_name="Jane Doe",
        ...     is_email_verified=False,
        ... )
    """

    user_id: str
    email: str
    display_name: str | None = None
    is_email_verified: bool = False
    has_session: bool = True

    @classmethod
    def from_supabase(cls, user: Any) -> "IdentityUser":
        """Build from a Supabase `User` object."""
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            user_id=str(user.id),
            email=user.email or "",
            display_name=metadata.get("display_name") or metadata.get("full_name"),
            is_email_verified=getattr(user, "email_confirmed_at", None) is not None,
        )


class SessionEventKind(str, Enum):
    """Remote session transitions."""

    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


class SessionEvent(BaseModel):
    """A remote session appearing (or being refreshed) or disappearing."""

    kind: SessionEventKind
    user: IdentityUser | None = None
    remote_event: str | None = None
