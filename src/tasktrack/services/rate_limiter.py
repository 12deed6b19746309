"""Rate limiting service for API endpoints."""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from tasktrack.config import settings
from tasktrack.state import Session

logger = logging.getLogger(__name__)


def get_user_id_or_ip(request: Request) -> str:
    """
    Extract the session user ID or fall back to the client IP address.

    - Signed-in requests: rate limited per user ID
    - Anonymous requests (login, register, password reset): per IP address

    Args:
        request: FastAPI request object

    Returns:
        Rate limit key
    """
    # Set by the require_session dependency
    session: Session | None = getattr(request.state, "session", None)

    if session and session.user_id:
        return f"user:{session.user_id}"

    return f"ip:{get_remote_address(request)}"


# In-memory storage: the app is single-tenant and runs as one process
limiter = Limiter(
    key_func=get_user_id_or_ip,
    default_limits=[],
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)


class RateLimitTiers:
    """Rate limit tiers for different endpoint categories."""

    # Reads of local state
    DEFAULT = ["100 per minute", "1000 per hour"]

    # Operations that write to the remote store
    WRITE = ["30 per minute", "200 per hour"]

    # Credential and email-sending operations
    AUTH = ["10 per minute", "50 per hour"]


# Note: decorated endpoints must take a 'request: Request' parameter (slowapi requirement)
default_rate_limit = limiter.limit(";".join(RateLimitTiers.DEFAULT))
write_rate_limit = limiter.limit(";".join(RateLimitTiers.WRITE))
auth_rate_limit = limiter.limit(";".join(RateLimitTiers.AUTH))
