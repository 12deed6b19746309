"""Identity boundary: Supabase auth gateway, session events and route guards."""

from tasktrack.services.auth.events import SessionEventChannel
from tasktrack.services.auth.exceptions import IdentityError
from tasktrack.services.auth.gateway import AuthGateway
from tasktrack.services.auth.models import IdentityUser, SessionEvent, SessionEventKind
from tasktrack.services.auth.session_sync import SessionSynchronizer

__all__ = [
    "AuthGateway",
    "IdentityError",
    "IdentityUser",
    "SessionEvent",
    "SessionEventChannel",
    "SessionEventKind",
    "SessionSynchronizer",
]
