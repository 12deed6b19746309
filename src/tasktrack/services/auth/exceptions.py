"""Custom exceptions for the identity boundary."""

from tasktrack.services.results import GatewayError


class IdentityError(GatewayError):
    """Raised when an identity operation fails (bad credentials, weak password, no session, etc.)."""

    kind = "identity"
