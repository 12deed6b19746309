"""Authentication feature: registration, login, logout and email verification."""

from tasktrack.features.auth.handlers import router

__all__ = ["router"]
