"""Local store for the current user's session."""

import logging

from pydantic import ValidationError

from tasktrack.state.models import Session
from tasktrack.state.persistence import JsonStateStorage

logger = logging.getLogger(__name__)

AUTH_STORAGE_KEY = "auth-storage"


class AuthState:
    """
    Holds the current Session and saves it on every mutation.

    The store performs no validation: callers hand it consistent values.
    Only the UI layer and the session synchronizer write to it, and the last
    write wins.

    Example:
        >>> state = AuthState()
        >>> state.set_auth("u1", "me@example.com", False)
        >>> state.is_authenticated
        True
        >>> state.clear_auth()
        >>> state.user_id is None
        True
    """

    def __init__(self, storage: JsonStateStorage | None = None) -> None:
        self._storage = storage
        self._session = self._load()

    def _load(self) -> Session:
        if self._storage is None:
            return Session()

        data = self._storage.load()
        if data is None:
            return Session()

        try:
            session = Session.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable auth snapshot: {e}")
            return Session()

        # Anything that claims to be anonymous is the empty form.
        if not session.is_authenticated:
            return Session()
        return session

    def _save(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.save(self._session.model_dump(mode="json"))
        except OSError as e:
            logger.warning(f"Failed to persist auth state: {e}")

    # Actions

    def set_auth(self, user_id: str, email: str, is_email_verified: bool) -> None:
        """Replace the session wholesale and mark it authenticated."""
        self._session = Session(
            user_id=user_id,
            email=email,
            is_authenticated=True,
            is_email_verified=is_email_verified,
        )
        self._save()

    def clear_auth(self) -> None:
        """Reset the session to its empty form."""
        self._session = Session()
        self._save()

    def set_email_verified(self, is_verified: bool) -> None:
        """Update only the verification flag."""
        self._session = self._session.model_copy(update={"is_email_verified": is_verified})
        self._save()

    # Getters

    @property
    def session(self) -> Session:
        return self._session.model_copy()

    @property
    def user_id(self) -> str | None:
        return self._session.user_id

    @property
    def email(self) -> str | None:
        return self._session.email

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def is_email_verified(self) -> bool:
        return self._session.is_email_verified
