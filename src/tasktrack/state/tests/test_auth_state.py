"""Tests for the local session store."""

import json
from pathlib import Path

from tasktrack.state import AUTH_STORAGE_KEY, AuthState, JsonStateStorage, Session


class TestAuthStateActions:
    """Tests for AuthState mutations."""

    def test_starts_anonymous(self) -> None:
        """Test a fresh store holds the empty session."""
        state = AuthState()

        assert state.session == Session()
        assert state.user_id is None
        assert state.email is None
        assert state.is_authenticated is False
        assert state.is_email_verified is False

    def test_set_auth_marks_authenticated(self) -> None:
        """Test set_auth replaces the session and sets is_authenticated."""
        state = AuthState()
        state.set_auth("u1", "me@example.com", False)

        assert state.user_id == "u1"
        assert state.email == "me@example.com"
        assert state.is_authenticated is True
        assert state.is_email_verified is False

    def test_set_auth_replaces_wholesale(self) -> None:
        """Test a second set_auth overwrites every field."""
        state = AuthState()
        state.set_auth("u1", "one@example.com", True)
        state.set_auth("u2", "two@example.com", False)

        assert state.session == Session(
            user_id="u2",
            email="two@example.com",
            is_authenticated=True,
            is_email_verified=False,
        )

    def test_clear_auth_returns_empty_form(self) -> None:
        """Test set_auth followed by clear_auth yields the exact empty session."""
        state = AuthState()
        state.set_auth("u1", "me@example.com", True)
        state.clear_auth()

        assert state.user_id is None
        assert state.email is None
        assert state.is_authenticated is False
        assert state.is_email_verified is False

    def test_set_email_verified_changes_only_flag(self) -> None:
        """Test set_email_verified leaves identity fields untouched."""
        state = AuthState()
        state.set_auth("u1", "me@example.com", False)
        state.set_email_verified(True)

        assert state.is_email_verified is True
        assert state.user_id == "u1"
        assert state.email == "me@example.com"
        assert state.is_authenticated is True

    def test_session_is_a_copy(self) -> None:
        """Test mutating the returned session does not change the store."""
        state = AuthState()
        state.set_auth("u1", "me@example.com", False)

        snapshot = state.session
        snapshot.user_id = "someone-else"

        assert state.user_id == "u1"


class TestAuthStatePersistence:
    """Tests for saving and restoring the session."""

    def test_session_survives_reload(self, tmp_path: Path) -> None:
        """Test a new store over the same storage restores the session."""
        storage = JsonStateStorage.for_key(tmp_path, AUTH_STORAGE_KEY)
        AuthState(storage).set_auth("u1", "me@example.com", True)

        restored = AuthState(JsonStateStorage.for_key(tmp_path, AUTH_STORAGE_KEY))

        assert restored.user_id == "u1"
        assert restored.email == "me@example.com"
        assert restored.is_authenticated is True
        assert restored.is_email_verified is True

    def test_clear_auth_is_persisted(self, tmp_path: Path) -> None:
        """Test clearing the session is also saved."""
        storage = JsonStateStorage.for_key(tmp_path, AUTH_STORAGE_KEY)
        state = AuthState(storage)
        state.set_auth("u1", "me@example.com", True)
        state.clear_auth()

        assert storage.load() == Session().model_dump()
        assert AuthState(storage).is_authenticated is False

    def test_missing_fields_default(self, tmp_path: Path) -> None:
        """Test a legacy snapshot without the verification flag loads as unverified."""
        path = tmp_path / f"{AUTH_STORAGE_KEY}.json"
        path.write_text(
            json.dumps({"user_id": "u1", "email": "me@example.com", "is_authenticated": True}),
            encoding="utf-8",
        )

        state = AuthState(JsonStateStorage(path))

        assert state.user_id == "u1"
        assert state.is_authenticated is True
        assert state.is_email_verified is False

    def test_anonymous_snapshot_is_normalized(self, tmp_path: Path) -> None:
        """Test a snapshot claiming to be anonymous restores as the empty form."""
        path = tmp_path / f"{AUTH_STORAGE_KEY}.json"
        path.write_text(
            json.dumps({"user_id": "u1", "is_authenticated": False, "is_email_verified": True}),
            encoding="utf-8",
        )

        state = AuthState(JsonStateStorage(path))

        assert state.session == Session()

    def test_corrupt_snapshot_falls_back_to_empty(self, tmp_path: Path) -> None:
        """Test unreadable JSON yields the empty session instead of failing."""
        path = tmp_path / f"{AUTH_STORAGE_KEY}.json"
        path.write_text("{not json", encoding="utf-8")

        state = AuthState(JsonStateStorage(path))

        assert state.session == Session()

    def test_invalid_field_types_fall_back_to_empty(self, tmp_path: Path) -> None:
        """Test a snapshot with wrong field types is discarded."""
        path = tmp_path / f"{AUTH_STORAGE_KEY}.json"
        path.write_text(json.dumps({"is_authenticated": {"nested": True}}), encoding="utf-8")

        state = AuthState(JsonStateStorage(path))

        assert state.session == Session()
