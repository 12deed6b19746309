"""Disk-backed session storage for the Supabase auth client."""

import logging
from pathlib import Path

from tasktrack.state.persistence import JsonStateStorage

logger = logging.getLogger(__name__)

SDK_SESSION_STORAGE_KEY = "supabase-session"


class SupabaseSessionStorage:
    """
    Keeps the Supabase SDK's session (access and refresh tokens) in the state directory.

    Implements the SDK's synchronous storage interface (`get_item`,
    `set_item`, `remove_item`) so it can be passed as
    `ClientOptions(storage=...)`. The SDK session then survives a restart
    together with the locally stored Session.

    Snapshots are written through JsonStateStorage, whose temporary files
    are created owner-readable only.

    Example:
        >>> storage = SupabaseSessionStorage.for_dir(Path(".local/tasktrack"))
        >>> options = ClientOptions(storage=storage)
    """

    def __init__(self, storage: JsonStateStorage) -> None:
        self._storage = storage

    @classmethod
    def for_dir(cls, state_dir: str | Path) -> "SupabaseSessionStorage":
        return cls(JsonStateStorage.for_key(state_dir, SDK_SESSION_STORAGE_KEY))

    def get_item(self, key: str) -> str | None:
        value = (self._storage.load() or {}).get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._storage.load() or {}
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._storage.load() or {}
        if data.pop(key, None) is not None:
            self._write(data)

    def _write(self, data: dict[str, str]) -> None:
        try:
            self._storage.save(data)
        except OSError as e:
            logger.warning(f"Failed to persist Supabase session: {e}")
