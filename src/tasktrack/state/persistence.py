"""Durable local storage for store snapshots (the app's "local storage")."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonStateStorage:
    """
    One keyed JSON record on disk.

    Each store owns one instance and saves its full snapshot on every
    mutation. Snapshots are flat and versionless; readers are expected to
    tolerate missing or unknown fields.

    Writes go to a temporary file in the same directory and are moved into
    place, so a reader never sees a half-written snapshot.

    Example:
        >>> storage = JsonStateStorage.for_key(Path(".local/tasktrack"), "auth-storage")
        >>> storage.save({"user_id": "u1"})
        >>> storage.load()
        {'user_id': 'u1'}
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    @classmethod
    def for_key(cls, state_dir: str | Path, key: str) -> "JsonStateStorage":
        """Build the storage for `key` inside `state_dir` (`<state_dir>/<key>.json`)."""
        return cls(Path(state_dir) / f"{key}.json")

    def load(self) -> dict[str, Any] | None:
        """
        Read the stored snapshot.

        Returns:
            The snapshot dictionary, or None if nothing usable is stored
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read state from {self.path}: {e}")
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt state in {self.path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object state in {self.path}")
            return None
        return data

    def save(self, data: dict[str, Any]) -> None:
        """
        Replace the stored snapshot.

        Raises:
            OSError: If the snapshot cannot be written
        """
        payload = json.dumps(data, ensure_ascii=False, default=str)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
