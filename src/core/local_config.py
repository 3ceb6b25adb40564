"""Durable key-value configuration persisted to a local JSON file."""

import json
import logging
import threading
from pathlib import Path

from src.core.config import constants, settings


logger = logging.getLogger(__name__)


class LocalConfigStore:
    """Thread-safe string key-value store that survives restarts.

    Holds the active foreman identity and the backend endpoint override.
    Every write is flushed to disk immediately.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize the store, loading any existing file."""
        self._path = Path(path or settings.local_config_path)
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("local_config_unreadable", extra={"path": str(self._path), "error": str(e)})
            return
        if isinstance(raw, dict):
            self._data = {str(k): str(v) for k, v in raw.items() if v is not None}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> str | None:
        """Return the stored value for key, or None."""
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store value under key and persist."""
        with self._lock:
            self._data[key] = value
            self._flush()
        logger.debug("local_config_set", extra={"key": key})

    def delete(self, key: str) -> None:
        """Remove key if present and persist."""
        with self._lock:
            if key not in self._data:
                return
            del self._data[key]
            self._flush()
        logger.debug("local_config_delete", extra={"key": key})

    def clear(self) -> None:
        """Remove every key."""
        with self._lock:
            self._data.clear()
            self._flush()


def resolve_script_url(store: LocalConfigStore) -> str:
    """Stored endpoint override if it points at Apps Script, else the configured fallback."""
    stored = store.get(constants.SCRIPT_URL_KEY)
    if stored and stored.startswith(constants.SCRIPT_URL_PREFIX):
        return stored
    return settings.sheet_script_url
