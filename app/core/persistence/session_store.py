"""
Purpose: Durable client-side key/value storage for the active session id.
Why: Reopen the same conversation after a reload or restart.

What is inside:
InMemoryKeyValueStore with get/set/delete (tests, throwaway sessions).
JsonFileKeyValueStore persisting a flat JSON object (default
~/.healthspark/state.json).
SessionIdStore: load/save/clear of "chatSessionId", namespaced per browser client.

Testing:
In-memory: simple state tests.
JSON file: tmp_path fixture; missing and corrupt file handling.
"""

from __future__ import annotations
import json
import logging
import os
import re
import threading
import uuid
from pathlib import Path
from typing import Optional

from ..interfaces import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "chatSessionId"

# Streamlit runs each browser session in its own script thread.
_lock = threading.RLock()

_CLIENT_ID = re.compile(r"^[0-9a-f]{32}$")


def ensure_client_id(candidate: Optional[str]) -> str:
    """Keep a well-formed browser client id, or mint a fresh one."""
    if candidate and _CLIENT_ID.match(candidate):
        return candidate
    return uuid.uuid4().hex


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Flat string map kept in a single JSON file, rewritten on every change."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        """Temp file plus os.replace; readers never see a partial write."""
        self.path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        tmp = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp, self.path)
        finally:
            if tmp.exists():
                tmp.unlink()

    def get(self, key: str) -> Optional[str]:
        with _lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with _lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> None:
        with _lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)


class SessionIdStore:
    """
    The persisted session id for one client identity. Each browser gets its
    own `client_id`, stored under "chatSessionId:<client_id>"; without one the
    bare "chatSessionId" key is used (single-user setups, tests).
    """

    def __init__(
        self,
        backend: KeyValueStore,
        client_id: Optional[str] = None,
        *,
        key: str = SESSION_ID_KEY,
    ) -> None:
        self._backend = backend
        self.client_id = client_id
        self.key = f"{key}:{client_id}" if client_id else key

    def load(self) -> Optional[str]:
        """Persisted id, or None; an empty string counts as absent."""
        return self._backend.get(self.key) or None

    def save(self, session_id: str) -> None:
        if not session_id:
            raise ValueError("session_id must be non-empty")
        self._backend.set(self.key, session_id)

    def clear(self) -> None:
        self._backend.delete(self.key)
