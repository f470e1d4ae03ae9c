"""
db/local_store.py
-----------------
Durable key-value store on the local filesystem — one file per key.

Usage:
    from db.local_store import LocalKeyValueStore

    store = LocalKeyValueStore("/var/lib/planner")
    store.set("beijing_travel_data", "[]")
    store.get("beijing_travel_data")   # -> "[]"

Writes go to a temp file in the same directory and are moved into place, so
a crash mid-write never leaves a half-written value behind.  There is no
locking between processes: concurrent writers are last-write-wins.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

import config

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.\-]+$")


class LocalKeyValueStore:
    """String values keyed by name, persisted under ``root``."""

    def __init__(self, root: Path | str | None = None) -> None:
        self._root = Path(root) if root else Path(config.LOCAL_STORE_DIR)

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        os.makedirs(self._root, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass

    # ── internals ─────────────────────────────────────────────────────────

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"invalid storage key: {key!r}")
        return self._root / f"{key}.json"
