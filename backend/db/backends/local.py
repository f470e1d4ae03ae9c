"""
db/backends/local.py
--------------------
Local mode: the whole collection is one JSON array stored under
``config.LOCAL_STORAGE_KEY`` in a LocalKeyValueStore.

The file store is not observable.  After every save/delete the backend
publishes ``config.LOCAL_CHANGE_EVENT`` on its ChangeBroadcaster; listeners
re-read through ``subscribe``.

Writes are serialised through a single writer thread.  Two backend
instances (or two processes) sharing one store are still last-write-wins
on the blob.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Optional

import config
from db.backends.base import (
    ErrorCallback,
    SnapshotCallback,
    SyncBackend,
    Unsubscribe,
    days_from_documents,
    noop_unsubscribe,
)
from db.broadcast import ChangeBroadcaster
from db.local_store import LocalKeyValueStore
from schemas.itinerary import Day, seed_days

logger = logging.getLogger(__name__)


class CorruptStoreError(ValueError):
    """The stored blob is not a JSON array of days."""


class LocalStoreBackend(SyncBackend):
    mode = "local"

    def __init__(
        self,
        store: Optional[LocalKeyValueStore] = None,
        broadcaster: Optional[ChangeBroadcaster] = None,
        key: str = config.LOCAL_STORAGE_KEY,
        seed: Callable[[], list[Day]] = seed_days,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        super().__init__(on_error=on_error)
        self.store = store or LocalKeyValueStore()
        self.broadcaster = broadcaster or ChangeBroadcaster()
        self.key = key
        self._seed = seed

    def subscribe(self, on_change: SnapshotCallback) -> Unsubscribe:
        """
        One synchronous read.  First run writes and delivers the seed; a
        corrupt blob delivers the seed and leaves the stored bytes alone.
        """
        on_change(self._load_or_seed())
        return noop_unsubscribe

    def read_snapshot(self) -> list[Day]:
        return self._load_or_seed()

    # ── writes ────────────────────────────────────────────────────────────

    def _save(self, day: Day) -> None:
        days = self._read_for_update()
        for i, existing in enumerate(days):
            if existing.id == day.id:
                days[i] = day
                break
        else:
            days.append(day)
        self._write(days)
        self._notify()

    def _delete(self, day_id: str) -> None:
        days = self._read_for_update()
        remaining = [d for d in days if d.id != day_id]
        if len(remaining) != len(days):
            self._write(remaining)
        self._notify()

    # ── internals ─────────────────────────────────────────────────────────

    def _load_or_seed(self) -> list[Day]:
        raw = self.store.get(self.key)
        if raw is None:
            seed = self._seed()
            self._write(seed)
            logger.info("local store empty, seeded %d day(s)", len(seed))
            return seed
        try:
            return self._decode(raw)
        except CorruptStoreError as exc:
            logger.error("local store %r unreadable, using defaults: %s", self.key, exc)
            return self._seed()

    def _read_for_update(self) -> list[Day]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            return self._decode(raw)
        except CorruptStoreError as exc:
            logger.error("local store %r unreadable, overwriting: %s", self.key, exc)
            return []

    @staticmethod
    def _decode(raw: str) -> list[Day]:
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise CorruptStoreError(str(exc)) from exc
        if not isinstance(data, list):
            raise CorruptStoreError(f"expected a JSON array, got {type(data).__name__}")
        return days_from_documents(data)

    def _write(self, days: list[Day]) -> None:
        blob = json.dumps([d.to_dict() for d in days], ensure_ascii=False)
        self.store.set(self.key, blob)

    def _notify(self) -> None:
        self.broadcaster.publish(config.LOCAL_CHANGE_EVENT)
