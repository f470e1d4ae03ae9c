"""
db/backends/base.py
-------------------
The capability set shared by both persistence backends:

    subscribe(on_change) -> unsubscribe
    save(day)            -> Future[None]
    delete(day_id)       -> Future[None]

``subscribe`` delivers the full collection once, promptly, and again on every
change.  ``save`` upserts by id; ``delete`` of an absent id is a no-op.
Writes run in issue order on one backend-owned writer thread so callers never
block and a later edit of a day always lands after an earlier one.  A failed
write resolves its future with BackendWriteError and is not retried.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, Optional

from db.errors import BackendWriteError, SyncError
from schemas.itinerary import Day

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list[Day]], None]
Unsubscribe = Callable[[], None]
ErrorCallback = Callable[[SyncError], None]


def noop_unsubscribe() -> None:
    """Returned when there is nothing to tear down."""


def days_from_documents(documents: Iterable[Any]) -> list[Day]:
    """
    Decode stored day documents (dicts or JSON strings) into Days.

    A malformed document is logged and skipped so a single bad entry never
    blanks the whole collection.
    """
    days: list[Day] = []
    for doc in documents:
        try:
            data = json.loads(doc) if isinstance(doc, (str, bytes)) else doc
            days.append(Day.from_dict(data))
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("skipping malformed day document: %s", exc)
    return days


def encode_day(day: Day) -> str:
    return json.dumps(day.to_dict(), ensure_ascii=False)


class SyncBackend(ABC):
    """Base class of the remote and local backends."""

    mode: str = ""

    def __init__(self, on_error: Optional[ErrorCallback] = None) -> None:
        self._on_error = on_error
        # single worker: writes leave in the order they were issued
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=f"{self.mode or 'sync'}-writer",
        )

    # ── public API ────────────────────────────────────────────────────────

    @abstractmethod
    def subscribe(self, on_change: SnapshotCallback) -> Unsubscribe:
        """Deliver the full collection now and on every change."""

    def save(self, day: Day) -> "Future[None]":
        return self._submit("save", day.id, self._save, day)

    def delete(self, day_id: str) -> "Future[None]":
        return self._submit("delete", day_id, self._delete, day_id)

    def close(self) -> None:
        """Wait for in-flight writes, then release the writer thread."""
        self._executor.shutdown(wait=True)

    # ── hooks ─────────────────────────────────────────────────────────────

    @abstractmethod
    def _save(self, day: Day) -> None:
        ...

    @abstractmethod
    def _delete(self, day_id: str) -> None:
        ...

    # ── internals ─────────────────────────────────────────────────────────

    def _submit(self, operation: str, day_id: str, fn: Callable[..., None], *args: Any) -> "Future[None]":
        def run() -> None:
            try:
                fn(*args)
            except SyncError:
                raise
            except Exception as exc:
                raise BackendWriteError(operation, day_id, exc) from exc
            logger.debug("%s %s of day %s done", self.mode, operation, day_id)

        return self._executor.submit(run)

    def _report(self, error: SyncError) -> None:
        logger.warning("%s backend: %s", self.mode, error)
        if self._on_error is not None:
            self._on_error(error)
