"""
modules/sync/coordinator.py
---------------------------
ItineraryCoordinator — the in-memory view of all days for one session, kept
in step with whichever backend db.selector picked.

Optimistic writes:
    Every mutation changes memory first, synchronously, then hands a whole
    Day to the backend.  The returned future is tracked; a failure is logged
    and passed to ``on_error`` but memory is NOT rolled back.  The next
    snapshot from the backend overwrites memory either way.

Snapshots:
    Whatever the backend delivers replaces the in-memory list outright.  An
    edit made after the last save but before that snapshot lands can be
    briefly overwritten (single-user race, accepted).

Local mode:
    The coordinator also listens for config.LOCAL_CHANGE_EVENT on the
    broadcaster and re-reads through ``backend.subscribe`` each time.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future, wait
from datetime import date
from typing import Callable, Optional

import config
from db.backends.base import SyncBackend, Unsubscribe
from db.broadcast import ChangeBroadcaster
from schemas.itinerary import Activity, ActivityType, Day, Transport, new_activity, new_day

logger = logging.getLogger(__name__)

WriteErrorCallback = Callable[[BaseException], None]


class DayNotFoundError(KeyError):
    """No day with the requested id is in memory."""


class ActivityNotFoundError(KeyError):
    """The day has no activity with the requested id."""


class ItineraryCoordinator:

    def __init__(
        self,
        backend: SyncBackend,
        broadcaster: Optional[ChangeBroadcaster] = None,
        on_error: Optional[WriteErrorCallback] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._backend = backend
        self._broadcaster = broadcaster
        self._on_error = on_error
        self._today = today

        self._lock = threading.RLock()
        self._days: list[Day] = []
        self._current_day_id: Optional[str] = None
        self._loading = True
        self._pending: set[Future] = set()
        self.write_errors: deque[BaseException] = deque(maxlen=config.SYNC_ERROR_HISTORY)

        self._unsubscribe: Optional[Unsubscribe] = None
        self._unlisten: Optional[Unsubscribe] = None

    # ── lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._backend.subscribe(self._apply_snapshot)
        if self._broadcaster is not None:
            self._unlisten = self._broadcaster.subscribe(
                config.LOCAL_CHANGE_EVENT, self._reload
            )

    def stop(self) -> None:
        """Stop receiving updates.  Safe to call more than once."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        unlisten, self._unlisten = self._unlisten, None
        if unsubscribe is not None:
            unsubscribe()
        if unlisten is not None:
            unlisten()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every write issued so far has settled.  True if all did."""
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    # ── read side ─────────────────────────────────────────────────────────

    @property
    def days(self) -> list[Day]:
        """Current days in backend order."""
        with self._lock:
            return list(self._days)

    def days_by_date(self) -> list[Day]:
        """Days ordered by calendar date (sidebar / calendar order)."""
        return sorted(self.days, key=lambda d: d.date)

    @property
    def loading(self) -> bool:
        """True until the first snapshot arrives."""
        return self._loading

    @property
    def current_day_id(self) -> Optional[str]:
        return self._current_day_id

    @property
    def current_day(self) -> Optional[Day]:
        with self._lock:
            if self._current_day_id is None:
                return None
            return self._find(self._current_day_id)

    def get_day(self, day_id: str) -> Day:
        with self._lock:
            day = self._find(day_id)
        if day is None:
            raise DayNotFoundError(day_id)
        return day

    def select_day(self, day_id: Optional[str]) -> None:
        if day_id is not None:
            self.get_day(day_id)
        self._current_day_id = day_id

    def pending_writes(self) -> int:
        with self._lock:
            return len(self._pending)

    # ── mutations ─────────────────────────────────────────────────────────

    def update_day(self, day: Day) -> "Future[None]":
        with self._lock:
            for i, existing in enumerate(self._days):
                if existing.id == day.id:
                    self._days[i] = day
                    break
            else:
                self._days.append(day)
        return self._track("save", day.id, self._backend.save(day))

    def delete_day(self, day_id: str) -> "Future[None]":
        with self._lock:
            self._days = [d for d in self._days if d.id != day_id]
            if not self._days:
                self._current_day_id = None
            elif self._current_day_id == day_id:
                self._current_day_id = self._days[0].id
        return self._track("delete", day_id, self._backend.delete(day_id))

    def add_day(self) -> Day:
        day = new_day(self._today())
        with self._lock:
            self._days.append(day)
            self._current_day_id = day.id
        self._track("save", day.id, self._backend.save(day))
        return day

    def change_date(self, day_id: str, new_date: str) -> Day:
        date.fromisoformat(new_date)
        day = self.get_day(day_id)
        updated = Day(id=day.id, date=new_date, activities=list(day.activities))
        self.update_day(updated)
        return updated

    def add_activity(self, day_id: str, activity_type: ActivityType) -> Activity:
        activity = new_activity(activity_type)
        self.update_day(self.get_day(day_id).with_activity_added(activity))
        return activity

    def update_activity(self, day_id: str, activity: Activity) -> Day:
        day = self.get_day(day_id).with_activity_replaced(activity)
        self.update_day(day)
        return day

    def delete_activity(self, day_id: str, activity_id: str) -> Day:
        day = self.get_day(day_id).with_activity_removed(activity_id)
        self.update_day(day)
        return day

    def set_transport(self, day_id: str, activity_id: str, transport: Optional[Transport]) -> Activity:
        """Attach (or with None, remove) the journey leading to an activity."""
        day = self.get_day(day_id)
        activity = day.find_activity(activity_id)
        if activity is None:
            raise ActivityNotFoundError(activity_id)
        if transport is None:
            activity = activity.without_transport()
        else:
            activity = activity.with_transport(transport)
        self.update_day(day.with_activity_replaced(activity))
        return activity

    # ── internals ─────────────────────────────────────────────────────────

    def _find(self, day_id: str) -> Optional[Day]:
        return next((d for d in self._days if d.id == day_id), None)

    def _apply_snapshot(self, days: list[Day]) -> None:
        with self._lock:
            self._days = list(days)
            self._loading = False
            if self._current_day_id is None and self._days:
                self._current_day_id = self._days[0].id
        logger.debug("snapshot applied: %d day(s)", len(days))

    def _reload(self) -> None:
        unsubscribe = self._backend.subscribe(self._apply_snapshot)
        unsubscribe()

    def _track(self, operation: str, day_id: str, future: "Future[None]") -> "Future[None]":
        with self._lock:
            self._pending.add(future)

        def settled(f: "Future[None]") -> None:
            with self._lock:
                self._pending.discard(f)
            exc = f.exception()
            if exc is None:
                return
            logger.warning("%s of day %s failed, keeping local copy: %s", operation, day_id, exc)
            with self._lock:
                self.write_errors.append(exc)
            if self._on_error is not None:
                self._on_error(exc)

        future.add_done_callback(settled)
        return future
