"""
db/broadcast.py
---------------
In-process publish/subscribe channel for payload-less "changed" signals.

The local file store cannot be watched, so the local backend publishes
``config.LOCAL_CHANGE_EVENT`` after every write and any listener in the
process re-reads the store.

Usage:
    from db.broadcast import ChangeBroadcaster

    bus = ChangeBroadcaster()
    unsubscribe = bus.subscribe("local-storage-updated", refresh)
    bus.publish("local-storage-updated")
    unsubscribe()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeBroadcaster:
    """Fire-and-forget named signals with no payload."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it (idempotent)."""
        with self._lock:
            self._listeners.setdefault(event, []).append(listener)

        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            with self._lock:
                if removed:
                    return
                removed = True
                listeners = self._listeners.get(event, [])
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def publish(self, event: str) -> int:
        """
        Call every listener of ``event`` synchronously, in registration order.

        A failing listener is logged and does not stop the others.  Returns
        the number of listeners notified.
        """
        with self._lock:
            listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("listener for %r failed", event)
        return len(listeners)

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(event, []))
