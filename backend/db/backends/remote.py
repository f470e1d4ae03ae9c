"""
db/backends/remote.py
---------------------
Remote mode: days live in a Redis hash, one JSON document per day id, and
every write publishes the day id on the collection's change channel
(key schema in db/redis_client.py).

Each subscriber gets its own pub/sub connection and listener thread.  On
every message the listener re-reads the whole hash and hands the snapshot
to the subscriber, so the consumer always sees server-confirmed state.
Writes never touch any local cache.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import redis

import config
from db.backends.base import (
    ErrorCallback,
    SnapshotCallback,
    SyncBackend,
    Unsubscribe,
    days_from_documents,
    encode_day,
    noop_unsubscribe,
)
from db.errors import SubscriptionError
from db.redis_client import change_channel, collection_key
from schemas.itinerary import Day

logger = logging.getLogger(__name__)


class RedisSyncBackend(SyncBackend):
    mode = "remote"

    def __init__(
        self,
        client: redis.Redis,
        project_id: str,
        collection: str = config.REMOTE_COLLECTION_NAME,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        super().__init__(on_error=on_error)
        self.client = client
        self.collection_key = collection_key(project_id, collection)
        self.channel = change_channel(project_id, collection)
        self._lock = threading.Lock()
        self._active: set[Any] = set()   # running PubSubWorkerThreads
        self._failed: set[Any] = set()

    def read_snapshot(self) -> list[Day]:
        documents = self.client.hgetall(self.collection_key)
        return days_from_documents(documents.values())

    def subscribe(self, on_change: SnapshotCallback) -> Unsubscribe:
        """
        Register a listener and deliver the current snapshot.

        If registration fails the error is reported once through
        ``on_error`` and a no-op unsubscribe is returned.
        """
        def handle_message(message: dict) -> None:
            on_change(self.read_snapshot())

        pubsub = self.client.pubsub(ignore_subscribe_messages=True)
        try:
            pubsub.subscribe(**{self.channel: handle_message})
            initial = self.read_snapshot()
        except redis.RedisError as exc:
            self._release(pubsub)
            self._report(SubscriptionError(f"listening on {self.channel} failed: {exc}"))
            return noop_unsubscribe

        on_change(initial)
        worker = pubsub.run_in_thread(
            sleep_time=config.SYNC_LISTENER_POLL_SECONDS,
            daemon=True,
            exception_handler=self._listener_failed,
        )
        with self._lock:
            if worker not in self._failed:
                self._active.add(worker)

        stopped = False

        def unsubscribe() -> None:
            nonlocal stopped
            with self._lock:
                if stopped:
                    return
                stopped = True
                self._active.discard(worker)
            worker.stop()

        return unsubscribe

    def close(self) -> None:
        with self._lock:
            workers, self._active = list(self._active), set()
        for worker in workers:
            worker.stop()
        super().close()

    # ── writes ────────────────────────────────────────────────────────────

    def _save(self, day: Day) -> None:
        pipe = self.client.pipeline(transaction=True)
        pipe.hset(self.collection_key, day.id, encode_day(day))
        pipe.publish(self.channel, day.id)
        pipe.execute()

    def _delete(self, day_id: str) -> None:
        pipe = self.client.pipeline(transaction=True)
        pipe.hdel(self.collection_key, day_id)
        pipe.publish(self.channel, day_id)
        pipe.execute()

    # ── internals ─────────────────────────────────────────────────────────

    def _release(self, pubsub: Any) -> None:
        try:
            pubsub.close()
        except redis.RedisError as exc:
            logger.debug("closing pub/sub on %s failed: %s", self.channel, exc)

    def _listener_failed(self, exc: BaseException, pubsub: Any, worker: Any) -> None:
        """Report once and stop this subscription; others keep running."""
        with self._lock:
            if worker in self._failed:
                return
            self._failed.add(worker)
            self._active.discard(worker)
        self._report(SubscriptionError(f"listener on {self.channel} stopped: {exc}"))
        worker.stop()
