"""
db/
----
Persistence layer for the itinerary planner.

Storage architecture (one is chosen per process by db.selector):
  Redis (redis-py) — remote real-time store
    {project}:travel_plans           hash, field = day id, value = Day JSON
    {project}:travel_plans:changed   pub/sub channel, published on every write
    schema: db/redis_client.py

  Local file store — durable single-blob store
    <LOCAL_STORE_DIR>/beijing_travel_data.json   JSON array of Days
    change signal: "local-storage-updated" on a ChangeBroadcaster

Public exports (import from here for convenience):
    from db import get_backend, select_backend, SyncBackend
"""

from db.backends.base import SyncBackend
from db.broadcast import ChangeBroadcaster
from db.errors import BackendUnavailableError, BackendWriteError, SubscriptionError, SyncError
from db.redis_client import RemoteCredentials
from db.selector import BackendSelection, get_backend, reset_backend, select_backend

__all__ = [
    "SyncBackend",
    "ChangeBroadcaster",
    "SyncError",
    "BackendUnavailableError",
    "BackendWriteError",
    "SubscriptionError",
    "RemoteCredentials",
    "BackendSelection",
    "get_backend",
    "reset_backend",
    "select_backend",
]
