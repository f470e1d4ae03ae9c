"""
db/redis_client.py
-------------------
redis-py client construction plus the key schema of the remote collection.

Key schemas:

  1. {project_id}:{collection}
       Type : Hash
       Field: day id
       Value: the Day's JSON document (camelCase, see schemas/itinerary.py)

  2. {project_id}:{collection}:changed
       Type : Pub/Sub channel
       Msg  : the id of the day that was written or deleted
       Every save/delete publishes here; subscribers re-read key 1 in full.

Environment variables (set in config.py):
    SYNC_REMOTE_URL        e.g. redis://host:6379/0
    SYNC_API_KEY           sent as the Redis password
    SYNC_PROJECT_ID        key namespace
    SYNC_CONNECT_TIMEOUT   default: 5 (seconds)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import redis

import config
from db.errors import BackendUnavailableError


@dataclass(frozen=True)
class RemoteCredentials:
    """Settings needed to reach the remote store.  All three are required."""
    url: str = ""
    api_key: str = ""
    project_id: str = ""

    @classmethod
    def from_config(cls) -> "RemoteCredentials":
        return cls(
            url=config.SYNC_REMOTE_URL,
            api_key=config.SYNC_API_KEY,
            project_id=config.SYNC_PROJECT_ID,
        )

    @property
    def is_complete(self) -> bool:
        """True only when every field is non-empty (there is no partial mode)."""
        return all(v.strip() for v in (self.url, self.api_key, self.project_id))


# ── Key schema ────────────────────────────────────────────────────────────────

def collection_key(project_id: str, collection: str = config.REMOTE_COLLECTION_NAME) -> str:
    return f"{project_id}:{collection}"


def change_channel(project_id: str, collection: str = config.REMOTE_COLLECTION_NAME) -> str:
    return f"{collection_key(project_id, collection)}:changed"


# ── Client ────────────────────────────────────────────────────────────────────

def build_redis(credentials: RemoteCredentials) -> redis.Redis:
    """Create a client for ``credentials`` without touching the network."""
    kwargs: dict[str, Any] = {
        "decode_responses":       True,   # return str, not bytes
        "socket_connect_timeout": config.SYNC_CONNECT_TIMEOUT,
    }
    if credentials.api_key:
        kwargs["password"] = credentials.api_key
    return redis.Redis.from_url(credentials.url, **kwargs)


def connect(credentials: RemoteCredentials) -> redis.Redis:
    """
    Build a client and verify it with PING.

    Raises BackendUnavailableError if the URL is malformed, the server is
    unreachable or the key is rejected.
    """
    try:
        client = build_redis(credentials)
        client.ping()
    except (redis.RedisError, ValueError) as exc:
        raise BackendUnavailableError(f"remote store unreachable: {exc}") from exc
    return client
