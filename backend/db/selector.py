"""
db/selector.py
--------------
Picks the persistence backend once per process.

    remote  — every RemoteCredentials field is non-empty and the store
              answers PING
    local   — otherwise (empty credentials, or the remote store failed to
              come up; the failure is logged and kept on the selection)

Usage:
    from db.selector import get_backend

    selection = get_backend()
    selection.backend.subscribe(print)

This is the only module that constructs a concrete backend.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import redis

from db.backends.base import ErrorCallback, SyncBackend
from db.backends.local import LocalStoreBackend
from db.backends.remote import RedisSyncBackend
from db.broadcast import ChangeBroadcaster
from db.errors import BackendUnavailableError
from db.local_store import LocalKeyValueStore
from db.redis_client import RemoteCredentials, connect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendSelection:
    backend: SyncBackend
    mode: str                                   # "remote" | "local"
    broadcaster: Optional[ChangeBroadcaster] = None   # set in local mode only
    fallback_reason: Optional[str] = None       # why remote was not used


def select_backend(
    credentials: RemoteCredentials,
    store: Optional[LocalKeyValueStore] = None,
    broadcaster: Optional[ChangeBroadcaster] = None,
    on_error: Optional[ErrorCallback] = None,
    connector: Callable[[RemoteCredentials], redis.Redis] = connect,
) -> BackendSelection:
    """Choose remote or local for ``credentials``.  Never raises for a bad remote."""
    fallback_reason: Optional[str] = None

    if credentials.is_complete:
        try:
            client = connector(credentials)
        except BackendUnavailableError as exc:
            fallback_reason = str(exc)
            logger.error("remote store init failed, falling back to local: %s", exc)
        else:
            logger.info("connected to remote store (project %s)", credentials.project_id)
            return BackendSelection(
                backend=RedisSyncBackend(client, credentials.project_id, on_error=on_error),
                mode=RedisSyncBackend.mode,
            )
    else:
        logger.info("no remote store configured, using local storage")

    bus = broadcaster or ChangeBroadcaster()
    return BackendSelection(
        backend=LocalStoreBackend(store=store, broadcaster=bus, on_error=on_error),
        mode=LocalStoreBackend.mode,
        broadcaster=bus,
        fallback_reason=fallback_reason,
    )


# ── Process-wide selection ────────────────────────────────────────────────────

_selection: BackendSelection | None = None
_selection_lock = threading.Lock()


def get_backend() -> BackendSelection:
    """Return the process-wide selection, choosing it on first call."""
    global _selection
    with _selection_lock:
        if _selection is None:
            _selection = select_backend(RemoteCredentials.from_config())
        return _selection


def reset_backend() -> None:
    """Close and forget the process-wide selection (shutdown / tests)."""
    global _selection
    with _selection_lock:
        if _selection is not None:
            _selection.backend.close()
        _selection = None
