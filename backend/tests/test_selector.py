"""Tests for backend selection."""

from unittest.mock import MagicMock

import pytest
import redis

import config
from db import selector
from db.backends.local import LocalStoreBackend
from db.backends.remote import RedisSyncBackend
from db.errors import BackendUnavailableError
from db.redis_client import RemoteCredentials

FULL = RemoteCredentials("redis://sync.example:6379/0", "secret", "trip")


@pytest.fixture
def closing():
    opened = []
    yield opened.append
    for selection in opened:
        selection.backend.close()


def _never_called(credentials):
    raise AssertionError("remote store must not be contacted")


def test_empty_credentials_always_pick_local(store, closing):
    for _ in range(3):
        selection = selector.select_backend(RemoteCredentials(), store=store, connector=_never_called)
        closing(selection)
        assert selection.mode == "local"
        assert isinstance(selection.backend, LocalStoreBackend)
        assert selection.broadcaster is selection.backend.broadcaster
        assert selection.fallback_reason is None


def test_partial_credentials_pick_local(store, closing):
    partial = RemoteCredentials("redis://sync.example:6379/0", "", "trip")
    selection = selector.select_backend(partial, store=store, connector=_never_called)
    closing(selection)
    assert selection.mode == "local"


def test_full_credentials_pick_remote(closing):
    client = MagicMock(spec=redis.Redis)
    selection = selector.select_backend(FULL, connector=lambda creds: client)
    closing(selection)

    assert selection.mode == "remote"
    assert isinstance(selection.backend, RedisSyncBackend)
    assert selection.backend.collection_key == "trip:travel_plans"
    assert selection.broadcaster is None


def test_remote_init_failure_falls_back_to_local(store, closing):
    def unreachable(creds):
        raise BackendUnavailableError("remote store unreachable: timed out")

    selection = selector.select_backend(FULL, store=store, connector=unreachable)
    closing(selection)
    assert selection.mode == "local"
    assert "timed out" in selection.fallback_reason


def test_connect_wraps_redis_errors(monkeypatch):
    from db import redis_client

    fake = MagicMock()
    fake.ping.side_effect = redis.ConnectionError("refused")
    monkeypatch.setattr(redis_client, "build_redis", lambda creds: fake)

    with pytest.raises(BackendUnavailableError):
        redis_client.connect(FULL)


def test_process_wide_selection_is_cached(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "SYNC_REMOTE_URL", "")
    monkeypatch.setattr(config, "SYNC_API_KEY", "")
    monkeypatch.setattr(config, "SYNC_PROJECT_ID", "")
    monkeypatch.setattr(config, "LOCAL_STORE_DIR", str(tmp_path))
    selector.reset_backend()
    try:
        first = selector.get_backend()
        assert selector.get_backend() is first
        assert first.mode == "local"
    finally:
        selector.reset_backend()
