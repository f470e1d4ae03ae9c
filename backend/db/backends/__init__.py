"""db/backends — the two interchangeable persistence backends."""

from db.backends.base import SyncBackend, days_from_documents
from db.backends.local import LocalStoreBackend
from db.backends.remote import RedisSyncBackend

__all__ = ["SyncBackend", "days_from_documents", "LocalStoreBackend", "RedisSyncBackend"]
