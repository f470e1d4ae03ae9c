"""
db/errors.py
------------
Exceptions raised by the persistence backends.

None of these are fatal: callers keep their best-known state and let the
user retry the mutating action.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for persistence failures."""


class BackendUnavailableError(SyncError):
    """The remote store could not be reached while constructing the backend."""


class BackendWriteError(SyncError):
    """A save or delete did not reach the store.  Not retried."""

    def __init__(self, operation: str, day_id: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.day_id = day_id
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{operation} of day {day_id} failed{detail}")


class SubscriptionError(SyncError):
    """A change listener could not be registered or died."""
