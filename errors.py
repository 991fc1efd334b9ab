"""
Error taxonomy for the driver roster sync.

Configuration errors are fatal at start-up. Auth and fetch errors abort the
current run only. Persistence errors are logged and the run continues.
"""
from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for all sync errors."""


class ConfigError(SyncError):
    """A required setting is missing or malformed."""


class AuthError(SyncError):
    """The token authority was unreachable or refused the request."""


class FetchError(SyncError):
    """Roster or dispatcher retrieval failed."""


class PersistenceError(SyncError):
    """A driver row (or the whole batch) could not be written."""

    def __init__(self, message: str, driver_id: str | None = None):
        super().__init__(message)
        self.driver_id = driver_id
