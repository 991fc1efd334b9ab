from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from db import schema
from db.connection import get_connection
from errors import PersistenceError


logger = logging.getLogger(__name__)


class ConnectionPool:
    """Small pool of SQLite connections owned by the process.

    Constructed once at start-up, passed to the writer and closed on shutdown.
    Each sync run borrows one connection through ``acquire()``.
    """

    def __init__(self, db_path: str, max_size: int = 4, timeout: Optional[float] = 30.0, bootstrap: bool = True):
        self.db_path = db_path
        self.max_size = max(1, max_size)
        self.timeout = timeout
        self._idle: List[sqlite3.Connection] = []
        self._lock = threading.Lock()
        self._closed = False
        if bootstrap:
            with self.acquire() as conn:
                schema.bootstrap(conn)

    @property
    def closed(self) -> bool:
        return self._closed

    def _checkout(self) -> sqlite3.Connection:
        with self._lock:
            if self._closed:
                raise PersistenceError("Connection pool is closed")
            if self._idle:
                return self._idle.pop()
        try:
            return get_connection(self.db_path, timeout=self.timeout)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not open database {self.db_path}: {exc}") from exc

    def _checkin(self, conn: sqlite3.Connection) -> None:
        try:
            if conn.in_transaction:
                conn.rollback()
        except sqlite3.Error:
            logger.warning("Discarding connection that failed to roll back")
            conn.close()
            return
        with self._lock:
            if not self._closed and len(self._idle) < self.max_size:
                self._idle.append(conn)
                return
        conn.close()

    @contextmanager
    def acquire(self) -> Iterator[sqlite3.Connection]:
        """Borrow a connection; it is returned on every exit path."""
        conn = self._checkout()
        try:
            yield conn
        finally:
            self._checkin(conn)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            conn.close()
        logger.info("Connection pool closed (%d idle connections released)", len(idle))
