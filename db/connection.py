from __future__ import annotations

import sqlite3
from typing import Optional


def get_connection(db_path: str, timeout: Optional[float] = 30.0) -> sqlite3.Connection:
    """Open a SQLite connection with sane pragmas for a long-running sync.

    - WAL journal so readers are not blocked by the sync writer
    - NORMAL synchronous for performance
    - check_same_thread off: connections are pooled and handed to the
      scheduler thread
    """
    conn = sqlite3.connect(db_path, timeout=timeout or 30.0, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn
