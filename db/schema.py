from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create the drivers table and its indexes (idempotent)."""
    cur = conn.cursor()

    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS drivers (\n"
            "  driver_id TEXT NOT NULL PRIMARY KEY,\n"
            "  status TEXT,\n"
            "  first_name TEXT,\n"
            "  last_name TEXT,\n"
            "  truck_id TEXT,\n"
            "  phone_number TEXT,\n"
            "  email TEXT,\n"
            "  hired_on TEXT,\n"
            "  updated_on TEXT,\n"
            "  company_id TEXT,\n"
            "  dispatcher TEXT,\n"
            "  first_language TEXT,\n"
            "  second_language TEXT,\n"
            "  global_dnd INTEGER,\n"
            "  safety_call INTEGER,\n"
            "  safety_message INTEGER,\n"
            "  hos_support INTEGER,\n"
            "  maintainance_call INTEGER,\n"
            "  maintainance_message INTEGER,\n"
            "  dispatch_call INTEGER,\n"
            "  dispatch_message INTEGER,\n"
            "  account_call INTEGER,\n"
            "  account_message INTEGER\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_drivers_dispatcher ON drivers(dispatcher);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_drivers_updated_on ON drivers(updated_on);")

    conn.commit()
