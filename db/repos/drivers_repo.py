from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from errors import PersistenceError
from models.driver_record import PREFERENCE_FIELDS, DriverRecord


# Canonical column order for the drivers table.
COLUMNS: List[str] = [
    "driver_id",
    "status",
    "first_name",
    "last_name",
    "truck_id",
    "phone_number",
    "email",
    "hired_on",
    "updated_on",
    "company_id",
    "dispatcher",
    "first_language",
    "second_language",
    *PREFERENCE_FIELDS,
]

# Never rewritten after the first insert.
_INSERT_ONLY = ("driver_id", "hired_on")


def _build_upsert_sql() -> str:
    assignments = []
    for col in COLUMNS:
        if col in _INSERT_ONLY:
            continue
        assignments.append(f" {col} = excluded.{col}")
    placeholders = ", ".join("?" for _ in COLUMNS)
    return (
        f"INSERT INTO drivers ({', '.join(COLUMNS)}) "
        f"VALUES ({placeholders}) "
        "ON CONFLICT(driver_id) DO UPDATE SET"
        + ",".join(assignments)
        + ";"
    )


UPSERT_SQL = _build_upsert_sql()


def _to_db_value(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def record_to_values(record: DriverRecord, updated_on: str) -> Tuple[Any, ...]:
    data = record.model_dump()
    data["updated_on"] = updated_on
    return tuple(_to_db_value(data.get(col)) for col in COLUMNS)


class DriversRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert_driver(self, record: DriverRecord, updated_on: str) -> None:
        """Insert or update one driver keyed by driver_id and commit.

        ``hired_on`` is only written on insert; ``updated_on`` is always the
        given sync timestamp.
        """
        try:
            self.conn.execute(UPSERT_SQL, record_to_values(record, updated_on))
            self.conn.commit()
        except sqlite3.Error as exc:
            try:
                self.conn.rollback()
            except sqlite3.Error:
                pass
            raise PersistenceError(f"Upsert failed for driver {record.driver_id}: {exc}", driver_id=record.driver_id) from exc

    def get_driver(self, driver_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {', '.join(COLUMNS)} FROM drivers WHERE driver_id = ?", (driver_id,))
        row = cur.fetchone()
        if not row:
            return None
        return dict(zip(COLUMNS, row))

    def select_recent(self, limit: int = 10, dispatcher: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return the most recently synced drivers, optionally for one dispatcher."""
        where_sql = ""
        params: List[Any] = []
        if dispatcher:
            where_sql = " WHERE dispatcher = ?"
            params.append(dispatcher)
        sql = (
            f"SELECT {', '.join(COLUMNS)} FROM drivers{where_sql} "
            "ORDER BY updated_on DESC, driver_id LIMIT ?"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (*params, limit))
        return [dict(zip(COLUMNS, row)) for row in cur.fetchall()]

    def count(self) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM drivers")
        return int(cur.fetchone()[0])
