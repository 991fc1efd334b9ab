from __future__ import annotations

import sqlite3

import pytest

from db import schema
from db.repos.drivers_repo import COLUMNS, UPSERT_SQL, DriversRepo
from errors import PersistenceError
from models.driver_record import DriverRecord


@pytest.fixture
def conn(tmp_path):
    db = sqlite3.connect(str(tmp_path / "t.db"))
    schema.bootstrap(db)
    yield db
    db.close()


def _record(**fields):
    base = {"driverId": "A1", "firstName": "Ana", "hiredOn": "2021-03-01", "emailAddress": "a@x.com"}
    base.update(fields)
    return DriverRecord.model_validate(base)


def test_upsert_sql_never_updates_hired_on():
    update_clause = UPSERT_SQL.split("DO UPDATE SET", 1)[1]
    assert "hired_on" not in update_clause
    assert "updated_on = excluded.updated_on" in update_clause


def test_upsert_is_idempotent_and_keeps_hired_on(conn):
    repo = DriversRepo(conn)
    repo.upsert_driver(_record(), "2025-01-01T00:00:00+00:00")
    repo.upsert_driver(_record(hiredOn="2099-12-31", firstName="Anna"), "2025-01-01T06:00:00+00:00")

    assert repo.count() == 1
    row = repo.get_driver("A1")
    assert row["hired_on"] == "2021-03-01"
    assert row["updated_on"] == "2025-01-01T06:00:00+00:00"
    assert row["first_name"] == "Anna"


def test_dispatcher_is_cleared_when_assignment_disappears(conn):
    repo = DriversRepo(conn)
    repo.upsert_driver(_record().model_copy(update={"dispatcher": "Marko"}), "t1")
    repo.upsert_driver(_record(), "t2")
    assert repo.get_driver("A1")["dispatcher"] is None


def test_cleared_optional_values_are_replaced_with_null(conn):
    repo = DriversRepo(conn)
    repo.upsert_driver(_record(globalDnd=True, safetyCall=False, firstLanguage="sr"), "t1")
    repo.upsert_driver(_record(), "t2")
    row = repo.get_driver("A1")
    assert row["global_dnd"] is None
    assert row["safety_call"] is None
    assert row["first_language"] is None
    assert row["hired_on"] == "2021-03-01"


def test_update_clause_covers_every_non_key_column():
    update_clause = UPSERT_SQL.split("DO UPDATE SET", 1)[1]
    assert "COALESCE" not in update_clause
    for col in COLUMNS:
        if col in ("driver_id", "hired_on"):
            continue
        assert f"{col} = excluded.{col}" in update_clause


def test_upsert_failure_raises_persistence_error(conn):
    conn.execute("DROP TABLE drivers")
    with pytest.raises(PersistenceError) as exc:
        DriversRepo(conn).upsert_driver(_record(), "t")
    assert exc.value.driver_id == "A1"


def test_select_recent_orders_and_filters(conn):
    repo = DriversRepo(conn)
    repo.upsert_driver(_record(driverId="A1").model_copy(update={"dispatcher": "Marko"}), "2025-01-01")
    repo.upsert_driver(_record(driverId="B2").model_copy(update={"dispatcher": "Paul"}), "2025-01-02")
    assert [r["driver_id"] for r in repo.select_recent(limit=5)] == ["B2", "A1"]
    assert [r["driver_id"] for r in repo.select_recent(limit=5, dispatcher="Marko")] == ["A1"]
    assert set(repo.select_recent(limit=1)[0]) == set(COLUMNS)
