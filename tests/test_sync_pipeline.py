from __future__ import annotations

import sqlite3

import pytest

import pipelines.sync_drivers as sync_drivers
from fakes import FakeResponse, FakeSession
from pipelines.sync_drivers import SyncOrchestrator, build_orchestrator
from services.dispatcher_fetcher import DispatcherFetcher
from services.driver_fetcher import DriverFetcher
from services.token_provider import TokenProvider
from services.upsert_writer import UpsertWriter


def _rows(db_path):
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        return {r["driver_id"]: dict(r) for r in conn.execute("SELECT * FROM drivers")}
    finally:
        conn.close()


def _routes(settings, drivers, dispatcher_items):
    routes = {
        settings.token_url: FakeResponse(200, "tok"),
        settings.drivers_url: FakeResponse(200, {"data": {"data": drivers}}),
    }
    for dispatcher_id, answer in dispatcher_items.items():
        url = f"{settings.dispatchers_url}/{dispatcher_id}/item"
        if isinstance(answer, list):
            answer = FakeResponse(200, {"data": [{"recordId": rid} for rid in answer]})
        routes[url] = answer
    return routes


def _orchestrator(settings, pool, session, parallel=True):
    return SyncOrchestrator(
        token_provider=TokenProvider(settings, session=session),
        driver_fetcher=DriverFetcher(settings, session=session),
        dispatcher_fetcher=DispatcherFetcher(settings, session=session),
        writer=UpsertWriter(pool),
        parallel_fetch=parallel,
    )


@pytest.mark.parametrize("parallel", [True, False])
def test_end_to_end_joins_and_persists(settings, pool, parallel):
    drivers = [
        {"driverId": "A1", "emailAddress": "a@x.com", "firstName": "Ana", "hiredOn": "2021-03-01"},
        {"driverId": "B2", "firstName": "Bob"},
    ]
    session = FakeSession(_routes(settings, drivers, {12: ["A1 "], 28: [], 53: []}))

    outcome = _orchestrator(settings, pool, session, parallel).run_once()

    assert outcome.ok
    assert (outcome.fetched, outcome.written, outcome.failed) == (2, 2, 0)
    rows = _rows(settings.db_name)
    assert rows["A1"]["email"] == "a@x.com"
    assert rows["A1"]["dispatcher"] == "Marko"
    assert rows["B2"]["dispatcher"] is None


def test_second_run_advances_updated_on_but_keeps_hired_on(settings, pool, monkeypatch):
    stamps = iter(["2025-01-01T00:00:00+00:00", "2025-01-01T06:00:00+00:00"])
    monkeypatch.setattr(sync_drivers, "utc_now_iso", lambda: next(stamps))
    drivers = [{"driverId": "A1", "hiredOn": "2021-03-01"}]
    session = FakeSession(_routes(settings, drivers, {12: ["A1"], 28: [], 53: []}))
    orchestrator = _orchestrator(settings, pool, session)

    orchestrator.run_once()
    session.routes[settings.drivers_url] = FakeResponse(200, {"data": {"data": [{"driverId": "A1", "hiredOn": "2023-09-09"}]}})
    orchestrator.run_once()

    rows = _rows(settings.db_name)
    assert list(rows) == ["A1"]
    assert rows["A1"]["hired_on"] == "2021-03-01"
    assert rows["A1"]["updated_on"] == "2025-01-01T06:00:00+00:00"


def test_dispatcher_failure_aborts_before_any_write(settings, pool):
    drivers = [{"driverId": "A1"}, {"driverId": "B2"}]
    session = FakeSession(_routes(settings, drivers, {12: ["A1"], 28: FakeResponse(500, {"error": "x"}), 53: []}))

    outcome = _orchestrator(settings, pool, session).run_once()

    assert outcome.status == "failed"
    assert "FetchError" in outcome.error
    assert outcome.written == 0
    assert _rows(settings.db_name) == {}


def test_auth_failure_aborts_without_fetching(settings, pool):
    session = FakeSession({settings.token_url: FakeResponse(403, {"error": "denied"})})

    outcome = _orchestrator(settings, pool, session).run_once()

    assert outcome.status == "failed"
    assert "AuthError" in outcome.error
    assert [c["url"] for c in session.calls] == [settings.token_url]
    assert _rows(settings.db_name) == {}


def test_empty_roster_is_a_successful_empty_sync(settings, pool):
    session = FakeSession(_routes(settings, [], {12: ["A1"], 28: [], 53: []}))
    outcome = _orchestrator(settings, pool, session).run_once()
    assert outcome.ok
    assert outcome.fetched == 0 and outcome.written == 0


def test_write_failure_does_not_fail_the_run(settings, pool):
    session = FakeSession(_routes(settings, [{"driverId": "A1"}], {12: [], 28: [], 53: []}))
    pool.close()
    outcome = _orchestrator(settings, pool, session).run_once()
    assert outcome.ok
    assert outcome.written == 0
    assert outcome.failed == 1


def test_build_orchestrator_wires_settings(settings, pool):
    session = FakeSession(_routes(settings, [{"driverId": "Z9"}], {12: ["Z9"], 28: [], 53: []}))
    outcome = build_orchestrator(settings, pool, session_factory=lambda: session).run_once()
    assert outcome.ok
    assert _rows(settings.db_name)["Z9"]["dispatcher"] == "Marko"
