import argparse
import dataclasses
import json
import logging
import os
import signal
import sqlite3
import sys

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.pool import ConnectionPool
from db.repos.drivers_repo import DriversRepo
from errors import ConfigError, PersistenceError
from pipelines.scheduler import SingleFlightScheduler
from pipelines.sync_drivers import build_orchestrator
from services.reporting import print_summary
from utils.logging_setup import init_logging


logger = logging.getLogger("cli")


def _load_settings(args):
    """Settings with CLI overrides; exits non-zero when configuration is incomplete."""
    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", extra={"step": "config", "status": "failed"})
        sys.exit(1)
    overrides = {}
    if args.db:
        overrides["db_name"] = args.db
    if getattr(args, "interval_hours", None):
        overrides["sync_interval_hours"] = args.interval_hours
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _db_path(args) -> str:
    # Read-only commands only need the store, not the API settings
    path = args.db or os.getenv("DB_NAME")
    if not path:
        logger.error("No database given: pass --db or set DB_NAME", extra={"step": "config", "status": "failed"})
        sys.exit(1)
    return path


def _open_pool(settings) -> ConnectionPool:
    try:
        return ConnectionPool(settings.db_name, max_size=settings.db_pool_size)
    except (PersistenceError, sqlite3.Error) as e:
        logger.error(f"Database unavailable: {e}", extra={"step": "config", "status": "failed"})
        sys.exit(1)


def cmd_bootstrap(args):
    conn = get_connection(_db_path(args))
    try:
        schema.bootstrap(conn)
    finally:
        conn.close()
    print("Schema ready")


def cmd_sync(args):
    settings = _load_settings(args)
    pool = _open_pool(settings)
    try:
        outcome = build_orchestrator(settings, pool).run_once()
    finally:
        pool.close()
    print_summary(outcome)
    if not outcome.ok:
        sys.exit(2)


def cmd_serve(args):
    settings = _load_settings(args)
    pool = _open_pool(settings)
    orchestrator = build_orchestrator(settings, pool)
    scheduler = SingleFlightScheduler(orchestrator.run_once, settings.sync_interval_seconds)

    def _request_shutdown(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        scheduler.stop(wait=False)

    signal.signal(signal.SIGINT, _request_shutdown)
    signal.signal(signal.SIGTERM, _request_shutdown)

    scheduler.start(run_immediately=True)
    scheduler.wait()
    # Let an in-flight run finish writing before the pool goes away
    scheduler.stop(wait=True)
    pool.close()
    logger.info("Shutdown complete")


def cmd_report_driver(args):
    conn = get_connection(_db_path(args))
    try:
        schema.bootstrap(conn)
        row = DriversRepo(conn).get_driver(args.driver_id.strip())
    finally:
        conn.close()
    if not row:
        print("No record found for driver")
        return
    print(json.dumps(row, indent=2, ensure_ascii=False))


def cmd_report_recent(args):
    conn = get_connection(_db_path(args))
    try:
        schema.bootstrap(conn)
        rows = DriversRepo(conn).select_recent(limit=args.limit, dispatcher=args.dispatcher)
    finally:
        conn.close()
    out = [
        {
            "driver_id": r["driver_id"],
            "first_name": r["first_name"],
            "last_name": r["last_name"],
            "status": r["status"],
            "truck_id": r["truck_id"],
            "dispatcher": r["dispatcher"],
            "updated_on": r["updated_on"],
        }
        for r in rows
    ]
    print(json.dumps(out, indent=2, ensure_ascii=False))


def main():
    init_logging()
    parser = argparse.ArgumentParser(description="Ditat driver roster sync")
    parser.add_argument("--db", default=None, help="Path to SQLite DB (default: DB_NAME)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create the drivers table")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_sync = sub.add_parser("sync", help="Run one fetch/join/upsert cycle and exit")
    p_sync.set_defaults(func=cmd_sync)

    p_serve = sub.add_parser("serve", help="Sync now and then on a fixed interval until stopped")
    p_serve.add_argument("--interval-hours", type=float, default=None, help="Override SYNC_INTERVAL_HOURS (default: 6)")
    p_serve.set_defaults(func=cmd_serve)

    p_rd = sub.add_parser("report-driver", help="Show the stored row for one driver")
    p_rd.add_argument("--driver-id", required=True, help="Ditat driver id")
    p_rd.set_defaults(func=cmd_report_driver)

    p_rr = sub.add_parser("report-recent", help="List the most recently synced drivers")
    p_rr.add_argument("--limit", type=int, default=10)
    p_rr.add_argument("--dispatcher", default=None, help="Filter: dispatcher display name")
    p_rr.set_defaults(func=cmd_report_recent)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
