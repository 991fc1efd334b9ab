from __future__ import annotations

import logging
from typing import Optional, Sequence

from db.pool import ConnectionPool
from db.repos.drivers_repo import DriversRepo
from errors import PersistenceError
from models.driver_record import DriverRecord
from services.mapping import utc_now_iso


logger = logging.getLogger(__name__)


class UpsertWriter:
    """Writes joined drivers one statement (and one commit) at a time.

    Write failures never abort the run: a bad row is logged and skipped, and
    if no connection can be acquired the batch is logged and zero returned.
    Rows committed before a failure stay committed.
    """

    def __init__(self, pool: ConnectionPool, repo_factory=DriversRepo):
        self.pool = pool
        self.repo_factory = repo_factory
        self.failed: list[str] = []

    def upsert_all(self, records: Sequence[DriverRecord], synced_at: Optional[str] = None) -> int:
        stamp = synced_at or utc_now_iso()
        self.failed = []
        written = 0
        try:
            with self.pool.acquire() as conn:
                logger.info("Database connection acquired", extra={"step": "upsert"})
                repo = self.repo_factory(conn)
                for record in records:
                    try:
                        repo.upsert_driver(record, stamp)
                    except PersistenceError as e:
                        self.failed.append(record.driver_id)
                        logger.error(
                            f"Driver {record.driver_id} was not written",
                            extra={"step": "upsert", "status": "failed", "error": str(e)},
                        )
                        continue
                    written += 1
                    logger.debug(f"Driver {record.driver_id} upserted")
        except PersistenceError as e:
            logger.error(
                "Upsert batch aborted",
                extra={"step": "upsert", "status": "failed", "error": str(e)},
            )
            return written

        logger.info(
            f"Upsert complete: {written} written, {len(self.failed)} failed",
            extra={"step": "upsert", "status": "ok" if not self.failed else "partial"},
        )
        return written
