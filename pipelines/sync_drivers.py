"""
One fetch, join, upsert run of the driver roster.

Fetch-side failures (token, roster, dispatcher lists) abort the run before
anything is written. Write-side failures are contained by the writer and
only reduce the written count.
"""
from __future__ import annotations

import logging
import time
import uuid as _uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from errors import AuthError, FetchError
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import AcquireToken, FetchRoster, JoinDrivers, PersistDrivers
from ports.repos import DriverWriterPort
from ports.source import DispatcherSourcePort, DriverSourcePort, TokenProviderPort
from services.mapping import utc_now_iso


logger = logging.getLogger(__name__)


@dataclass
class SyncOutcome:
    run_id: str
    status: str  # ok | failed
    fetched: int = 0
    written: int = 0
    failed: int = 0
    error: Optional[str] = None
    duration_ms: int = 0
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class SyncOrchestrator:
    def __init__(
        self,
        token_provider: TokenProviderPort,
        driver_fetcher: DriverSourcePort,
        dispatcher_fetcher: DispatcherSourcePort,
        writer: DriverWriterPort,
        parallel_fetch: bool = True,
    ) -> None:
        self.pipeline = Pipeline([
            AcquireToken(token_provider),
            FetchRoster(driver_fetcher, dispatcher_fetcher, parallel=parallel_fetch),
            JoinDrivers(),
            PersistDrivers(writer),
        ])

    def run_once(self) -> SyncOutcome:
        ctx = RunContext(run_id=_uuid.uuid4().hex, synced_at=utc_now_iso())
        started = time.monotonic()
        logger.info("Starting fetch and upsert", extra=ctx.log_extra("run", status="started"))

        try:
            ctx = self.pipeline.run(ctx)
        except (AuthError, FetchError) as e:
            duration_ms = int((time.monotonic() - started) * 1000)
            logger.error(
                "Sync run aborted before writing",
                extra=ctx.log_extra("run", status="failed", duration_ms=duration_ms, error=str(e)),
            )
            return SyncOutcome(
                run_id=ctx.run_id,
                status="failed",
                fetched=int(ctx.meta.get("fetched_drivers") or 0),
                error=f"{type(e).__name__}: {e}",
                duration_ms=duration_ms,
                meta=ctx.meta,
            )

        duration_ms = int((time.monotonic() - started) * 1000)
        fetched = int(ctx.meta.get("fetched_drivers") or 0)
        if fetched == 0:
            logger.warning("Roster was empty; nothing to write", extra=ctx.log_extra("run", status="empty"))
        outcome = SyncOutcome(
            run_id=ctx.run_id,
            status="ok",
            fetched=fetched,
            written=int(ctx.meta.get("written_drivers") or 0),
            failed=int(ctx.meta.get("failed_drivers") or 0),
            duration_ms=duration_ms,
            meta=ctx.meta,
        )
        logger.info(
            f"Sync finished: fetched={outcome.fetched} written={outcome.written} failed={outcome.failed}",
            extra=ctx.log_extra("run", status="ok", duration_ms=duration_ms),
        )
        return outcome


def build_orchestrator(settings, pool, session_factory=None) -> SyncOrchestrator:
    """Wire the production collaborators from settings and an open pool."""
    from services.dispatcher_fetcher import DispatcherFetcher
    from services.driver_fetcher import DriverFetcher
    from services.token_provider import TokenProvider
    from services.upsert_writer import UpsertWriter

    def _session():
        return session_factory() if session_factory else None

    return SyncOrchestrator(
        token_provider=TokenProvider(settings, session=_session()),
        driver_fetcher=DriverFetcher(settings, session=_session()),
        dispatcher_fetcher=DispatcherFetcher(settings, session=_session()),
        writer=UpsertWriter(pool),
        parallel_fetch=settings.fetch_parallel,
    )
