from __future__ import annotations

from pipelines.runner import RunContext
from ports.repos import DriverWriterPort


class PersistDrivers:
    name = "upsert"

    def __init__(self, writer: DriverWriterPort) -> None:
        self.writer = writer

    def run(self, ctx: RunContext) -> RunContext:
        # Runs even for an empty roster; writing nothing is a valid outcome
        written = self.writer.upsert_all(ctx.drivers, synced_at=ctx.synced_at)
        ctx.meta["written_drivers"] = written
        ctx.meta["failed_drivers"] = len(ctx.drivers) - written
        return ctx
