from __future__ import annotations

from pipelines.runner import RunContext
from services.mapping import join_drivers


class JoinDrivers:
    name = "join"

    def run(self, ctx: RunContext) -> RunContext:
        ctx.drivers = join_drivers(ctx.raw_drivers, ctx.assignments, ctx.synced_at)
        ctx.meta["joined_drivers"] = len(ctx.drivers)
        ctx.meta["skipped_drivers"] = len(ctx.raw_drivers) - len(ctx.drivers)
        return ctx
