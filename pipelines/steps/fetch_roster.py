from __future__ import annotations

import concurrent.futures as _fut

from errors import FetchError
from pipelines.runner import RunContext
from ports.source import DispatcherSourcePort, DriverSourcePort


class FetchRoster:
    """Fetch the driver roster and the dispatcher assignments.

    The two calls only share the token, so with ``parallel`` they run on two
    worker threads. Dispatcher lists are still fetched sequentially inside
    their own call, which keeps roster-order precedence intact.
    """

    name = "fetch"

    def __init__(self, drivers: DriverSourcePort, dispatchers: DispatcherSourcePort, parallel: bool = True) -> None:
        self.drivers = drivers
        self.dispatchers = dispatchers
        self.parallel = parallel

    def run(self, ctx: RunContext) -> RunContext:
        if not ctx.token:
            raise FetchError("Cannot fetch without an API token")

        if self.parallel:
            with _fut.ThreadPoolExecutor(max_workers=2, thread_name_prefix="fetch") as ex:
                drivers_future = ex.submit(self.drivers.fetch_all, ctx.token)
                assignments_future = ex.submit(self.dispatchers.fetch_assignments, ctx.token)
                # Surface a roster failure first, matching sequential order
                raw_drivers = drivers_future.result()
                assignments = assignments_future.result()
        else:
            raw_drivers = self.drivers.fetch_all(ctx.token)
            assignments = self.dispatchers.fetch_assignments(ctx.token)

        ctx.raw_drivers = list(raw_drivers or [])
        ctx.assignments = dict(assignments or {})
        ctx.meta["fetched_drivers"] = len(ctx.raw_drivers)
        ctx.meta["assigned_drivers"] = len(ctx.assignments)
        return ctx
