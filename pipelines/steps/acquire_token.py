from __future__ import annotations

from pipelines.runner import RunContext
from ports.source import TokenProviderPort


class AcquireToken:
    name = "token"

    def __init__(self, provider: TokenProviderPort) -> None:
        self.provider = provider

    def run(self, ctx: RunContext) -> RunContext:
        # AuthError propagates: without a token the run cannot continue
        ctx.token = self.provider.acquire()
        return ctx
