from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from models.driver_record import DriverRecord


logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    run_id: str
    synced_at: str
    token: Optional[str] = None
    raw_drivers: List[Dict[str, Any]] = field(default_factory=list)
    assignments: Dict[str, str] = field(default_factory=dict)
    drivers: List[DriverRecord] = field(default_factory=list)
    meta: dict = field(default_factory=dict)

    def log_extra(self, step: str, **extra: Any) -> Dict[str, Any]:
        return {"run_id": self.run_id, "step": step, **extra}


class Step(Protocol):
    name: str

    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        for step in self.steps:
            started = time.monotonic()
            ctx = step.run(ctx)
            duration_ms = int((time.monotonic() - started) * 1000)
            ctx.meta.setdefault("durations_ms", {})[step.name] = duration_ms
            logger.debug(
                "Step finished",
                extra=ctx.log_extra(step.name, status="ok", duration_ms=duration_ms),
            )
        return ctx
