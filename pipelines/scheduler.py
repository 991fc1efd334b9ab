from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class SingleFlightScheduler:
    """Runs a job at start-up and then every ``interval_seconds``.

    At most one run is in flight: a trigger that fires while the job is still
    running is skipped, never queued behind it and never run concurrently.
    """

    def __init__(self, job: Callable[[], Any], interval_seconds: float, name: str = "driver-sync"):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.job = job
        self.interval_seconds = interval_seconds
        self.name = name
        self.runs = 0
        self.skipped = 0
        self._run_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def busy(self) -> bool:
        return self._run_lock.locked()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def trigger(self) -> bool:
        """Run the job now unless a run is in flight. Returns whether it ran."""
        if not self._run_lock.acquire(blocking=False):
            self.skipped += 1
            logger.warning(f"{self.name}: trigger skipped, previous run still in flight")
            return False
        try:
            self.job()
            self.runs += 1
        except Exception:
            # A crashing job must not stop future triggers
            logger.exception(f"{self.name}: run raised an unexpected error")
        finally:
            self._run_lock.release()
        return True

    def _loop(self, run_immediately: bool) -> None:
        if run_immediately and not self._stop.is_set():
            self.trigger()
        while not self._stop.wait(self.interval_seconds):
            self.trigger()

    def start(self, run_immediately: bool = True) -> None:
        if self.running:
            logger.warning(f"{self.name}: scheduler already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop,
            args=(run_immediately,),
            name=self.name,
            daemon=True,
        )
        self._thread.start()
        logger.info(f"{self.name}: scheduled every {self.interval_seconds / 3600:g} hours")

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """Stop scheduling. With ``wait`` an in-flight run finishes first."""
        self._stop.set()
        if not wait:
            return
        if self._thread is not None:
            self._thread.join(timeout)
        # Runs started through trigger() from other threads
        if self._run_lock.acquire(timeout=-1 if timeout is None else timeout):
            self._run_lock.release()
        logger.info(f"{self.name}: scheduler stopped after {self.runs} runs ({self.skipped} skipped)")

    def wait(self, poll_seconds: float = 1.0) -> None:
        """Block the calling thread until ``stop()`` is requested."""
        while not self._stop.wait(poll_seconds):
            pass
