"""Background thread that drives the schedule reconciler on a fixed cadence."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable

from pickfoo.services.reconciler import Reconciler

logger = logging.getLogger(__name__)


def next_deadline(previous: float, now: float, interval: float) -> tuple[float, int]:
    """Return the next grid slot after ``now`` and how many slots were missed.

    Slots are ``previous + k * interval``. A tick that overran its slot drops the
    missed slots instead of queueing them, so at most one tick is ever due.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")
    elapsed = now - previous
    if elapsed < interval:
        return previous + interval, 0
    slots = math.floor(elapsed / interval) + 1
    return previous + slots * interval, slots - 1


class ScheduleTicker:
    """Runs ``Reconciler.run_once`` every ``interval`` seconds on one daemon thread.

    Ticks never overlap: the next tick is scheduled only after the current one
    returns. ``stop`` is honoured between ticks and between restaurants.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        interval: float = 60.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.reconciler = reconciler
        self.interval = interval
        self._monotonic = monotonic
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.ticks_run = 0
        self.ticks_skipped = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the loop; returns False if a previous loop thread is still alive."""
        if self.is_running:
            if self._stop_event.is_set():
                logger.warning("[SCHEDULE] Previous scheduler thread is still finishing; not starting a second one")
            return False
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="schedule-ticker",
            daemon=True,
        )
        self._thread.start()
        logger.info("[SCHEDULE] Restaurant scheduler started (interval=%ss)", self.interval)
        return True

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        if self._thread is None:
            return
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            # Keep the reference so start() cannot overlap the tick still in flight.
            logger.warning("[SCHEDULE] Scheduler thread did not stop within %ss", timeout)
            return
        logger.info("[SCHEDULE] Restaurant scheduler stopped")
        self._thread = None

    def run_tick(self, stop_event: threading.Event | None = None) -> None:
        """Run one tick, logging instead of raising so the loop survives."""
        try:
            self.reconciler.run_once(cancel_event=stop_event or self._stop_event)
        except Exception:
            logger.exception("[SCHEDULE] Tick failed")
        self.ticks_run += 1

    def _run(self, stop_event: threading.Event) -> None:
        deadline = self._monotonic()
        while not stop_event.wait(max(0.0, deadline - self._monotonic())):
            self.run_tick(stop_event)
            deadline, missed = next_deadline(deadline, self._monotonic(), self.interval)
            if missed:
                self.ticks_skipped += missed
                logger.warning("[SCHEDULE] Tick overran interval; skipped %s slot(s)", missed)
