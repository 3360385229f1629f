"""Periodic reconciliation of restaurant availability with weekly schedules."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pickfoo.services.schedule import (
    OpeningWindow,
    ScheduleError,
    ScheduleFetchError,
    ScheduleWriteError,
    evaluate,
)

logger = logging.getLogger(__name__)

OUTCOME_OPENED: str = "opened"
OUTCOME_CLOSED: str = "closed"
OUTCOME_UNCHANGED: str = "unchanged"
OUTCOME_SKIPPED: str = "skipped"
OUTCOME_ERRORED: str = "errored"

RULE_MANUAL_OVERRIDE: str = "manual-override"


@dataclass(frozen=True)
class RestaurantSnapshot:
    """Scheduler view of one restaurant row."""

    id: int
    name: str
    status: str
    is_open: bool
    is_manual_override: bool
    opening_hours: tuple[OpeningWindow, ...] = ()

    @property
    def is_schedule_controlled(self) -> bool:
        return self.status == "active" and not self.is_manual_override


class RestaurantStore(Protocol):
    """Persistence contract the reconciler depends on."""

    def find_eligible(self) -> list[RestaurantSnapshot]:
        """Return active restaurants without a manual override."""

    def find_overridden_ids(self) -> list[int]:
        """Return ids of active restaurants whose owner holds availability manually."""

    def refresh(self, restaurant_id: int) -> RestaurantSnapshot | None:
        """Re-read one restaurant; None when it no longer exists."""

    def set_open(self, restaurant_id: int, is_open: bool) -> bool:
        """Write ``is_open`` if the row is still schedule-controlled.

        Returns False when the guarded write matched nothing.
        """


@dataclass(frozen=True)
class EntityOutcome:
    """Typed per-restaurant result of one tick."""

    restaurant_id: int
    outcome: str
    previous_open: bool | None = None
    target_open: bool | None = None
    rule: str | None = None
    error: str | None = None


@dataclass
class TickReport:
    """Summary of one reconciliation pass."""

    now: datetime
    opened: int = 0
    closed: int = 0
    unchanged: int = 0
    skipped: int = 0
    errored: int = 0
    changed_ids: list[int] = field(default_factory=list)
    outcomes: list[EntityOutcome] = field(default_factory=list)
    fetch_failed: bool = False
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    def record(self, outcome: EntityOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.outcome == OUTCOME_OPENED:
            self.opened += 1
        elif outcome.outcome == OUTCOME_CLOSED:
            self.closed += 1
        elif outcome.outcome == OUTCOME_SKIPPED:
            self.skipped += 1
        elif outcome.outcome == OUTCOME_ERRORED:
            self.errored += 1
        else:
            self.unchanged += 1
        if outcome.outcome in (OUTCOME_OPENED, OUTCOME_CLOSED):
            self.changed_ids.append(outcome.restaurant_id)


class Reconciler:
    """Keeps ``is_open`` aligned with opening hours for schedule-controlled restaurants.

    Holds no per-restaurant state between ticks; every decision is derived from
    the store, so a crash or restart loses nothing.
    """

    def __init__(self, store: RestaurantStore, clock: Callable[[], datetime]) -> None:
        self.store = store
        self.clock = clock

    def run_once(self, cancel_event: threading.Event | None = None) -> TickReport:
        """Tick at the clock's current time."""
        return self.tick(self.clock(), cancel_event=cancel_event)

    def tick(self, now: datetime, cancel_event: threading.Event | None = None) -> TickReport:
        """Run one reconciliation pass at ``now``. Never raises."""
        report = TickReport(now=now)
        try:
            candidates = self.store.find_eligible()
            overridden_ids = self.store.find_overridden_ids()
        except Exception as exc:
            report.fetch_failed = True
            if isinstance(exc, ScheduleFetchError):
                logger.error("[SCHEDULE] Fetch failed, skipping tick at %s: %s", now.isoformat(), exc)
            else:
                logger.exception("[SCHEDULE] Fetch failed, skipping tick at %s", now.isoformat())
            return report

        for restaurant_id in overridden_ids:
            report.record(
                EntityOutcome(restaurant_id=restaurant_id, outcome=OUTCOME_SKIPPED, rule=RULE_MANUAL_OVERRIDE)
            )

        for candidate in candidates:
            if cancel_event is not None and cancel_event.is_set():
                report.cancelled = True
                logger.info(
                    "[SCHEDULE] Tick cancelled after %s of %s restaurants",
                    report.processed,
                    len(candidates) + len(overridden_ids),
                )
                break
            report.record(self._reconcile_one(candidate.id, now))

        if report.changed_ids or report.errored:
            logger.info(
                "[SCHEDULE] Tick %s: opened=%s closed=%s unchanged=%s skipped=%s errored=%s",
                now.isoformat(),
                report.opened,
                report.closed,
                report.unchanged,
                report.skipped,
                report.errored,
            )
        return report

    def _reconcile_one(self, restaurant_id: int, now: datetime) -> EntityOutcome:
        try:
            return self._apply(restaurant_id, now)
        except ScheduleError as exc:
            logger.warning("[SCHEDULE] restaurant_id=%s errored: %s", restaurant_id, exc)
            return EntityOutcome(restaurant_id=restaurant_id, outcome=OUTCOME_ERRORED, error=str(exc))
        except Exception as exc:
            logger.exception("[SCHEDULE] restaurant_id=%s failed unexpectedly", restaurant_id)
            return EntityOutcome(restaurant_id=restaurant_id, outcome=OUTCOME_ERRORED, error=repr(exc))

    def _apply(self, restaurant_id: int, now: datetime) -> EntityOutcome:
        # Re-read right before deciding so a concurrent owner edit is honoured.
        current = self.store.refresh(restaurant_id)
        if current is None or not current.is_schedule_controlled:
            return EntityOutcome(restaurant_id=restaurant_id, outcome=OUTCOME_SKIPPED)

        decision = evaluate(current.opening_hours, current.is_open, now)
        if not decision.changed:
            return EntityOutcome(
                restaurant_id=restaurant_id,
                outcome=OUTCOME_UNCHANGED,
                previous_open=current.is_open,
                target_open=decision.target_open,
                rule=decision.rule,
            )

        try:
            applied = self.store.set_open(restaurant_id, decision.target_open)
        except ScheduleWriteError:
            raise
        except Exception as exc:
            raise ScheduleWriteError(f"Could not persist is_open={decision.target_open}: {exc}") from exc
        if not applied:
            return EntityOutcome(restaurant_id=restaurant_id, outcome=OUTCOME_SKIPPED, previous_open=current.is_open)

        logger.info(
            "[SCHEDULE] %s %s (restaurant_id=%s, rule=%s)",
            "Opened" if decision.target_open else "Closed",
            current.name,
            restaurant_id,
            decision.rule,
            extra={
                "restaurant_id": restaurant_id,
                "restaurant_name": current.name,
                "previous_open": current.is_open,
                "new_open": decision.target_open,
                "rule": decision.rule,
            },
        )
        return EntityOutcome(
            restaurant_id=restaurant_id,
            outcome=OUTCOME_OPENED if decision.target_open else OUTCOME_CLOSED,
            previous_open=current.is_open,
            target_open=decision.target_open,
            rule=decision.rule,
        )
