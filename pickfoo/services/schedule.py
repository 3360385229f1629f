"""Weekly opening-hours evaluation.

Everything here is pure: the caller supplies the evaluation instant, so the
same schedule and timestamp always produce the same decision.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, time
from typing import Protocol

RULE_OPEN: str = "schedule-open"
RULE_CLOSE: str = "schedule-close"
RULE_CLOSED_DAY: str = "schedule-closed-day"


class ScheduleError(Exception):
    """Base class for schedule reconciliation failures."""


class ScheduleFetchError(ScheduleError):
    """Raised when the eligible restaurant set cannot be loaded."""


class ScheduleEvaluationError(ScheduleError):
    """Raised when a restaurant's opening hours cannot be interpreted."""


class ScheduleWriteError(ScheduleError):
    """Raised when the store rejects an availability write."""


class DayWindow(Protocol):
    """Anything shaped like one opening-hours row."""

    day: int
    open_time: str
    close_time: str
    is_closed: bool


@dataclass(frozen=True)
class OpeningWindow:
    """Detached copy of one opening-hours row."""

    day: int
    open_time: str
    close_time: str
    is_closed: bool = False


@dataclass(frozen=True)
class Evaluation:
    """Outcome of evaluating a schedule at one instant."""

    target_open: bool
    changed: bool
    rule: str


def parse_hhmm_time(value: str) -> time:
    """Parse time from HH:MM format string."""
    hours, sep, minutes = str(value).partition(":")
    if not sep or len(hours) != 2 or len(minutes) != 2 or not (hours + minutes).isdigit():
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return time(hour=int(hours), minute=int(minutes))


def day_of_week(now: datetime) -> int:
    """Return weekday number with Sunday as 0 and Saturday as 6."""
    return (now.weekday() + 1) % 7


def find_window(schedule: Iterable[DayWindow], day: int) -> DayWindow | None:
    """Return the first entry for ``day`` in stored order."""
    for window in schedule:
        if window.day == day:
            return window
    return None


def is_within_window(now_time: time, open_time: time, close_time: time) -> bool:
    """Return True when now is inside same-day window (close bound exclusive)."""
    return open_time <= now_time < close_time


def evaluate(schedule: Sequence[DayWindow], currently_open: bool, now: datetime) -> Evaluation:
    """Decide whether a restaurant should be open at ``now``.

    Windows whose close time is not after the open time never match; overnight
    spans are not supported.
    """
    window = find_window(schedule, day_of_week(now))
    if window is None or window.is_closed:
        return Evaluation(target_open=False, changed=currently_open, rule=RULE_CLOSED_DAY)

    try:
        open_time = parse_hhmm_time(window.open_time)
        close_time = parse_hhmm_time(window.close_time)
    except ValueError as exc:
        raise ScheduleEvaluationError(f"Malformed opening hours for day {window.day}: {exc}") from exc

    now_time = time(hour=now.hour, minute=now.minute)
    target_open = is_within_window(now_time, open_time, close_time)
    return Evaluation(
        target_open=target_open,
        changed=target_open != currently_open,
        rule=RULE_OPEN if target_open else RULE_CLOSE,
    )
