"""Clock helpers for schedule evaluation."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from pickfoo.core.config import settings


def schedule_now(timezone_name: str | None = None) -> datetime:
    """Return the current time in the zone opening hours are written in.

    Opening hours are wall-clock strings, so the evaluation instant must be
    expressed in the restaurant's zone; an empty name falls back to server
    local time.
    """
    name = settings.scheduler_timezone if timezone_name is None else timezone_name
    if name:
        return datetime.now(ZoneInfo(name))
    return datetime.now().astimezone()
