"""Restaurant verification status transition helpers."""

from __future__ import annotations

OWNER_TRANSITIONS: dict[str, set[str]] = {
    "inactive": {"pending"},
    "rejected": {"pending"},
    "pending": set(),
    "active": set(),
    "suspended": set(),
}

ADMIN_TRANSITIONS: dict[str, set[str]] = {
    "inactive": set(),
    "pending": {"active", "rejected"},
    "active": {"suspended"},
    "rejected": {"active"},
    "suspended": {"active"},
}


def can_owner_transition(current: str, new: str) -> bool:
    """Return whether an owner may move the restaurant from current to new status."""
    return new in OWNER_TRANSITIONS.get(current, set())


def can_admin_transition(current: str, new: str) -> bool:
    """Return whether an admin verification decision may move current to new."""
    return new in ADMIN_TRANSITIONS.get(current, set())
