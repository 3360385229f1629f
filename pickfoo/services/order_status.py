"""Order status transition helpers."""

from __future__ import annotations

from datetime import datetime

from pickfoo.models.order import Order

ORDER_STATUSES: list[str] = ["pending", "confirmed", "preparing", "out-for-delivery", "delivered", "cancelled"]

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"preparing", "cancelled"},
    "preparing": {"out-for-delivery"},
    "out-for-delivery": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}

_STATUS_TIMESTAMPS: dict[str, str] = {
    "confirmed": "confirmed_at",
    "preparing": "preparing_at",
    "out-for-delivery": "dispatched_at",
    "delivered": "delivered_at",
    "cancelled": "cancelled_at",
}


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def set_status(order: Order, new_status: str, now: datetime) -> None:
    """Set status and update corresponding timestamps."""
    order.status = new_status
    order.status_updated_at = now
    timestamp_field = _STATUS_TIMESTAMPS.get(new_status)
    if timestamp_field is not None:
        setattr(order, timestamp_field, now)
