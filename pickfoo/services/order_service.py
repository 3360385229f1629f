"""Order listing and status progression for restaurant owners."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from pickfoo.models.order import Order
from pickfoo.models.restaurant import Restaurant
from pickfoo.models.user import User
from pickfoo.services.audit_service import log_action
from pickfoo.services.order_status import ORDER_STATUSES, can_transition, set_status

logger = logging.getLogger(__name__)


class OrderNotFoundError(Exception):
    """Raised when an order does not exist or belongs to another owner's restaurant."""


class OrderStatusError(Exception):
    """Raised for unknown statuses and disallowed transitions."""


def list_owner_orders(db: Session, owner: User, status: str | None = None) -> list[Order]:
    """Return orders across all of the owner's restaurants, newest first."""
    query = (
        select(Order)
        .join(Restaurant, Order.restaurant_id == Restaurant.id)
        .options(selectinload(Order.items))
        .where(Restaurant.owner_id == owner.id)
    )
    if status is not None:
        query = query.where(Order.status == status)
    return list(db.scalars(query.order_by(Order.created_at.desc(), Order.id.desc())).all())


def get_owned_order(db: Session, order_id: int, owner: User) -> Order:
    order = db.get(Order, order_id)
    if order is None or order.restaurant.owner_id != owner.id:
        raise OrderNotFoundError(order_id)
    return order


def update_order_status(
    db: Session,
    order: Order,
    new_status: str,
    actor: User,
    now: datetime | None = None,
) -> Order:
    if new_status not in ORDER_STATUSES:
        raise OrderStatusError(f"Unknown order status: {new_status}")
    if not can_transition(order.status, new_status):
        raise OrderStatusError(f"Cannot change order status from {order.status} to {new_status}")

    previous = order.status
    set_status(order, new_status, now or datetime.now(timezone.utc))
    log_action(
        db,
        actor=actor,
        action_type="order_status_changed",
        restaurant_id=order.restaurant_id,
        before_snapshot={"order_id": order.id, "status": previous},
        after_snapshot={"order_id": order.id, "status": new_status},
    )
    db.commit()
    db.refresh(order)
    logger.info("[ORDER] order_id=%s %s -> %s", order.id, previous, new_status)
    return order
