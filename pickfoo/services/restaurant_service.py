"""Restaurant profile operations and the scheduler's persistence adapter."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from pickfoo.db import session as db_session
from pickfoo.models.restaurant import Restaurant, RestaurantOpeningHours
from pickfoo.models.user import User
from pickfoo.schemas.restaurant import OpeningHoursEntry, RestaurantCreate, RestaurantUpdate
from pickfoo.services.audit_service import log_action
from pickfoo.services.reconciler import RestaurantSnapshot
from pickfoo.services.restaurant_status import can_admin_transition, can_owner_transition
from pickfoo.services.schedule import OpeningWindow, ScheduleFetchError, ScheduleWriteError

logger = logging.getLogger(__name__)

PROFILE_FIELDS: tuple[str, ...] = (
    "name",
    "description",
    "street",
    "city",
    "state",
    "zip_code",
    "contact_number",
    "email",
    "image",
    "fssai_license_number",
    "fssai_certificate_url",
    "gst_number",
    "trade_license_number",
    "pan_number",
)


class RestaurantNotFoundError(Exception):
    """Raised when a restaurant does not exist or is not visible to the caller."""


class VerificationError(Exception):
    """Raised when a status change is not allowed."""


def _availability_snapshot(restaurant: Restaurant) -> dict[str, Any]:
    return {"is_open": restaurant.is_open, "is_manual_override": restaurant.is_manual_override}


def to_snapshot(restaurant: Restaurant) -> RestaurantSnapshot:
    """Detach the fields the scheduler needs from an ORM row."""
    return RestaurantSnapshot(
        id=restaurant.id,
        name=restaurant.name,
        status=restaurant.status,
        is_open=restaurant.is_open,
        is_manual_override=restaurant.is_manual_override,
        opening_hours=tuple(
            OpeningWindow(day=row.day, open_time=row.open_time, close_time=row.close_time, is_closed=row.is_closed)
            for row in restaurant.opening_hours
        ),
    )


class SqlRestaurantStore:
    """Restaurant store backed by SQLAlchemy; one short session per call."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory

    def _session(self) -> Session:
        if self._session_factory is not None:
            return self._session_factory()
        return db_session.SessionLocal()

    def find_eligible(self) -> list[RestaurantSnapshot]:
        try:
            with self._session() as db:
                rows = db.scalars(
                    select(Restaurant)
                    .options(selectinload(Restaurant.opening_hours))
                    .where(Restaurant.status == "active", Restaurant.is_manual_override.is_(False))
                    .order_by(Restaurant.id.asc())
                ).all()
                return [to_snapshot(row) for row in rows]
        except SQLAlchemyError as exc:
            raise ScheduleFetchError(f"Could not load eligible restaurants: {exc}") from exc

    def find_overridden_ids(self) -> list[int]:
        try:
            with self._session() as db:
                return list(
                    db.scalars(
                        select(Restaurant.id)
                        .where(Restaurant.status == "active", Restaurant.is_manual_override.is_(True))
                        .order_by(Restaurant.id.asc())
                    ).all()
                )
        except SQLAlchemyError as exc:
            raise ScheduleFetchError(f"Could not load overridden restaurants: {exc}") from exc

    def refresh(self, restaurant_id: int) -> RestaurantSnapshot | None:
        with self._session() as db:
            restaurant = db.get(Restaurant, restaurant_id, options=[selectinload(Restaurant.opening_hours)])
            if restaurant is None:
                return None
            return to_snapshot(restaurant)

    def set_open(self, restaurant_id: int, is_open: bool) -> bool:
        with self._session() as db:
            try:
                result = db.execute(
                    update(Restaurant)
                    .where(
                        Restaurant.id == restaurant_id,
                        Restaurant.status == "active",
                        Restaurant.is_manual_override.is_(False),
                        Restaurant.is_open != is_open,
                    )
                    .values(is_open=is_open, updated_at=datetime.now(timezone.utc))
                    .execution_options(synchronize_session=False)
                )
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise ScheduleWriteError(f"Could not update restaurant {restaurant_id}: {exc}") from exc
            return result.rowcount == 1


def get_restaurant(db: Session, restaurant_id: int) -> Restaurant | None:
    return db.get(Restaurant, restaurant_id)


def get_owned_restaurant(db: Session, restaurant_id: int, owner: User) -> Restaurant:
    """Return restaurant owned by ``owner``; 404-style error otherwise to avoid leaking ids."""
    restaurant = get_restaurant(db, restaurant_id)
    if restaurant is None or restaurant.owner_id != owner.id:
        raise RestaurantNotFoundError(restaurant_id)
    return restaurant


def list_owner_restaurants(db: Session, owner: User) -> list[Restaurant]:
    return list(
        db.scalars(
            select(Restaurant).where(Restaurant.owner_id == owner.id).order_by(Restaurant.created_at.asc(), Restaurant.id.asc())
        ).all()
    )


def replace_opening_hours(restaurant: Restaurant, entries: list[OpeningHoursEntry]) -> None:
    """Replace the weekly schedule, preserving submitted order."""
    restaurant.opening_hours = [
        RestaurantOpeningHours(
            position=index,
            day=entry.day,
            open_time=entry.open_time,
            close_time=entry.close_time,
            is_closed=entry.is_closed,
        )
        for index, entry in enumerate(entries)
    ]


def create_restaurant(db: Session, owner: User, payload: RestaurantCreate) -> Restaurant:
    """Create a restaurant in ``inactive`` state until legal papers are reviewed."""
    restaurant = Restaurant(owner_id=owner.id, status="inactive", is_open=False, is_manual_override=False)
    for field_name in PROFILE_FIELDS:
        setattr(restaurant, field_name, getattr(payload, field_name))
    replace_opening_hours(restaurant, payload.opening_hours)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    logger.info("Restaurant created id=%s owner_id=%s", restaurant.id, owner.id)
    return restaurant


def _ensure_verifiable(restaurant: Restaurant) -> None:
    if not restaurant.fssai_license_number:
        raise VerificationError("FSSAI License Number is required for verification")


def update_restaurant(db: Session, restaurant: Restaurant, payload: RestaurantUpdate, actor: User) -> Restaurant:
    """Apply an owner's partial update.

    Changing ``is_open`` to a new value also raises the manual override flag in
    the same commit, which takes the restaurant out of automatic scheduling.
    """
    data = payload.model_dump(exclude_unset=True)

    for field_name in PROFILE_FIELDS:
        if field_name in data and data[field_name] is not None:
            setattr(restaurant, field_name, data[field_name])

    new_status = data.get("status")
    if new_status is not None and new_status != restaurant.status:
        if not can_owner_transition(restaurant.status, new_status):
            raise VerificationError(f"Cannot change status from {restaurant.status} to {new_status}")
        _ensure_verifiable(restaurant)
        restaurant.status = new_status

    if payload.opening_hours is not None:
        replace_opening_hours(restaurant, payload.opening_hours)

    new_open = data.get("is_open")
    if new_open is not None and new_open != restaurant.is_open:
        before = _availability_snapshot(restaurant)
        restaurant.is_open = new_open
        restaurant.is_manual_override = True
        log_action(
            db,
            actor=actor,
            action_type="manual_override_set",
            restaurant_id=restaurant.id,
            before_snapshot=before,
            after_snapshot=_availability_snapshot(restaurant),
        )
        logger.info("[OVERRIDE] restaurant_id=%s set is_open=%s manually", restaurant.id, new_open)

    db.commit()
    db.refresh(restaurant)
    return restaurant


def submit_for_verification(db: Session, restaurant: Restaurant, actor: User) -> Restaurant:
    """Move the restaurant to ``pending`` so an admin can review its documents."""
    if not can_owner_transition(restaurant.status, "pending"):
        raise VerificationError(f"Cannot submit a restaurant in status {restaurant.status}")
    _ensure_verifiable(restaurant)
    before = {"status": restaurant.status}
    restaurant.status = "pending"
    log_action(
        db,
        actor=actor,
        action_type="verification_submitted",
        restaurant_id=restaurant.id,
        before_snapshot=before,
        after_snapshot={"status": restaurant.status},
    )
    db.commit()
    db.refresh(restaurant)
    return restaurant


def reset_manual_override(db: Session, restaurant: Restaurant, actor: User) -> Restaurant:
    """Hand availability back to the schedule; ``is_open`` is left as-is."""
    if restaurant.is_manual_override:
        before = _availability_snapshot(restaurant)
        restaurant.is_manual_override = False
        log_action(
            db,
            actor=actor,
            action_type="manual_override_reset",
            restaurant_id=restaurant.id,
            before_snapshot=before,
            after_snapshot=_availability_snapshot(restaurant),
        )
        db.commit()
        db.refresh(restaurant)
        logger.info("[OVERRIDE] restaurant_id=%s returned to schedule control", restaurant.id)
    return restaurant


def set_verification_status(
    db: Session,
    restaurant: Restaurant,
    new_status: str,
    actor: User,
    notes: str | None = None,
) -> Restaurant:
    """Record an admin verification decision."""
    if not can_admin_transition(restaurant.status, new_status):
        raise VerificationError(f"Cannot change status from {restaurant.status} to {new_status}")
    before = {"status": restaurant.status, "verification_notes": restaurant.verification_notes}
    restaurant.status = new_status
    if notes is not None:
        restaurant.verification_notes = notes
    log_action(
        db,
        actor=actor,
        action_type="verification_decision",
        restaurant_id=restaurant.id,
        before_snapshot=before,
        after_snapshot={"status": restaurant.status, "verification_notes": restaurant.verification_notes},
    )
    db.commit()
    db.refresh(restaurant)
    return restaurant


def delete_restaurant(db: Session, restaurant: Restaurant) -> None:
    db.delete(restaurant)
    db.commit()
