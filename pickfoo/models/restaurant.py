"""Restaurant-related ORM models."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pickfoo.db.base import Base

RESTAURANT_STATUSES = ("inactive", "pending", "active", "rejected", "suspended")


class Restaurant(Base):
    """Represents an owner's restaurant listed on the marketplace."""

    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    street: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(128), nullable=False, default="Kerala")
    zip_code: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    contact_number: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    image: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    fssai_license_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    fssai_certificate_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    gst_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    trade_license_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    pan_number: Mapped[str | None] = mapped_column(String(32), nullable=True)

    status: Mapped[str] = mapped_column(
        Enum(*RESTAURANT_STATUSES, name="restaurant_status"),
        nullable=False,
        default="inactive",
        index=True,
    )
    verification_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    num_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_manual_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    opening_hours: Mapped[list["RestaurantOpeningHours"]] = relationship(
        back_populates="restaurant",
        order_by="RestaurantOpeningHours.position",
        cascade="all, delete-orphan",
    )
    menu_items: Mapped[list["MenuItem"]] = relationship(
        secondary="menu_item_restaurants",
        back_populates="restaurants",
    )
    orders: Mapped[list["Order"]] = relationship(
        back_populates="restaurant",
        cascade="all, delete-orphan",
    )


class RestaurantOpeningHours(Base):
    """One weekday window of a restaurant's weekly schedule (day 0 is Sunday)."""

    __tablename__ = "restaurant_opening_hours"

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    open_time: Mapped[str] = mapped_column(String(5), nullable=False, default="09:00")
    close_time: Mapped[str] = mapped_column(String(5), nullable=False, default="22:00")
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    restaurant: Mapped[Restaurant] = relationship(back_populates="opening_hours")
