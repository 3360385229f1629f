"""Menu item and category helpers for restaurant owners."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from pickfoo.models.menu import MenuCategory, MenuItem, menu_item_restaurants
from pickfoo.models.restaurant import Restaurant
from pickfoo.models.user import User
from pickfoo.schemas.menu import CategoryCreate, CategoryUpdate, MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)


class MenuNotFoundError(Exception):
    """Raised when a menu item or category does not exist or belongs to someone else."""


class MenuValidationError(Exception):
    """Raised when a menu change references restaurants or categories the owner does not have."""


def list_owner_menu_items(db: Session, owner: User) -> list[MenuItem]:
    """Return the owner's whole dish pool, active and inactive."""
    return list(
        db.scalars(
            select(MenuItem)
            .options(selectinload(MenuItem.restaurants))
            .where(MenuItem.owner_id == owner.id)
            .order_by(MenuItem.id.asc())
        ).all()
    )


def list_restaurant_menu(db: Session, restaurant_id: int) -> list[MenuItem]:
    """Return active dishes offered by one restaurant."""
    return list(
        db.scalars(
            select(MenuItem)
            .join(menu_item_restaurants, menu_item_restaurants.c.menu_item_id == MenuItem.id)
            .options(selectinload(MenuItem.restaurants))
            .where(menu_item_restaurants.c.restaurant_id == restaurant_id, MenuItem.is_active.is_(True))
            .order_by(MenuItem.id.asc())
        ).all()
    )


def get_owned_menu_item(db: Session, item_id: int, owner: User) -> MenuItem:
    item = db.get(MenuItem, item_id)
    if item is None or item.owner_id != owner.id:
        raise MenuNotFoundError(item_id)
    return item


def create_menu_item(db: Session, owner: User, payload: MenuItemCreate) -> MenuItem:
    item = MenuItem(owner_id=owner.id, **payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Menu item created id=%s owner_id=%s", item.id, owner.id)
    return item


def update_menu_item(db: Session, item: MenuItem, payload: MenuItemUpdate) -> MenuItem:
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(item, field_name, value)
    db.commit()
    db.refresh(item)
    return item


def assign_to_restaurants(db: Session, item: MenuItem, owner: User, restaurant_ids: list[int]) -> MenuItem:
    """Replace the restaurants offering ``item``; every id must belong to ``owner``."""
    wanted = set(restaurant_ids)
    restaurants = list(
        db.scalars(
            select(Restaurant)
            .where(Restaurant.id.in_(wanted), Restaurant.owner_id == owner.id)
            .order_by(Restaurant.id.asc())
        ).all()
    )
    if len(restaurants) != len(wanted):
        raise MenuValidationError("One or more restaurants are invalid or not owned by you")
    item.restaurants = restaurants
    db.commit()
    db.refresh(item)
    logger.info("Menu item id=%s assigned to restaurants %s", item.id, sorted(wanted))
    return item


def delete_menu_item(db: Session, item: MenuItem) -> None:
    db.delete(item)
    db.commit()


def list_owner_categories(db: Session, owner: User) -> list[MenuCategory]:
    return list(
        db.scalars(
            select(MenuCategory).where(MenuCategory.owner_id == owner.id).order_by(MenuCategory.id.asc())
        ).all()
    )


def get_owned_category(db: Session, category_id: int, owner: User) -> MenuCategory:
    category = db.get(MenuCategory, category_id)
    if category is None or category.owner_id != owner.id:
        raise MenuNotFoundError(category_id)
    return category


def _check_parent(db: Session, owner: User, parent_id: int | None, category_id: int | None = None) -> None:
    if parent_id is None:
        return
    parent = db.get(MenuCategory, parent_id)
    if parent is None or parent.owner_id != owner.id:
        raise MenuValidationError("Parent category not found")
    ancestor: MenuCategory | None = parent
    while ancestor is not None:
        if ancestor.id == category_id:
            raise MenuValidationError("A category cannot be nested under itself")
        ancestor = db.get(MenuCategory, ancestor.parent_id) if ancestor.parent_id is not None else None


def create_category(db: Session, owner: User, payload: CategoryCreate) -> MenuCategory:
    _check_parent(db, owner, payload.parent_id)
    category = MenuCategory(owner_id=owner.id, **payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category: MenuCategory, owner: User, payload: CategoryUpdate) -> MenuCategory:
    data = payload.model_dump(exclude_unset=True)
    if "parent_id" in data:
        # An explicit null detaches the category from its parent.
        _check_parent(db, owner, data["parent_id"], category.id)
        category.parent_id = data["parent_id"]
    for field_name in ("name", "image"):
        if data.get(field_name) is not None:
            setattr(category, field_name, data[field_name])
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category: MenuCategory) -> None:
    """Delete a category; its direct children move up to the top level."""
    children = db.scalars(select(MenuCategory).where(MenuCategory.parent_id == category.id)).all()
    for child in children:
        child.parent_id = None
    db.delete(category)
    db.commit()
