"""Application models package."""

from pickfoo.models.audit_log import AuditLog
from pickfoo.models.menu import MenuCategory, MenuItem, menu_item_restaurants
from pickfoo.models.order import Order, OrderItem
from pickfoo.models.restaurant import RESTAURANT_STATUSES, Restaurant, RestaurantOpeningHours
from pickfoo.models.user import User

__all__ = [
    "AuditLog",
    "MenuCategory",
    "MenuItem",
    "menu_item_restaurants",
    "Order",
    "OrderItem",
    "Restaurant",
    "RestaurantOpeningHours",
    "RESTAURANT_STATUSES",
    "User",
]
