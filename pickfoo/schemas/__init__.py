"""Schema exports."""

from pickfoo.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse
from pickfoo.schemas.menu import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdate,
    MenuVariant,
    RestaurantAssignment,
)
from pickfoo.schemas.order import OrderItemResponse, OrderListResponse, OrderResponse, OrderStatusUpdate
from pickfoo.schemas.restaurant import (
    OpeningHoursEntry,
    OpeningHoursResponse,
    RestaurantCreate,
    RestaurantListResponse,
    RestaurantResponse,
    RestaurantUpdate,
    VerificationDecision,
)

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "CategoryCreate",
    "CategoryListResponse",
    "CategoryResponse",
    "CategoryUpdate",
    "MenuItemCreate",
    "MenuItemListResponse",
    "MenuItemResponse",
    "MenuItemUpdate",
    "MenuVariant",
    "RestaurantAssignment",
    "OrderItemResponse",
    "OrderListResponse",
    "OrderResponse",
    "OrderStatusUpdate",
    "OpeningHoursEntry",
    "OpeningHoursResponse",
    "RestaurantCreate",
    "RestaurantListResponse",
    "RestaurantResponse",
    "RestaurantUpdate",
    "VerificationDecision",
]
