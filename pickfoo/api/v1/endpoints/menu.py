"""Menu item and category endpoints for restaurant owners."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pickfoo.core.security import require_role
from pickfoo.db.session import get_db
from pickfoo.models.menu import MenuCategory, MenuItem
from pickfoo.models.user import User
from pickfoo.schemas.menu import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdate,
    RestaurantAssignment,
)
from pickfoo.services import menu_service, restaurant_service
from pickfoo.services.menu_service import MenuNotFoundError, MenuValidationError

router: APIRouter = APIRouter()

require_owner = require_role("OWNER")


def _item_or_404(db: Session, item_id: int, owner: User) -> MenuItem:
    try:
        return menu_service.get_owned_menu_item(db, item_id, owner)
    except MenuNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found") from exc


def _category_or_404(db: Session, category_id: int, owner: User) -> MenuCategory:
    try:
        return menu_service.get_owned_category(db, category_id, owner)
    except MenuNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found") from exc


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> CategoryResponse:
    try:
        category = menu_service.create_category(db, current_user, payload)
    except MenuValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryResponse.model_validate(category)


@router.get("/categories", response_model=CategoryListResponse)
def get_my_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> CategoryListResponse:
    categories = menu_service.list_owner_categories(db, current_user)
    return CategoryListResponse(
        count=len(categories),
        items=[CategoryResponse.model_validate(item) for item in categories],
    )


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> CategoryResponse:
    category = _category_or_404(db, category_id, current_user)
    try:
        category = menu_service.update_category(db, category, current_user, payload)
    except MenuValidationError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> None:
    category = _category_or_404(db, category_id, current_user)
    menu_service.delete_category(db, category)


@router.get("/restaurant/{restaurant_id}", response_model=MenuItemListResponse)
def get_restaurant_menu(restaurant_id: int, db: Session = Depends(get_db)) -> MenuItemListResponse:
    """Public menu: active dishes assigned to the restaurant."""
    if restaurant_service.get_restaurant(db, restaurant_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    items = menu_service.list_restaurant_menu(db, restaurant_id)
    return MenuItemListResponse(count=len(items), items=[MenuItemResponse.model_validate(item) for item in items])


@router.post("", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    payload: MenuItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> MenuItemResponse:
    """Add a dish to the owner's pool; assign it to restaurants separately."""
    item = menu_service.create_menu_item(db, current_user, payload)
    return MenuItemResponse.model_validate(item)


@router.get("", response_model=MenuItemListResponse)
def get_my_menu_items(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> MenuItemListResponse:
    items = menu_service.list_owner_menu_items(db, current_user)
    return MenuItemListResponse(count=len(items), items=[MenuItemResponse.model_validate(item) for item in items])


@router.put("/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> MenuItemResponse:
    item = _item_or_404(db, item_id, current_user)
    item = menu_service.update_menu_item(db, item, payload)
    return MenuItemResponse.model_validate(item)


@router.put("/{item_id}/assign-restaurants", response_model=MenuItemResponse)
def assign_menu_item(
    item_id: int,
    payload: RestaurantAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> MenuItemResponse:
    item = _item_or_404(db, item_id, current_user)
    try:
        item = menu_service.assign_to_restaurants(db, item, current_user, payload.restaurant_ids)
    except MenuValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MenuItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> None:
    item = _item_or_404(db, item_id, current_user)
    menu_service.delete_menu_item(db, item)
