"""Restaurant profile endpoints for owners, plus the admin verification decision."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pickfoo.core.security import require_role
from pickfoo.db.session import get_db
from pickfoo.models.restaurant import Restaurant
from pickfoo.models.user import User
from pickfoo.schemas.restaurant import (
    RestaurantCreate,
    RestaurantListResponse,
    RestaurantResponse,
    RestaurantUpdate,
    VerificationDecision,
)
from pickfoo.services import restaurant_service
from pickfoo.services.restaurant_service import RestaurantNotFoundError, VerificationError

router: APIRouter = APIRouter()

require_owner = require_role("OWNER")
require_admin = require_role("ADMIN")


def _owned_or_404(db: Session, restaurant_id: int, owner: User) -> Restaurant:
    try:
        return restaurant_service.get_owned_restaurant(db, restaurant_id, owner)
    except RestaurantNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found") from exc


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    payload: RestaurantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> RestaurantResponse:
    """Create a restaurant; it stays inactive until submitted and verified."""
    restaurant = restaurant_service.create_restaurant(db, current_user, payload)
    return RestaurantResponse.model_validate(restaurant)


@router.get("/my-restaurants", response_model=RestaurantListResponse)
def get_my_restaurants(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> RestaurantListResponse:
    restaurants = restaurant_service.list_owner_restaurants(db, current_user)
    return RestaurantListResponse(
        count=len(restaurants),
        items=[RestaurantResponse.model_validate(item) for item in restaurants],
    )


@router.get("/my-restaurant", response_model=RestaurantResponse)
def get_my_restaurant(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> RestaurantResponse:
    """Return the owner's first restaurant, for single-restaurant dashboards."""
    restaurants = restaurant_service.list_owner_restaurants(db, current_user)
    if not restaurants:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No restaurant found for this owner")
    return RestaurantResponse.model_validate(restaurants[0])


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(restaurant_id: int, db: Session = Depends(get_db)) -> RestaurantResponse:
    restaurant = restaurant_service.get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return RestaurantResponse.model_validate(restaurant)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: int,
    payload: RestaurantUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> RestaurantResponse:
    """Update profile fields, opening hours or availability.

    Sending an ``is_open`` that differs from the stored value switches the
    restaurant to manual override.
    """
    restaurant = _owned_or_404(db, restaurant_id, current_user)
    try:
        restaurant = restaurant_service.update_restaurant(db, restaurant, payload, current_user)
    except VerificationError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RestaurantResponse.model_validate(restaurant)


@router.put("/{restaurant_id}/submit-verification", response_model=RestaurantResponse)
def submit_for_verification(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> RestaurantResponse:
    restaurant = _owned_or_404(db, restaurant_id, current_user)
    try:
        restaurant = restaurant_service.submit_for_verification(db, restaurant, current_user)
    except VerificationError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RestaurantResponse.model_validate(restaurant)


@router.post("/{restaurant_id}/reset-override", response_model=RestaurantResponse)
def reset_override(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> RestaurantResponse:
    """Return availability control to the weekly schedule from the next tick on."""
    restaurant = _owned_or_404(db, restaurant_id, current_user)
    restaurant = restaurant_service.reset_manual_override(db, restaurant, current_user)
    return RestaurantResponse.model_validate(restaurant)


@router.put("/{restaurant_id}/status", response_model=RestaurantResponse)
def set_verification_status(
    restaurant_id: int,
    payload: VerificationDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> RestaurantResponse:
    restaurant = restaurant_service.get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    try:
        restaurant = restaurant_service.set_verification_status(
            db,
            restaurant,
            payload.status,
            current_user,
            notes=payload.verification_notes,
        )
    except VerificationError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RestaurantResponse.model_validate(restaurant)


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> None:
    restaurant = _owned_or_404(db, restaurant_id, current_user)
    restaurant_service.delete_restaurant(db, restaurant)
