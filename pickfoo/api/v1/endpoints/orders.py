"""Order tracking endpoints for restaurant owners."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pickfoo.core.security import require_role
from pickfoo.db.session import get_db
from pickfoo.models.user import User
from pickfoo.schemas.order import OrderListResponse, OrderResponse, OrderStatusUpdate
from pickfoo.services import order_service
from pickfoo.services.order_service import OrderNotFoundError, OrderStatusError

router: APIRouter = APIRouter()

require_owner = require_role("OWNER")


@router.get("/my-orders", response_model=OrderListResponse)
def get_my_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> OrderListResponse:
    """Orders across all restaurants the caller owns, newest first."""
    orders = order_service.list_owner_orders(db, current_user, status=status_filter)
    return OrderListResponse(count=len(orders), items=[OrderResponse.model_validate(order) for order in orders])


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner),
) -> OrderResponse:
    try:
        order = order_service.get_owned_order(db, order_id, current_user)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    try:
        order = order_service.update_order_status(db, order, payload.status, current_user)
    except OrderStatusError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return OrderResponse.model_validate(order)
