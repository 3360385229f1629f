"""Owner-facing order schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class OrderItemResponse(BaseModel):
    """Serialized order line snapshot."""

    menu_item_id: int | None
    name: str
    quantity: int
    price_cents: int

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Serialized order for the restaurant dashboard."""

    id: int
    restaurant_id: int
    customer_name: str
    customer_email: str
    delivery_address: str
    items: list[OrderItemResponse]
    total_cents: int
    status: str
    payment_status: str
    payment_method: str
    created_at: datetime
    status_updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class OrderListResponse(BaseModel):
    count: int
    items: list[OrderResponse]


class OrderStatusUpdate(BaseModel):
    """Payload for progressing an order."""

    status: str
