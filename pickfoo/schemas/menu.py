"""Menu item and category API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class MenuVariant(BaseModel):
    """Priced variant of a dish, e.g. half and full portions."""

    name: str = Field(min_length=1, max_length=64)
    price_cents: int = Field(ge=0)


class MenuItemCreate(BaseModel):
    """Payload for adding a dish to the owner's pool."""

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    price_cents: int = Field(ge=0)
    variants: list[MenuVariant] = Field(default_factory=list)
    image: str = ""
    category: str = Field(min_length=1, max_length=255)
    is_veg: bool = True
    is_active: bool = True
    ingredients: list[str] = Field(default_factory=list)


class MenuItemUpdate(BaseModel):
    """Partial dish update; only fields that were sent are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    price_cents: int | None = Field(default=None, ge=0)
    variants: list[MenuVariant] | None = None
    image: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=255)
    is_veg: bool | None = None
    is_active: bool | None = None
    ingredients: list[str] | None = None


class MenuItemResponse(BaseModel):
    """Serialized dish with the restaurants offering it."""

    id: int
    owner_id: int
    name: str
    description: str
    price_cents: int
    variants: list[MenuVariant]
    image: str
    category: str
    is_veg: bool
    is_active: bool
    ingredients: list[str]
    restaurant_ids: list[int]

    model_config = ConfigDict(from_attributes=True)


class MenuItemListResponse(BaseModel):
    count: int
    items: list[MenuItemResponse]


class RestaurantAssignment(BaseModel):
    """Replaces the set of restaurants a dish is offered by."""

    restaurant_ids: list[int]


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    image: str = ""
    parent_id: int | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    image: str | None = None
    parent_id: int | None = None


class CategoryResponse(BaseModel):
    """Serialized menu category."""

    id: int
    owner_id: int
    name: str
    image: str
    parent_id: int | None

    model_config = ConfigDict(from_attributes=True)


class CategoryListResponse(BaseModel):
    count: int
    items: list[CategoryResponse]
