"""Restaurant profile API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HHMM_PATTERN: str = r"^([01]\d|2[0-3]):[0-5]\d$"


class OpeningHoursEntry(BaseModel):
    """One weekday window; day 0 is Sunday."""

    day: int = Field(ge=0, le=6)
    open_time: str = Field(default="09:00", pattern=HHMM_PATTERN)
    close_time: str = Field(default="22:00", pattern=HHMM_PATTERN)
    is_closed: bool = False

    @model_validator(mode="after")
    def check_same_day_window(self) -> "OpeningHoursEntry":
        # HH:MM strings compare in clock order.
        if not self.is_closed and self.close_time <= self.open_time:
            raise ValueError("close_time must be after open_time; overnight windows are not supported")
        return self


def _validate_week(entries: list[OpeningHoursEntry] | None) -> list[OpeningHoursEntry] | None:
    if entries is None:
        return None
    if len(entries) > 7:
        raise ValueError("At most 7 opening-hours entries are allowed")
    days = [entry.day for entry in entries]
    if len(set(days)) != len(days):
        raise ValueError("Each day may appear only once in opening_hours")
    return entries


class RestaurantCreate(BaseModel):
    """Payload for creating a restaurant; status always starts inactive."""

    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    street: str = ""
    city: str = ""
    state: str = "Kerala"
    zip_code: str = ""
    contact_number: str = ""
    email: str = ""
    image: str = ""
    fssai_license_number: str | None = None
    fssai_certificate_url: str | None = None
    gst_number: str | None = None
    trade_license_number: str | None = None
    pan_number: str | None = None
    opening_hours: list[OpeningHoursEntry] = Field(default_factory=list)

    validate_week = field_validator("opening_hours")(_validate_week)


class RestaurantUpdate(BaseModel):
    """Partial owner update; only fields that were sent are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    contact_number: str | None = None
    email: str | None = None
    image: str | None = None
    fssai_license_number: str | None = None
    fssai_certificate_url: str | None = None
    gst_number: str | None = None
    trade_license_number: str | None = None
    pan_number: str | None = None
    status: str | None = None
    is_open: bool | None = None
    opening_hours: list[OpeningHoursEntry] | None = None

    validate_week = field_validator("opening_hours")(_validate_week)


class OpeningHoursResponse(BaseModel):
    """Stored opening-hours row as returned to clients."""

    day: int
    open_time: str
    close_time: str
    is_closed: bool

    model_config = ConfigDict(from_attributes=True)


class VerificationDecision(BaseModel):
    """Admin decision on a restaurant's verification state."""

    status: str
    verification_notes: str | None = None


class RestaurantResponse(BaseModel):
    """Serialized restaurant profile."""

    id: int
    owner_id: int
    name: str
    description: str
    street: str
    city: str
    state: str
    zip_code: str
    contact_number: str
    email: str
    image: str
    fssai_license_number: str | None
    gst_number: str | None
    trade_license_number: str | None
    pan_number: str | None
    status: str
    verification_notes: str | None
    rating: float
    num_reviews: int
    is_open: bool
    is_manual_override: bool
    opening_hours: list[OpeningHoursResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RestaurantListResponse(BaseModel):
    """Owner restaurant listing."""

    count: int
    items: list[RestaurantResponse]
