"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Payload for owner registration."""

    name: str = ""
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    role: str = "owner"


class LoginRequest(BaseModel):
    """Payload for user login."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"


class AuthUserResponse(BaseModel):
    """User response for auth endpoints."""

    id: int
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)
