"""Authentication schemas."""

from pydantic import EmailStr, Field

from eventhub.schemas.common import BaseSchema
from eventhub.schemas.user import UserResponse


class RegisterRequest(BaseSchema):
    """Schema for registering a new user."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(None, max_length=30)


class LoginRequest(BaseSchema):
    """Schema for logging in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseSchema):
    """Bearer token issued on register or login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
