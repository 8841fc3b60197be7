"""User API schemas."""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field

from app.domain.enums import UserRole
from app.schemas.common import CamelModel

PHONE_PATTERN = r"^(\+\d{1,4}\s?)?(\d{1,4}[-.\s]?)?\(?\d{1,6}\)?[-.\s]?\d{1,9}([-.\s]?\d{1,5})?$"


class UserCreateRequest(CamelModel):
    """Request body for POST /users. Without a password the user sets one via OTP."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    role: UserRole
    phone_number: str | None = Field(default=None, pattern=PHONE_PATTERN, max_length=32)
    password: str | None = Field(default=None, min_length=8)


class UserStatusRequest(CamelModel):
    status: bool = Field(..., description="True enables the account, False disables it")


class ChangePasswordRequest(CamelModel):
    """Request body for PATCH /users/me/password. oldPassword is ignored when none is set."""

    old_password: str = ""
    new_password: str = Field(..., min_length=8)


class UserResponse(CamelModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: str
    is_active: bool
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    has_password: bool = False
    created_at: datetime | None = None


class UserListResponse(CamelModel):
    items: list[UserResponse]
    total: int
    skip: int
    limit: int
    has_next: bool
