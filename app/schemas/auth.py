"""Auth API schemas."""

from pydantic import ConfigDict, EmailStr, Field

from app.domain.enums import TokenPurpose
from app.schemas.common import CamelModel
from app.schemas.user import UserResponse


class CheckUserRequest(CamelModel):
    email: EmailStr
    is_forget: bool = Field(default=False, description="Send a fresh OTP even if a password is set")


class CheckUserResponse(CamelModel):
    has_password: bool


class LoginRequest(CamelModel):
    """Request body for login."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class LoginResponse(CamelModel):
    """Login/set-password result. The refresh token travels only in its cookie."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class AccessTokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"


class EmailRequest(CamelModel):
    """Body for forgot-password and resend-otp."""

    email: EmailStr


class ValidateOtpRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$", description="6-digit code")
    purpose: TokenPurpose


class PurposeTokenResponse(CamelModel):
    """Purpose token to send as `set-token` or `reset-token: Bearer <t>`."""

    token: str
    purpose: TokenPurpose


class SetPasswordRequest(CamelModel):
    password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class ResetPasswordRequest(CamelModel):
    password: str = Field(..., min_length=8, description="New password (min 8 characters)")
    confirm_password: str = Field(..., min_length=8)
