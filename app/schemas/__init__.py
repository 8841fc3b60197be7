"""Pydantic request/response schemas for the API."""

from app.schemas.auth import (
    AccessTokenResponse,
    CheckUserRequest,
    CheckUserResponse,
    EmailRequest,
    LoginRequest,
    LoginResponse,
    PurposeTokenResponse,
    ResetPasswordRequest,
    SetPasswordRequest,
    ValidateOtpRequest,
)
from app.schemas.common import ApiResponse, CamelModel, ok
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.user import (
    ChangePasswordRequest,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserStatusRequest,
)

__all__ = [
    "AccessTokenResponse",
    "ApiResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "CheckUserRequest",
    "CheckUserResponse",
    "EmailRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "PurposeTokenResponse",
    "ReadinessResponse",
    "ResetPasswordRequest",
    "SetPasswordRequest",
    "UserCreateRequest",
    "UserListResponse",
    "UserResponse",
    "UserStatusRequest",
    "ok",
]
