"""Application DTOs (no ORM dependency)."""

from app.application.dtos.auth import (
    AccessClaims,
    CurrentUser,
    EmailCheckResult,
    LoginResult,
    OtpRecord,
    OtpResult,
    PurposeClaims,
)
from app.application.dtos.user import UserCreate, UserPage, UserResult

__all__ = [
    "AccessClaims",
    "CurrentUser",
    "EmailCheckResult",
    "LoginResult",
    "OtpRecord",
    "OtpResult",
    "PurposeClaims",
    "UserCreate",
    "UserPage",
    "UserResult",
]
