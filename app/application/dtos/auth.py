"""DTOs for the credential lifecycle: token claims, login and OTP results."""

from dataclasses import dataclass
from datetime import datetime

from app.application.dtos.user import UserResult


@dataclass(frozen=True)
class AccessClaims:
    """Verified access-token subject. The role is as minted, not necessarily current."""

    user_id: str
    role: str


@dataclass(frozen=True)
class PurposeClaims:
    """Verified purpose-token claims; purpose is the raw claim value."""

    user_id: str
    role: str
    email: str
    purpose: str


@dataclass(frozen=True)
class LoginResult:
    """Tokens minted at login plus the authenticated user."""

    access_token: str
    refresh_token: str
    user: UserResult


@dataclass(frozen=True)
class EmailCheckResult:
    has_password: bool


@dataclass(frozen=True)
class OtpResult:
    """An issued OTP. The code never leaves the service layer except via the sender."""

    email: str
    expires_at: datetime


@dataclass(frozen=True)
class CurrentUser:
    """Identity attached to an authorized request (live role from the store)."""

    id: str
    email: str
    role: str


@dataclass(frozen=True)
class OtpRecord:
    """Stored OTP row as seen by the OTP service (includes the code)."""

    email: str
    code: str
    expires_at: datetime
    created_at: datetime | None = None
