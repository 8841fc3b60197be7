"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.auth import AccessClaims, PurposeClaims
    from app.domain.enums import TokenPurpose


class ITokenService(Protocol):
    """Protocol for minting and verifying access, refresh and purpose tokens.

    verify_* raise ExpiredTokenError / InvalidTokenError (both ValueError).
    """

    def create_access_token(self, user_id: str, role: str) -> str:
        """Mint a short-lived access token."""

    def create_refresh_token(self, user_id: str) -> str:
        """Mint a refresh token signed with the refresh secret."""

    def create_purpose_token(
        self, user_id: str, role: str, email: str, purpose: TokenPurpose
    ) -> str:
        """Mint a purpose token for one recovery intent."""

    def verify_access_token(self, token: str) -> AccessClaims:
        """Return access claims or raise a token error."""

    def verify_refresh_token(self, token: str) -> str:
        """Return the subject user id or raise a token error."""

    def verify_purpose_token(self, token: str) -> PurposeClaims:
        """Return purpose claims or raise a token error."""


class IOtpSender(Protocol):
    """Out-of-band delivery of one-time codes (email, SMS, console)."""

    async def send_otp(self, email: str, code: str, expires_at: datetime) -> None:
        """Deliver code to email. Raise on delivery failure."""


class ICounterStore(Protocol):
    """Fixed-window counter store shared by concurrent requests."""

    async def incr(self, key: str, window_seconds: int) -> tuple[int, int]:
        """Atomically increment key's counter; return (count, seconds until reset).

        The first hit opens the window; the counter resets once it elapses.
        """


class IPasswordHasher(Protocol):
    """One-way password hashing. Implementations must not block the event loop."""

    async def hash(self, password: str) -> str:
        """Return a salted hash of password."""

    async def verify(self, password: str, hashed: str | None) -> bool:
        """Return True if password matches hashed. None never matches."""
