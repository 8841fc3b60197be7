"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.auth import OtpRecord
    from app.application.dtos.user import UserCreate, UserPage, UserResult


class IUserRepository(Protocol):
    """Protocol for the credential-record store (DIP).

    get_by_id and get_by_email only return live (not soft-deleted) users.
    """

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return live user by ID."""

    async def get_by_email(self, email: str) -> UserResult | None:
        """Return live user by email (case-insensitive)."""

    async def get_password_hash(self, user_id: str) -> str | None:
        """Return the stored bcrypt hash, or None when no password is set."""

    async def create_user(
        self, data: UserCreate, hashed_password: str | None
    ) -> UserResult:
        """Create a user. Raises UserAlreadyExistsException on duplicate email."""

    async def update_password(self, user_id: str, hashed_password: str) -> UserResult:
        """Replace the password hash; return the updated user."""

    async def commit(self) -> None:
        """Make pending writes durable before any later step of the request can fail."""

    async def set_status(self, user_id: str, is_active: bool) -> UserResult | None:
        """Set the active flag; None if the user does not exist."""

    async def soft_delete(self, user_id: str) -> bool:
        """Mark the user deleted; False if not found or already deleted."""

    async def restore(self, user_id: str) -> UserResult | None:
        """Clear the deleted marker; None if not found."""

    async def list_users(
        self,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
        search: str | None = None,
    ) -> UserPage:
        """Return live users, newest first, optionally filtered."""


class IOtpRepository(Protocol):
    """Protocol for OTP rows keyed by email."""

    async def create(self, email: str, code: str, expires_at: datetime) -> OtpRecord:
        """Insert a new OTP row."""

    async def find_first(self, email: str) -> OtpRecord | None:
        """Return the first (oldest) OTP row for email, or None."""

    async def delete_for_email(self, email: str) -> int:
        """Delete every OTP row for email; return the number deleted."""
