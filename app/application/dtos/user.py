"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, create_user, etc.). No password hash."""

    id: str
    email: str
    role: str
    is_active: bool
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    has_password: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class UserCreate:
    """Input for creating a user. The password is optional (set later via OTP flow)."""

    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    password: str | None = None


@dataclass(frozen=True)
class UserPage:
    """A page of users plus pagination metadata."""

    items: list[UserResult]
    total: int
    skip: int
    limit: int

    @property
    def has_next(self) -> bool:
        return self.skip + len(self.items) < self.total
