"""User application service: account administration and self-service password change."""

from __future__ import annotations

import logging

from app.application.dtos.user import UserCreate, UserPage, UserResult
from app.application.interfaces.repositories import IUserRepository
from app.application.interfaces.services import IPasswordHasher
from app.domain import ValidationException
from app.domain.enums import UserRole
from app.domain.exceptions import UserAlreadyExistsException, UserNotFoundException
from app.shared.utils.sanitization import (
    normalize_email,
    sanitize_search_term,
    sanitize_string,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _optional(value: str | None) -> str | None:
    cleaned = sanitize_string(value)
    return cleaned or None


class UserService:
    """Create, list, enable/disable, soft-delete and restore accounts."""

    def __init__(self, user_repo: IUserRepository, password_hasher: IPasswordHasher) -> None:
        self._user_repo = user_repo
        self._hasher = password_hasher

    async def create_user(self, data: UserCreate) -> UserResult:
        """Create an account. The password is optional; without one the user
        goes through check-email / set-password on first sign-in.

        Raises:
            ValidationException: Unknown role.
            UserAlreadyExistsException: Email already registered (including soft-deleted).
        """
        if data.role not in UserRole.values():
            raise ValidationException(
                f"Role must be one of: {', '.join(UserRole.values())}", field="role"
            )
        email = normalize_email(data.email)
        if await self._user_repo.get_by_email(email) is not None:
            raise UserAlreadyExistsException()
        clean = UserCreate(
            email=email,
            role=data.role,
            first_name=_optional(data.first_name),
            last_name=_optional(data.last_name),
            phone_number=_optional(data.phone_number),
        )
        hashed = await self._hasher.hash(data.password) if data.password else None
        user = await self._user_repo.create_user(clean, hashed)
        logger.info("Created user %s with role %s", user.id, user.role)
        return user

    async def list_users(
        self,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
        search: str | None = None,
    ) -> UserPage:
        if role is not None and role not in UserRole.values():
            raise ValidationException("Unknown role filter", field="role")
        term = sanitize_search_term(search) or None
        return await self._user_repo.list_users(
            skip=max(skip, 0),
            limit=min(max(limit, 1), MAX_PAGE_SIZE),
            role=role,
            search=term,
        )

    async def get_user(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException()
        return user

    async def set_status(self, user_id: str, is_active: bool) -> UserResult:
        """Enable or disable an account. Disabled accounts fail authorization at once."""
        user = await self._user_repo.set_status(user_id, is_active)
        if user is None:
            raise UserNotFoundException()
        logger.info("User %s is_active=%s", user_id, is_active)
        return user

    async def soft_delete(self, user_id: str) -> None:
        if not await self._user_repo.soft_delete(user_id):
            raise UserNotFoundException()
        logger.info("User %s soft-deleted", user_id)

    async def restore(self, user_id: str) -> UserResult:
        user = await self._user_repo.restore(user_id)
        if user is None:
            raise UserNotFoundException()
        logger.info("User %s restored", user_id)
        return user

    async def change_password(
        self, user_id: str, old_password: str, new_password: str
    ) -> UserResult:
        """Replace the password. The old one is checked only when one is set."""
        user = await self.get_user(user_id)
        current = await self._user_repo.get_password_hash(user.id)
        if current is not None and not await self._hasher.verify(old_password, current):
            raise ValidationException("Password is incorrect", field="oldPassword")
        hashed = await self._hasher.hash(new_password)
        updated = await self._user_repo.update_password(user.id, hashed)
        logger.info("User %s changed password", user.id)
        return updated
