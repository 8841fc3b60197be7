"""User repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserCreate, UserPage, UserResult
from app.domain.exceptions import UserAlreadyExistsException, UserNotFoundException
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.sanitization import normalize_email


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        email=u.email,
        role=u.role,
        is_active=u.is_active,
        first_name=u.first_name,
        last_name=u.last_name,
        phone_number=u.phone_number,
        has_password=u.hashed_password is not None,
        created_at=ensure_utc(u.created_at),
    )


class UserRepository(BaseRepository[User]):
    """Credential records. Live lookups skip soft-deleted rows."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def _get_live(self, user_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self._get_live(user_id)
        return _user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> UserResult | None:
        result = await self.db.execute(
            select(User).where(
                User.email == normalize_email(email), User.deleted_at.is_(None)
            )
        )
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def get_password_hash(self, user_id: str) -> str | None:
        result = await self.db.execute(
            select(User.hashed_password).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def create_user(
        self, data: UserCreate, hashed_password: str | None
    ) -> UserResult:
        """Create user; raise UserAlreadyExistsException on unique constraint violation."""
        user = User(
            email=normalize_email(data.email),
            hashed_password=hashed_password,
            first_name=data.first_name,
            last_name=data.last_name,
            phone_number=data.phone_number,
            role=data.role,
            is_active=True,
        )
        try:
            created = await self.create(user)
        except IntegrityError as e:
            raise UserAlreadyExistsException() from e
        return _user_to_result(created)

    async def update_password(self, user_id: str, hashed_password: str) -> UserResult:
        user = await self._get_live(user_id)
        if user is None:
            raise UserNotFoundException()
        user.hashed_password = hashed_password
        return _user_to_result(await self.update(user))

    async def commit(self) -> None:
        await self.db.commit()

    async def set_status(self, user_id: str, is_active: bool) -> UserResult | None:
        user = await self._get_live(user_id)
        if user is None:
            return None
        user.is_active = is_active
        return _user_to_result(await self.update(user))

    async def soft_delete(self, user_id: str) -> bool:
        user = await self._get_live(user_id)
        if user is None:
            return False
        user.deleted_at = utc_now()
        await self.update(user)
        return True

    async def restore(self, user_id: str) -> UserResult | None:
        user = await self._get(user_id)
        if user is None:
            return None
        user.deleted_at = None
        return _user_to_result(await self.update(user))

    async def list_users(
        self,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
        search: str | None = None,
    ) -> UserPage:
        conditions = [User.deleted_at.is_(None)]
        if role:
            conditions.append(User.role == role)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )
        total = await self.db.scalar(
            select(func.count()).select_from(User).where(*conditions)
        )
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc(), User.id)
            .offset(skip)
            .limit(limit)
        )
        items = [_user_to_result(u) for u in result.scalars().all()]
        return UserPage(items=items, total=total or 0, skip=skip, limit=limit)
