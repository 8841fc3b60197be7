"""In-memory fakes for the repository ports used by service unit tests."""

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from app.application.dtos.auth import OtpRecord
from app.application.dtos.user import UserCreate, UserPage, UserResult
from app.domain.exceptions import UserAlreadyExistsException, UserNotFoundException


class FakeUserRepository:
    """Dict-backed IUserRepository. Soft-deleted ids are tracked separately."""

    def __init__(self) -> None:
        self.users: dict[str, UserResult] = {}
        self.hashes: dict[str, str | None] = {}
        self.deleted: set[str] = set()
        self.commits = 0

    def add(
        self,
        email: str,
        role: str = "OFFICER",
        hashed_password: str | None = None,
        is_active: bool = True,
    ) -> UserResult:
        user_id = f"u{len(self.users) + 1}"
        user = UserResult(
            id=user_id,
            email=email.lower(),
            role=role,
            is_active=is_active,
            has_password=hashed_password is not None,
            created_at=datetime.now(UTC),
        )
        self.users[user_id] = user
        self.hashes[user_id] = hashed_password
        return user

    async def get_by_id(self, user_id: str) -> UserResult | None:
        if user_id in self.deleted:
            return None
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> UserResult | None:
        for user in self.users.values():
            if user.email == email.lower() and user.id not in self.deleted:
                return user
        return None

    async def get_password_hash(self, user_id: str) -> str | None:
        return self.hashes.get(user_id)

    async def create_user(self, data: UserCreate, hashed_password: str | None) -> UserResult:
        if any(u.email == data.email for u in self.users.values()):
            raise UserAlreadyExistsException()
        user = self.add(data.email, data.role, hashed_password)
        user = replace(
            user,
            first_name=data.first_name,
            last_name=data.last_name,
            phone_number=data.phone_number,
        )
        self.users[user.id] = user
        return user

    async def update_password(self, user_id: str, hashed_password: str) -> UserResult:
        user = await self.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException()
        self.hashes[user_id] = hashed_password
        self.users[user_id] = replace(user, has_password=True)
        return self.users[user_id]

    async def commit(self) -> None:
        self.commits += 1

    async def set_status(self, user_id: str, is_active: bool) -> UserResult | None:
        user = await self.get_by_id(user_id)
        if user is None:
            return None
        self.users[user_id] = replace(user, is_active=is_active)
        return self.users[user_id]

    async def soft_delete(self, user_id: str) -> bool:
        if await self.get_by_id(user_id) is None:
            return False
        self.deleted.add(user_id)
        return True

    async def restore(self, user_id: str) -> UserResult | None:
        if user_id not in self.users:
            return None
        self.deleted.discard(user_id)
        return self.users[user_id]

    async def list_users(
        self,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
        search: str | None = None,
    ) -> UserPage:
        items = [
            u
            for u in self.users.values()
            if u.id not in self.deleted
            and (role is None or u.role == role)
            and (search is None or search.lower() in u.email)
        ]
        return UserPage(items=items[skip : skip + limit], total=len(items), skip=skip, limit=limit)


class FakeOtpRepository:
    """List-backed IOtpRepository; insertion order stands in for created_at."""

    def __init__(self) -> None:
        self.rows: list[OtpRecord] = []

    async def create(self, email: str, code: str, expires_at: datetime) -> OtpRecord:
        record = OtpRecord(email=email, code=code, expires_at=expires_at)
        self.rows.append(record)
        return record

    async def find_first(self, email: str) -> OtpRecord | None:
        return next((r for r in self.rows if r.email == email), None)

    async def delete_for_email(self, email: str) -> int:
        before = len(self.rows)
        self.rows = [r for r in self.rows if r.email != email]
        return before - len(self.rows)


class FakeHasher:
    """IPasswordHasher stand-in: reversible, no bcrypt cost."""

    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password: str, hashed: str | None) -> bool:
        return hashed is not None and hashed == f"hashed:{password}"


class RecordingSender:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, datetime]] = []

    async def send_otp(self, email: str, code: str, expires_at: datetime) -> None:
        self.sent.append((email, code, expires_at))


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def otp_repo() -> FakeOtpRepository:
    return FakeOtpRepository()


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()
