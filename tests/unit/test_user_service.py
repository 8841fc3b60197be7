"""UserService tests: creation rules, listing, status, soft delete, password change."""

import pytest

from app.application.dtos.user import UserCreate
from app.application.services import UserService
from app.application.services.user_service import MAX_PAGE_SIZE
from app.domain.exceptions import (
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)


@pytest.fixture
def service(user_repo, hasher) -> UserService:
    return UserService(user_repo, hasher)


async def test_create_user_normalises_and_sanitises(service, user_repo) -> None:
    user = await service.create_user(
        UserCreate(
            email="  New.User@Example.com ",
            role="OFFICER",
            first_name="<b>Jane</b>",
            last_name="  Doe ",
        )
    )
    assert user.email == "new.user@example.com"
    assert user.first_name == "Jane"
    assert user.last_name == "Doe"
    assert user.has_password is False
    assert user_repo.hashes[user.id] is None


async def test_create_user_with_password_hashes_it(service, user_repo) -> None:
    user = await service.create_user(
        UserCreate(email="a@example.com", role="ADMIN", password="Secret123")
    )
    assert user_repo.hashes[user.id] == "hashed:Secret123"


async def test_create_user_rejects_unknown_role(service) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.create_user(UserCreate(email="a@example.com", role="ROOT"))
    assert exc_info.value.details == {"field": "role"}


async def test_create_user_rejects_duplicate_email(service, user_repo) -> None:
    user_repo.add("a@example.com")
    with pytest.raises(UserAlreadyExistsException):
        await service.create_user(UserCreate(email="A@example.com", role="OFFICER"))


async def test_list_users_caps_page_size(service, user_repo) -> None:
    user_repo.add("a@example.com")
    page = await service.list_users(limit=10_000)
    assert page.limit == MAX_PAGE_SIZE
    assert page.total == 1


async def test_list_users_strips_wildcards_from_search(service, user_repo) -> None:
    user_repo.add("a@example.com")
    user_repo.add("b@example.com")
    page = await service.list_users(search="%a@%")
    assert [u.email for u in page.items] == ["a@example.com"]


async def test_list_users_rejects_unknown_role(service) -> None:
    with pytest.raises(ValidationException):
        await service.list_users(role="ROOT")


async def test_status_delete_restore(service, user_repo) -> None:
    user = user_repo.add("a@example.com")
    assert (await service.set_status(user.id, False)).is_active is False
    await service.soft_delete(user.id)
    with pytest.raises(UserNotFoundException):
        await service.get_user(user.id)
    with pytest.raises(UserNotFoundException):
        await service.soft_delete(user.id)
    assert (await service.restore(user.id)).id == user.id
    assert (await service.get_user(user.id)).email == "a@example.com"


async def test_unknown_user_operations(service) -> None:
    with pytest.raises(UserNotFoundException):
        await service.set_status("missing", True)
    with pytest.raises(UserNotFoundException):
        await service.restore("missing")


async def test_change_password_checks_old_password(service, user_repo) -> None:
    user = user_repo.add("a@example.com", hashed_password="hashed:Old12345")
    with pytest.raises(ValidationException, match="Password is incorrect"):
        await service.change_password(user.id, "Wrong123", "New12345")
    await service.change_password(user.id, "Old12345", "New12345")
    assert user_repo.hashes[user.id] == "hashed:New12345"


async def test_change_password_without_existing_password(service, user_repo) -> None:
    user = user_repo.add("a@example.com")
    updated = await service.change_password(user.id, "", "New12345")
    assert updated.has_password is True
