"""Users API: account administration (ADMIN) and self-service password change.

Uses only injected dependencies (get_user_service, require_roles).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import AdminUserDep, CurrentUserDep, get_user_service
from app.application.dtos.user import UserCreate
from app.application.services import UserService
from app.core.limiter import DELETE, REGISTRATION, SEARCH, STRICT, UPDATE, rate_limit
from app.domain.enums import UserRole
from app.schemas.common import ApiResponse, ok
from app.schemas.user import (
    ChangePasswordRequest,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserStatusRequest,
)

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit(REGISTRATION))],
)
async def create_user(body: UserCreateRequest, admin: AdminUserDep, service: UserServiceDep):
    """Create an account (ADMIN only). Without a password the user completes set-password via OTP."""
    user = await service.create_user(
        UserCreate(
            email=body.email,
            role=body.role.value,
            first_name=body.first_name,
            last_name=body.last_name,
            phone_number=body.phone_number,
            password=body.password,
        )
    )
    return ok("User created successfully", UserResponse.model_validate(user), status_code=201)


@router.get(
    "",
    response_model=ApiResponse[UserListResponse],
    dependencies=[Depends(rate_limit(SEARCH))],
)
async def list_users(
    current_user: CurrentUserDep,
    service: UserServiceDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    role: UserRole | None = None,
    search: str | None = Query(None, max_length=100),
):
    page = await service.list_users(
        skip=skip, limit=limit, role=role.value if role else None, search=search
    )
    return ok(
        "Users retrieved successfully",
        UserListResponse(
            items=[UserResponse.model_validate(u) for u in page.items],
            total=page.total,
            skip=page.skip,
            limit=page.limit,
            has_next=page.has_next,
        ),
    )


@router.patch(
    "/me/password",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(rate_limit(STRICT))],
)
async def change_password(
    body: ChangePasswordRequest, current_user: CurrentUserDep, service: UserServiceDep
):
    user = await service.change_password(current_user.id, body.old_password, body.new_password)
    return ok("Password changed successfully", UserResponse.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(user_id: str, current_user: CurrentUserDep, service: UserServiceDep):
    user = await service.get_user(user_id)
    return ok("User retrieved successfully", UserResponse.model_validate(user))


@router.patch(
    "/{user_id}/status",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(rate_limit(UPDATE))],
)
async def update_user_status(
    user_id: str, body: UserStatusRequest, admin: AdminUserDep, service: UserServiceDep
):
    user = await service.set_status(user_id, body.status)
    return ok("User status updated successfully", UserResponse.model_validate(user))


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(rate_limit(DELETE))],
)
async def delete_user(user_id: str, admin: AdminUserDep, service: UserServiceDep):
    """Soft delete: the account stops authenticating and can be restored."""
    await service.soft_delete(user_id)
    return ok("User soft-deleted successfully")


@router.patch(
    "/{user_id}/restore",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(rate_limit(UPDATE))],
)
async def restore_user(user_id: str, admin: AdminUserDep, service: UserServiceDep):
    user = await service.restore(user_id)
    return ok("User restored successfully", UserResponse.model_validate(user))
