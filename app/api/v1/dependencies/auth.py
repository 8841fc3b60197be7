"""Authorization dependencies: resolve the caller and enforce role allow-lists."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request

from app.api.v1.dependencies.db import get_user_repo
from app.api.v1.dependencies.services import get_token_service
from app.application.dtos.auth import CurrentUser
from app.application.interfaces.services import ITokenService
from app.domain.enums import UserRole
from app.domain.exceptions import (
    AccountDisabledException,
    AuthenticationException,
    AuthorizationException,
    ExpiredTokenError,
    InvalidTokenError,
)
from app.infrastructure.persistence.repositories import UserRepository
from app.shared.request_context import extract_bearer_token

logger = logging.getLogger(__name__)


async def get_current_user(
    request: Request,
    token_service: Annotated[ITokenService, Depends(get_token_service)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> CurrentUser:
    """Return the caller behind the access token, with the role as currently stored.

    Raises AuthenticationException (401) for a missing, expired or invalid
    token or a deleted user, and AccountDisabledException (403) for a
    disabled account.
    """
    token = extract_bearer_token(request)
    if not token:
        raise AuthenticationException("No token provided")
    try:
        claims = token_service.verify_access_token(token)
    except ExpiredTokenError as e:
        raise AuthenticationException("Token expired, please login again") from e
    except InvalidTokenError as e:
        logger.debug("Access token rejected: %s", e)
        raise AuthenticationException("Invalid token") from e
    user = await user_repo.get_by_id(claims.user_id)
    if user is None:
        raise AuthenticationException("User not found")
    if not user.is_active:
        raise AccountDisabledException()
    request.state.user_id = user.id
    return CurrentUser(id=user.id, email=user.email, role=user.role)


def require_roles(*roles: UserRole | str) -> Callable[..., Awaitable[CurrentUser]]:
    """Dependency factory: any authenticated user when roles is empty, else one of roles."""
    allowed = [r.value if isinstance(r, UserRole) else r for r in roles]

    async def _require(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if allowed and current_user.role not in allowed:
            logger.info(
                "User %s with role %s denied (requires %s)",
                current_user.id,
                current_user.role,
                ",".join(allowed),
            )
            raise AuthorizationException(allowed_roles=allowed)
        return current_user

    return _require


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
AdminUserDep = Annotated[CurrentUser, Depends(require_roles(UserRole.ADMIN))]
