"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, application services and
the caller's identity. Routes depend only on these, not on infra directly.
"""

from app.api.v1.dependencies.auth import (
    AdminUserDep,
    CurrentUserDep,
    get_current_user,
    require_roles,
)
from app.api.v1.dependencies.db import (
    get_otp_repo_for_write,
    get_user_repo,
    get_user_repo_for_write,
)
from app.api.v1.dependencies.services import (
    get_credential_service,
    get_otp_sender,
    get_otp_service,
    get_password_hasher,
    get_token_service,
    get_user_service,
)
from app.shared.request_context import extract_bearer_token

__all__ = [
    "AdminUserDep",
    "CurrentUserDep",
    "extract_bearer_token",
    "get_credential_service",
    "get_current_user",
    "get_otp_repo_for_write",
    "get_otp_sender",
    "get_otp_service",
    "get_password_hasher",
    "get_token_service",
    "get_user_repo",
    "get_user_repo_for_write",
    "get_user_service",
    "require_roles",
]
