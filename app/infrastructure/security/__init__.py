"""Security: JWT primitives, token service, and password hashing."""

from app.domain.exceptions import ExpiredTokenError, InvalidTokenError, TokenError
from app.infrastructure.security.jwt import create_token, verify_token
from app.infrastructure.security.password import (
    BcryptPasswordHasher,
    hash_password,
    verify_password,
    verify_password_async,
)
from app.infrastructure.security.tokens import TokenService

__all__ = [
    "BcryptPasswordHasher",
    "ExpiredTokenError",
    "InvalidTokenError",
    "TokenError",
    "TokenService",
    "create_token",
    "hash_password",
    "verify_password",
    "verify_password_async",
    "verify_token",
]
