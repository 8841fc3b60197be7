"""Token service: access, refresh and purpose tokens over one JWT mechanism.

Access and purpose tokens share JWT_SECRET; refresh tokens use
JWT_REFRESH_SECRET. Access tokens carry type="access" and purpose tokens
carry a purpose claim, so neither verifies as the other.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from app.application.dtos.auth import AccessClaims, PurposeClaims
from app.domain.enums import TokenPurpose
from app.domain.exceptions import InvalidTokenError
from app.infrastructure.security.jwt import DEFAULT_ALGORITHM, create_token, verify_token

if TYPE_CHECKING:
    from app.core.config import Settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenService:
    """Mint and verify the three token kinds with configured secrets and TTLs."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        purpose_ttl: timedelta,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._purpose_ttl = purpose_ttl
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            access_secret=settings.jwt_secret.get_secret_value(),
            refresh_secret=settings.jwt_refresh_secret.get_secret_value(),
            access_ttl=timedelta(minutes=settings.jwt_expires_in),
            refresh_ttl=timedelta(minutes=settings.jwt_refresh_expires_in),
            purpose_ttl=timedelta(minutes=settings.purpose_token_expires_minutes),
            algorithm=settings.jwt_algorithm,
        )

    def create_access_token(self, user_id: str, role: str) -> str:
        return create_token(
            {"sub": user_id, "role": role, "type": ACCESS_TOKEN_TYPE},
            self._access_secret,
            self._access_ttl,
            self._algorithm,
        )

    def create_refresh_token(self, user_id: str) -> str:
        return create_token(
            {"sub": user_id, "type": REFRESH_TOKEN_TYPE},
            self._refresh_secret,
            self._refresh_ttl,
            self._algorithm,
        )

    def create_purpose_token(
        self, user_id: str, role: str, email: str, purpose: TokenPurpose
    ) -> str:
        return create_token(
            {"sub": user_id, "role": role, "email": email, "purpose": purpose.value},
            self._access_secret,
            self._purpose_ttl,
            self._algorithm,
        )

    def verify_access_token(self, token: str) -> AccessClaims:
        """Decode an access token. Raises ExpiredTokenError / InvalidTokenError."""
        payload = verify_token(token, self._access_secret, self._algorithm)
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise InvalidTokenError("Not an access token")
        return AccessClaims(user_id=payload["sub"], role=str(payload.get("role", "")))

    def verify_refresh_token(self, token: str) -> str:
        """Decode a refresh token and return its subject (user id)."""
        payload = verify_token(token, self._refresh_secret, self._algorithm)
        if payload.get("type") != REFRESH_TOKEN_TYPE:
            raise InvalidTokenError("Not a refresh token")
        return str(payload["sub"])

    def verify_purpose_token(self, token: str) -> PurposeClaims:
        """Decode a purpose token. The purpose is returned raw; consumers compare it."""
        payload: dict[str, Any] = verify_token(token, self._access_secret, self._algorithm)
        purpose = payload.get("purpose")
        email = payload.get("email")
        if not purpose or not email:
            raise InvalidTokenError("Not a purpose token")
        return PurposeClaims(
            user_id=payload["sub"],
            role=str(payload.get("role", "")),
            email=str(email),
            purpose=str(purpose),
        )
