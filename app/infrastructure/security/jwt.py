"""JWT signing and verification primitives.

Pure functions: callers pass the secret and TTL, so access, refresh and
purpose tokens share one mechanism with different keys and lifetimes.
Library errors are normalised to ExpiredTokenError / InvalidTokenError;
callers turn both into an authentication failure.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

from app.domain.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenConfigurationException,
)

DEFAULT_ALGORITHM = "HS256"


def create_token(
    payload: dict[str, Any],
    secret: str,
    expires_delta: timedelta,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """Sign payload as a JWT that expires after expires_delta.

    Args:
        payload: Claims to encode; must include sub.
        secret: HMAC signing key.
        expires_delta: Token lifetime; must be positive.
        algorithm: JWS algorithm (HS256 unless configured otherwise).

    Returns:
        Encoded JWT string.

    Raises:
        TokenConfigurationException: If the secret is empty or the TTL is not positive.
    """
    if not secret:
        raise TokenConfigurationException("JWT secret not configured")
    if expires_delta.total_seconds() <= 0:
        raise TokenConfigurationException("Token lifetime must be positive")
    now = datetime.now(UTC)
    to_encode = payload.copy()
    to_encode["iat"] = now
    to_encode["exp"] = now + expires_delta
    encoded = jwt.encode(to_encode, secret, algorithm=algorithm)
    return cast(str, encoded)


def verify_token(
    token: str,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub.

    Raises:
        ExpiredTokenError: If the token is past exp.
        InvalidTokenError: If the signature, structure, or required claims are wrong.
    """
    if not secret:
        raise TokenConfigurationException("JWT secret not configured")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise ExpiredTokenError("Token expired") from e
    except JWTError as e:
        raise InvalidTokenError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise InvalidTokenError("Token missing required claim: sub")
    return payload
