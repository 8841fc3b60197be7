"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import TokenPurpose, UserRole
from app.domain.exceptions import (
    AccountDisabledException,
    AuthGateException,
    AuthenticationException,
    AuthorizationException,
    ExpiredTokenError,
    InvalidTokenError,
    OtpExpiredException,
    OtpMismatchException,
    OtpNotFoundException,
    RateLimitExceededException,
    ResourceNotFoundException,
    TokenConfigurationException,
    TokenError,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "TokenPurpose",
    "UserRole",
    # Exceptions
    "AccountDisabledException",
    "AuthGateException",
    "AuthenticationException",
    "AuthorizationException",
    "ExpiredTokenError",
    "InvalidTokenError",
    "OtpExpiredException",
    "OtpMismatchException",
    "OtpNotFoundException",
    "RateLimitExceededException",
    "ResourceNotFoundException",
    "TokenConfigurationException",
    "TokenError",
    "UserAlreadyExistsException",
    "UserNotFoundException",
    "ValidationException",
]
