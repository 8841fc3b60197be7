"""Domain exceptions for authgate.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class AuthGateException(Exception):
    """Base exception for all authgate application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON error body (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AuthGateException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AuthGateException):
    """Raised when authentication fails (bad password, missing/invalid/expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(AuthGateException):
    """Raised when the user's role is not allowed to perform the operation."""

    def __init__(
        self,
        message: str = "Forbidden: No access",
        allowed_roles: list[str] | None = None,
    ) -> None:
        """Initialize with optional message and the allow-list that was checked.

        Args:
            message: Human-readable message.
            allowed_roles: Roles the endpoint accepts (for client diagnostics).
        """
        details: dict[str, Any] = {}
        if allowed_roles:
            details["allowed_roles"] = allowed_roles
        super().__init__(message, "PERMISSION_DENIED", details)


class AccountDisabledException(AuthGateException):
    """Raised when a disabled account tries to log in or use a token."""

    def __init__(self) -> None:
        super().__init__("Your account has been disabled", "ACCOUNT_DISABLED")


class ResourceNotFoundException(AuthGateException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UserNotFoundException(AuthGateException):
    """Raised when no live credential record matches an email or id.

    The message is generic on purpose; the looked-up value is not echoed.
    """

    def __init__(self) -> None:
        super().__init__("User not found", "USER_NOT_FOUND")


class UserAlreadyExistsException(AuthGateException):
    """Raised when creating a user whose email is already registered."""

    def __init__(self) -> None:
        super().__init__("User already exists with this email", "USER_ALREADY_EXISTS")


class OtpNotFoundException(AuthGateException):
    """Raised when validating an OTP for an email that has none on record."""

    def __init__(self) -> None:
        super().__init__("OTP not found", "OTP_NOT_FOUND")


class OtpExpiredException(AuthGateException):
    """Raised when the stored OTP is past its expiry."""

    def __init__(self) -> None:
        super().__init__("OTP is expired or already been used.", "OTP_EXPIRED")


class OtpMismatchException(AuthGateException):
    """Raised when the submitted code does not match the stored OTP."""

    def __init__(self) -> None:
        super().__init__("Invalid OTP", "OTP_MISMATCH")


class RateLimitExceededException(AuthGateException):
    """Raised by the policy limiter when a key exceeds its window budget.

    Rendered by its own handler (fixed envelope + Retry-After), never by the
    generic domain translator.
    """

    def __init__(self, policy: str, message: str, retry_after: int) -> None:
        """Initialize with policy name, client message and retry hint.

        Args:
            policy: Name of the policy that rejected the request.
            message: Client-facing message for the 429 body.
            retry_after: Seconds until the window resets.
        """
        super().__init__(
            message,
            "RATE_LIMITED",
            {"policy": policy, "retry_after": retry_after},
        )
        self.policy = policy
        self.retry_after = retry_after


class TokenConfigurationException(AuthGateException):
    """Raised when a token cannot be signed (missing secret, bad TTL). Configuration fault."""

    def __init__(self, message: str = "Token signing is not configured") -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


class TokenError(ValueError):
    """Base for bearer-token verification failures.

    Not an AuthGateException: every consumer converts these into
    AuthenticationException with a client-facing message.
    """


class ExpiredTokenError(TokenError):
    """Token signature is valid but exp has passed."""


class InvalidTokenError(TokenError):
    """Token is malformed, tampered with, signed with another key, or missing claims."""
