"""Domain enumerations for authgate.

Enums represent fixed sets of domain values (user roles, token purposes).
"""

from enum import Enum


class UserRole(str, Enum):
    """Role carried by every credential record. Exactly one per user."""

    ADMIN = "ADMIN"
    OFFICER = "OFFICER"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [role.value for role in cls]


class TokenPurpose(str, Enum):
    """Intent a purpose token was minted for.

    A token is only accepted by the consumer whose purpose matches; the
    recovery flow never infers purpose from context.
    """

    SET_PASSWORD = "set-password"
    RESET_PASSWORD = "reset-password"

    @classmethod
    def values(cls) -> list[str]:
        return [purpose.value for purpose in cls]
