"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.otp import Otp
from app.infrastructure.persistence.models.user import User

__all__ = [
    "Otp",
    "User",
    "CuidMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
]
