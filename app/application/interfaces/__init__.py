"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import IOtpRepository, IUserRepository
from app.application.interfaces.services import (
    ICounterStore,
    IOtpSender,
    IPasswordHasher,
    ITokenService,
)

__all__ = [
    "ICounterStore",
    "IOtpRepository",
    "IOtpSender",
    "IPasswordHasher",
    "ITokenService",
    "IUserRepository",
]
