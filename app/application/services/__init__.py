"""Application services: credential gateway, OTP lifecycle, user administration."""

from app.application.services.credential_service import CredentialService
from app.application.services.otp_service import OtpService
from app.application.services.user_service import UserService

__all__ = [
    "CredentialService",
    "OtpService",
    "UserService",
]
