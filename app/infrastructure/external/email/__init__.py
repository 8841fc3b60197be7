"""Email integration: OTP delivery."""

from app.infrastructure.external.email.otp_sender import (
    ConsoleOtpSender,
    SmtpOtpSender,
    build_otp_sender,
)

__all__ = ["ConsoleOtpSender", "SmtpOtpSender", "build_otp_sender"]
