"""OTP lifecycle: issue, validate (one-shot), resend.

Per email: NONE -> ISSUED -> VALIDATED | EXPIRED | SUPERSEDED.
Expiry is checked lazily at validation time against real elapsed time;
nothing sweeps expired rows.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from app.application.dtos.auth import OtpResult
from app.application.interfaces.repositories import IOtpRepository
from app.application.interfaces.services import IOtpSender
from app.domain.exceptions import (
    OtpExpiredException,
    OtpMismatchException,
    OtpNotFoundException,
)
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_otp_code

logger = logging.getLogger(__name__)


class OtpService:
    """Own the OTP rows for an email and their delivery.

    Callers that need a single live code (resend, check-email) clear first;
    forgot-password issues on top of existing rows, and validation then
    reads the first row found.
    """

    def __init__(
        self,
        otp_repo: IOtpRepository,
        sender: IOtpSender,
        expires_minutes: int,
        clock: Callable[[], datetime] = utc_now,
        code_generator: Callable[[], str] = generate_otp_code,
    ) -> None:
        self._otp_repo = otp_repo
        self._sender = sender
        self._ttl = timedelta(minutes=expires_minutes)
        self._clock = clock
        self._generate_code = code_generator

    async def issue(self, email: str) -> OtpResult:
        """Store a fresh code for email and hand it to the sender."""
        code = self._generate_code()
        expires_at = self._clock() + self._ttl
        record = await self._otp_repo.create(email, code, expires_at)
        try:
            await self._sender.send_otp(email, code, expires_at)
        except Exception:
            logger.exception("OTP delivery failed for %s", email)
            raise
        logger.info("OTP issued for %s (expires %s)", email, expires_at.isoformat())
        return OtpResult(email=record.email, expires_at=expires_at)

    async def validate(self, email: str, code: str) -> None:
        """Accept code once.

        Raises:
            OtpNotFoundException: No OTP on record for email.
            OtpExpiredException: The stored OTP is past its expiry.
            OtpMismatchException: code differs from the stored OTP.
        """
        record = await self._otp_repo.find_first(email)
        if record is None:
            raise OtpNotFoundException()
        expires_at = ensure_utc(record.expires_at)
        if expires_at is None or self._clock() > expires_at:
            logger.info("Expired OTP presented for %s", email)
            raise OtpExpiredException()
        if not hmac.compare_digest(record.code.encode(), code.strip().encode()):
            logger.info("OTP mismatch for %s", email)
            raise OtpMismatchException()
        await self._otp_repo.delete_for_email(email)
        logger.info("OTP validated for %s", email)

    async def clear(self, email: str) -> int:
        return await self._otp_repo.delete_for_email(email)

    async def resend(self, email: str) -> OtpResult:
        """Supersede any existing OTP with a new one."""
        await self.clear(email)
        return await self.issue(email)
