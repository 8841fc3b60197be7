"""OTP repository: rows keyed by email, oldest first."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.auth import OtpRecord
from app.infrastructure.persistence.models.otp import Otp
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _otp_to_record(row: Otp) -> OtpRecord:
    return OtpRecord(
        email=row.email,
        code=row.code,
        expires_at=ensure_utc(row.expires_at),
        created_at=ensure_utc(row.created_at),
    )


class OtpRepository(BaseRepository[Otp]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Otp)

    async def create(self, email: str, code: str, expires_at: datetime) -> OtpRecord:  # type: ignore[override]
        row = await super().create(Otp(email=email, code=code, expires_at=expires_at))
        return _otp_to_record(row)

    async def find_first(self, email: str) -> OtpRecord | None:
        result = await self.db.execute(
            select(Otp).where(Otp.email == email).order_by(Otp.created_at, Otp.id).limit(1)
        )
        row = result.scalar_one_or_none()
        return _otp_to_record(row) if row else None

    async def delete_for_email(self, email: str) -> int:
        result = await self.db.execute(delete(Otp).where(Otp.email == email))
        return result.rowcount or 0
