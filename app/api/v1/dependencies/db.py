"""Repository dependencies (composition root).

Read paths use get_db; write paths use get_db_transactional so the whole
request commits or rolls back together. CredentialService.set_password is the
one caller that commits early, before its auto-login.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import OtpRepository, UserRepository


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    return UserRepository(db)


async def get_user_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRepository:
    return UserRepository(db)


async def get_otp_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> OtpRepository:
    return OtpRepository(db)
