"""Application service dependencies (composition root).

Stateless collaborators (token service, password hasher, OTP sender) live
on app.state; services are assembled per request around the request's
repositories. Tests swap app.state entries or override these functions.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.api.v1.dependencies.db import get_otp_repo_for_write, get_user_repo_for_write
from app.application.interfaces.services import IOtpSender, IPasswordHasher, ITokenService
from app.application.services import CredentialService, OtpService, UserService
from app.core.config import get_settings
from app.infrastructure.persistence.repositories import OtpRepository, UserRepository


def get_token_service(request: Request) -> ITokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> IPasswordHasher:
    return request.app.state.password_hasher


def get_otp_sender(request: Request) -> IOtpSender:
    return request.app.state.otp_sender


async def get_otp_service(
    otp_repo: Annotated[OtpRepository, Depends(get_otp_repo_for_write)],
    sender: Annotated[IOtpSender, Depends(get_otp_sender)],
) -> OtpService:
    return OtpService(otp_repo, sender, expires_minutes=get_settings().otp_expires_in)


async def get_credential_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    otp_service: Annotated[OtpService, Depends(get_otp_service)],
    token_service: Annotated[ITokenService, Depends(get_token_service)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
) -> CredentialService:
    return CredentialService(user_repo, otp_service, token_service, password_hasher)


async def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    return UserService(user_repo, password_hasher)
