"""Credential gateway: login, token refresh, and OTP-backed password recovery.

Per account:
    NO_PASSWORD --check_email--> OTP_PENDING --validate--> PURPOSE_TOKEN_HELD
        --set_password--> HAS_PASSWORD (logged in)
    HAS_PASSWORD --forgot_password / check_email(is_forget)--> OTP_PENDING
        --validate--> PURPOSE_TOKEN_HELD --reset_password--> HAS_PASSWORD
"""

from __future__ import annotations

import logging

from app.application.dtos.auth import EmailCheckResult, LoginResult, PurposeClaims
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import IUserRepository
from app.application.interfaces.services import IPasswordHasher, ITokenService
from app.application.services.otp_service import OtpService
from app.domain.enums import TokenPurpose
from app.domain.exceptions import (
    AccountDisabledException,
    AuthenticationException,
    ExpiredTokenError,
    InvalidTokenError,
    UserNotFoundException,
    ValidationException,
)
from app.shared.utils.sanitization import normalize_email

logger = logging.getLogger(__name__)


class CredentialService:
    """Account-facing authentication operations.

    Depends only on ports; the API layer wires concrete repositories, the
    token service and the OTP sender per request.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        otp_service: OtpService,
        token_service: ITokenService,
        password_hasher: IPasswordHasher,
    ) -> None:
        self._user_repo = user_repo
        self._otp = otp_service
        self._tokens = token_service
        self._hasher = password_hasher

    async def _require_user_by_email(self, email: str) -> UserResult:
        user = await self._user_repo.get_by_email(normalize_email(email))
        if user is None:
            raise UserNotFoundException()
        return user

    async def _require_user_by_id(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException()
        return user

    async def check_email(self, email: str, is_forget: bool = False) -> EmailCheckResult:
        """Report whether the account has a password.

        Accounts without one (and explicit forget requests) get a fresh OTP;
        any earlier codes for the email are discarded first.
        """
        user = await self._require_user_by_email(email)
        if not user.has_password or is_forget:
            await self._otp.clear(user.email)
            await self._otp.issue(user.email)
        return EmailCheckResult(has_password=user.has_password)

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate with email and password.

        Raises:
            UserNotFoundException: No live account for email.
            AccountDisabledException: Account is inactive.
            AuthenticationException: No password set yet, or it does not match.
        """
        user = await self._require_user_by_email(email)
        if not user.is_active:
            logger.info("Login rejected for disabled user %s", user.id)
            raise AccountDisabledException()
        hashed = await self._user_repo.get_password_hash(user.id)
        if not await self._hasher.verify(password, hashed):
            logger.info("Login failed for user %s", user.id)
            raise AuthenticationException("Invalid credentials")
        logger.info("User %s logged in", user.id)
        return LoginResult(
            access_token=self._tokens.create_access_token(user.id, user.role),
            refresh_token=self._tokens.create_refresh_token(user.id),
            user=user,
        )

    async def refresh_access(self, refresh_token: str) -> str:
        """Mint a new access token from a refresh token. The refresh token is not rotated."""
        try:
            user_id = self._tokens.verify_refresh_token(refresh_token)
        except ExpiredTokenError as e:
            raise AuthenticationException("Refresh token expired, please login again") from e
        except InvalidTokenError as e:
            logger.debug("Refresh token rejected: %s", e)
            raise AuthenticationException("Invalid refresh token") from e
        user = await self._require_user_by_id(user_id)
        if not user.is_active:
            raise AccountDisabledException()
        return self._tokens.create_access_token(user.id, user.role)

    async def forgot_password(self, email: str) -> UserResult:
        user = await self._require_user_by_email(email)
        await self._otp.issue(user.email)
        return user

    async def validate_otp_and_issue_purpose_token(
        self, email: str, code: str, purpose: TokenPurpose
    ) -> str:
        """Consume the OTP for email and return a purpose token for one recovery step."""
        user = await self._require_user_by_email(email)
        await self._otp.validate(user.email, code)
        return self._tokens.create_purpose_token(user.id, user.role, user.email, purpose)

    async def set_password(self, password: str, purpose_token: str) -> LoginResult:
        """First-time password set; logs the user in on success.

        The new password is committed before the login runs, so a failed
        login (e.g. disabled account) leaves it in place.
        """
        user = await self._establish_password(
            password, purpose_token, TokenPurpose.SET_PASSWORD
        )
        await self._user_repo.commit()
        return await self.login(user.email, password)

    async def reset_password(
        self, password: str, confirm_password: str, purpose_token: str
    ) -> UserResult:
        if password != confirm_password:
            raise ValidationException("Passwords do not match", field="confirmPassword")
        return await self._establish_password(
            password, purpose_token, TokenPurpose.RESET_PASSWORD
        )

    async def _establish_password(
        self, password: str, purpose_token: str, expected: TokenPurpose
    ) -> UserResult:
        """Store password for the token's account once every check has passed."""
        claims = self._verify_purpose_token(purpose_token)
        if claims.purpose != expected.value:
            logger.info(
                "Purpose token for %s presented to %s", claims.purpose, expected.value
            )
            raise AuthenticationException("Invalid token purpose")
        user = await self._require_user_by_email(claims.email)
        hashed = await self._hasher.hash(password)
        updated = await self._user_repo.update_password(user.id, hashed)
        logger.info("Password %s for user %s", expected.value, updated.id)
        return updated

    def _verify_purpose_token(self, token: str) -> PurposeClaims:
        try:
            return self._tokens.verify_purpose_token(token)
        except ExpiredTokenError as e:
            raise AuthenticationException("Token expired") from e
        except InvalidTokenError as e:
            logger.debug("Purpose token rejected: %s", e)
            raise AuthenticationException("Invalid token") from e

    async def resend_otp(self, email: str) -> None:
        user = await self._require_user_by_email(email)
        await self._otp.resend(user.email)

    async def logout(self, user_id: str) -> None:
        """Confirm the identity still exists. Tokens stay valid until expiry."""
        user = await self._require_user_by_id(user_id)
        logger.info("User %s logged out", user.id)

    async def get_profile(self, user_id: str) -> UserResult:
        return await self._require_user_by_id(user_id)
