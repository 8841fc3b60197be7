"""Auth API: login, token refresh, current user, OTP password recovery, logout.

Uses only injected dependencies (get_credential_service, get_current_user);
no manual repo construction. Browser clients get the access and refresh
tokens as httpOnly cookies; API clients can use the access token from the
response body as a Bearer header.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, Response

from app.api.v1.dependencies import CurrentUserDep, get_credential_service
from app.application.dtos.auth import LoginResult
from app.application.services import CredentialService
from app.core.config import get_settings
from app.core.limiter import AUTH, PASSWORD_RESET, STRICT, rate_limit
from app.domain.exceptions import AuthenticationException
from app.schemas.auth import (
    AccessTokenResponse,
    CheckUserRequest,
    CheckUserResponse,
    EmailRequest,
    LoginRequest,
    LoginResponse,
    PurposeTokenResponse,
    ResetPasswordRequest,
    SetPasswordRequest,
    ValidateOtpRequest,
)
from app.schemas.common import ApiResponse, ok
from app.schemas.user import UserResponse
from app.shared.request_context import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    parse_bearer,
)

router = APIRouter()

CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]


def _cookie_options() -> dict:
    """httpOnly + Secure always; SameSite=none and Domain only in production."""
    settings = get_settings()
    return {
        "httponly": True,
        "secure": True,
        "samesite": "none" if settings.is_production else "lax",
        "domain": settings.cookie_domain if settings.is_production else None,
        "path": "/",
    }


def _set_token_cookies(response: Response, access_token: str, refresh_token: str | None) -> None:
    max_age = get_settings().cookie_max_age_seconds
    options = _cookie_options()
    response.set_cookie(ACCESS_TOKEN_COOKIE, access_token, max_age=max_age, **options)
    if refresh_token:
        response.set_cookie(REFRESH_TOKEN_COOKIE, refresh_token, max_age=max_age, **options)


def _login_payload(result: LoginResult) -> LoginResponse:
    return LoginResponse(
        access_token=result.access_token,
        user=UserResponse.model_validate(result.user),
    )


def _purpose_token_from_header(value: str | None, header: str) -> str:
    token = parse_bearer(value)
    if not token:
        raise AuthenticationException(f"Missing {header} header")
    return token


@router.post(
    "/check-user",
    response_model=ApiResponse[CheckUserResponse],
    dependencies=[Depends(rate_limit(AUTH))],
)
async def check_user(body: CheckUserRequest, service: CredentialServiceDep):
    """Report whether the account has a password; sends an OTP when it does not (or isForget)."""
    result = await service.check_email(body.email, is_forget=body.is_forget)
    return ok(
        "User email and password checked successfully",
        CheckUserResponse(has_password=result.has_password),
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    dependencies=[Depends(rate_limit(AUTH))],
)
async def login(body: LoginRequest, response: Response, service: CredentialServiceDep):
    result = await service.login(body.email, body.password)
    _set_token_cookies(response, result.access_token, result.refresh_token)
    return ok("Login successfully!", _login_payload(result))


@router.get("/access-token", response_model=ApiResponse[AccessTokenResponse])
async def access_token(request: Request, response: Response, service: CredentialServiceDep):
    """Mint a new access token from the refreshToken cookie."""
    refresh_token = parse_bearer(request.cookies.get(REFRESH_TOKEN_COOKIE))
    if not refresh_token:
        raise AuthenticationException("No refresh token provided")
    token = await service.refresh_access(refresh_token)
    _set_token_cookies(response, token, None)
    return ok("Access token refreshed", AccessTokenResponse(access_token=token))


@router.get("/user", response_model=ApiResponse[UserResponse])
async def get_logged_in_user(current_user: CurrentUserDep, service: CredentialServiceDep):
    user = await service.get_profile(current_user.id)
    return ok("user retrieved successfully", UserResponse.model_validate(user))


@router.post(
    "/forgot-password",
    response_model=ApiResponse[None],
    dependencies=[Depends(rate_limit(PASSWORD_RESET))],
)
async def forgot_password(body: EmailRequest, service: CredentialServiceDep):
    await service.forgot_password(body.email)
    return ok("OTP sent successfully")


@router.post(
    "/validate-otp",
    response_model=ApiResponse[PurposeTokenResponse],
    dependencies=[Depends(rate_limit(PASSWORD_RESET))],
)
async def validate_otp(body: ValidateOtpRequest, service: CredentialServiceDep):
    """Consume the OTP and return a purpose token for set-password or reset-password."""
    token = await service.validate_otp_and_issue_purpose_token(body.email, body.otp, body.purpose)
    return ok(
        "OTP validated successfully",
        PurposeTokenResponse(token=token, purpose=body.purpose),
    )


@router.patch(
    "/reset-password",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(rate_limit(PASSWORD_RESET))],
)
async def reset_password(
    body: ResetPasswordRequest,
    service: CredentialServiceDep,
    reset_token: Annotated[str | None, Header(alias="reset-token")] = None,
):
    token = _purpose_token_from_header(reset_token, "reset-token")
    user = await service.reset_password(body.password, body.confirm_password, token)
    return ok("Password reset successfully", UserResponse.model_validate(user))


@router.post(
    "/set-password",
    response_model=ApiResponse[LoginResponse],
    dependencies=[Depends(rate_limit(STRICT))],
)
async def set_password(
    body: SetPasswordRequest,
    response: Response,
    service: CredentialServiceDep,
    set_token: Annotated[str | None, Header(alias="set-token")] = None,
):
    """First-time password; the caller is logged in on success."""
    token = _purpose_token_from_header(set_token, "set-token")
    result = await service.set_password(body.password, token)
    _set_token_cookies(response, result.access_token, result.refresh_token)
    return ok("Password set successfully", _login_payload(result))


@router.post(
    "/resend-otp",
    response_model=ApiResponse[None],
    dependencies=[Depends(rate_limit(PASSWORD_RESET))],
)
async def resend_otp(body: EmailRequest, service: CredentialServiceDep):
    await service.resend_otp(body.email)
    return ok("OTP resent successfully")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(response: Response, current_user: CurrentUserDep, service: CredentialServiceDep):
    """Clear the auth cookies. Issued tokens stay valid until they expire."""
    await service.logout(current_user.id)
    options = _cookie_options()
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **options)
    return ok("User logged out successfully")
