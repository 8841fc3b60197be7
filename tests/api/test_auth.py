"""Tests for auth endpoints: login, refresh, profile, OTP recovery, logout."""

import pytest
from httpx import AsyncClient

from app.domain.enums import TokenPurpose
from app.infrastructure.security import TokenService

pytestmark = pytest.mark.requires_db

PREFIX = "/api/v1/auth"
NEW_PASSWORD = "NewPassword456!"


async def test_login_missing_body_returns_422(client: AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/login", json={})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == 422
    assert body["error"] == "VALIDATION_ERROR"


async def test_login_short_password_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        f"{PREFIX}/login", json={"email": "someone@example.com", "password": "short"}
    )
    assert response.status_code == 422


async def test_login_unknown_email_returns_404(client: AsyncClient) -> None:
    response = await client.post(
        f"{PREFIX}/login", json={"email": "nobody@example.com", "password": "password123"}
    )
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


async def test_login_wrong_password_returns_401(client: AsyncClient, officer) -> None:
    response = await client.post(
        f"{PREFIX}/login", json={"email": officer.email, "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_login_without_password_set_returns_401(client: AsyncClient, create_user) -> None:
    user = await create_user("nopass@example.com", password=None)
    response = await client.post(
        f"{PREFIX}/login", json={"email": user.email, "password": "anything123"}
    )
    assert response.status_code == 401


async def test_login_disabled_account_returns_403(client: AsyncClient, create_user) -> None:
    user = await create_user("disabled@example.com", is_active=False)
    response = await client.post(
        f"{PREFIX}/login", json={"email": user.email, "password": "Password123!"}
    )
    assert response.status_code == 403
    assert response.json()["error"] == "ACCOUNT_DISABLED"


async def test_login_success_returns_envelope_and_cookies(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    response = await client.post(
        f"{PREFIX}/login", json={"email": "Officer@Example.com", "password": "Password123!"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["statusCode"] == 200
    assert body["message"] == "Login successfully!"
    data = body["data"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["id"] == officer.id
    assert data["user"]["hasPassword"] is True
    assert "hashedPassword" not in data["user"]
    claims = token_service.verify_access_token(data["accessToken"])
    assert claims.user_id == officer.id
    assert claims.role == "OFFICER"

    assert response.cookies.get("accessToken") == data["accessToken"]
    refresh = response.cookies.get("refreshToken")
    assert refresh and token_service.verify_refresh_token(refresh) == officer.id
    set_cookie = ",".join(response.headers.get_list("set-cookie")).lower()
    assert "httponly" in set_cookie
    assert "secure" in set_cookie


async def test_current_user_via_bearer_header(
    client: AsyncClient, officer, auth_headers
) -> None:
    response = await client.get(f"{PREFIX}/user", headers=auth_headers(officer))
    assert response.status_code == 200
    assert response.json()["data"]["email"] == officer.email


async def test_current_user_via_cookie(client: AsyncClient, officer) -> None:
    login = await client.post(
        f"{PREFIX}/login", json={"email": officer.email, "password": "Password123!"}
    )
    assert login.status_code == 200
    response = await client.get(f"{PREFIX}/user")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == officer.id


async def test_current_user_without_token_returns_401(client: AsyncClient) -> None:
    response = await client.get(f"{PREFIX}/user")
    assert response.status_code == 401
    assert response.json()["message"] == "No token provided"


async def test_current_user_with_garbage_token_returns_401(client: AsyncClient) -> None:
    response = await client.get(f"{PREFIX}/user", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


async def test_refresh_token_is_not_an_access_token(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    refresh = token_service.create_refresh_token(officer.id)
    response = await client.get(
        f"{PREFIX}/user", headers={"Authorization": f"Bearer {refresh}"}
    )
    assert response.status_code == 401


async def test_purpose_token_is_not_an_access_token(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    token = token_service.create_purpose_token(
        officer.id, officer.role, officer.email, TokenPurpose.SET_PASSWORD
    )
    response = await client.get(f"{PREFIX}/user", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_access_token_refresh_from_cookie(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    login = await client.post(
        f"{PREFIX}/login", json={"email": officer.email, "password": "Password123!"}
    )
    assert login.status_code == 200
    response = await client.get(f"{PREFIX}/access-token")
    assert response.status_code == 200
    token = response.json()["data"]["accessToken"]
    assert token_service.verify_access_token(token).user_id == officer.id


async def test_access_token_without_refresh_cookie_returns_401(client: AsyncClient) -> None:
    response = await client.get(f"{PREFIX}/access-token")
    assert response.status_code == 401
    assert response.json()["message"] == "No refresh token provided"


async def test_access_token_rejects_access_token_as_refresh(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    client.cookies.set("refreshToken", token_service.create_access_token(officer.id, "OFFICER"))
    response = await client.get(f"{PREFIX}/access-token")
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid refresh token"


async def test_set_password_flow_for_new_account(
    client: AsyncClient, create_user, last_otp
) -> None:
    """check-user -> validate-otp -> set-password logs the user in."""
    user = await create_user("fresh@example.com", password=None)

    check = await client.post(f"{PREFIX}/check-user", json={"email": user.email})
    assert check.status_code == 200
    assert check.json()["data"] == {"hasPassword": False}

    validate = await client.post(
        f"{PREFIX}/validate-otp",
        json={"email": user.email, "otp": last_otp(user.email), "purpose": "set-password"},
    )
    assert validate.status_code == 200
    data = validate.json()["data"]
    assert data["purpose"] == "set-password"

    response = await client.post(
        f"{PREFIX}/set-password",
        json={"password": NEW_PASSWORD},
        headers={"set-token": f"Bearer {data['token']}"},
    )
    assert response.status_code == 200
    body = response.json()["data"]
    assert body["user"]["hasPassword"] is True
    assert response.cookies.get("accessToken") == body["accessToken"]

    login = await client.post(
        f"{PREFIX}/login", json={"email": user.email, "password": NEW_PASSWORD}
    )
    assert login.status_code == 200


async def test_check_user_with_password_sends_no_otp(
    client: AsyncClient, officer, otp_sender
) -> None:
    response = await client.post(f"{PREFIX}/check-user", json={"email": officer.email})
    assert response.status_code == 200
    assert response.json()["data"]["hasPassword"] is True
    assert list(otp_sender.sent) == []


async def test_check_user_is_forget_sends_otp(client: AsyncClient, officer, otp_sender) -> None:
    response = await client.post(
        f"{PREFIX}/check-user", json={"email": officer.email, "isForget": True}
    )
    assert response.status_code == 200
    assert [email for email, _ in otp_sender.sent] == [officer.email]


async def test_check_user_unknown_email_returns_404(client: AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/check-user", json={"email": "ghost@example.com"})
    assert response.status_code == 404


async def test_reset_password_flow(client: AsyncClient, officer, last_otp) -> None:
    forgot = await client.post(f"{PREFIX}/forgot-password", json={"email": officer.email})
    assert forgot.status_code == 200
    assert forgot.json()["message"] == "OTP sent successfully"

    validate = await client.post(
        f"{PREFIX}/validate-otp",
        json={"email": officer.email, "otp": last_otp(officer.email), "purpose": "reset-password"},
    )
    token = validate.json()["data"]["token"]

    response = await client.patch(
        f"{PREFIX}/reset-password",
        json={"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD},
        headers={"reset-token": f"Bearer {token}"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["id"] == officer.id

    old = await client.post(
        f"{PREFIX}/login", json={"email": officer.email, "password": "Password123!"}
    )
    assert old.status_code == 401
    new = await client.post(
        f"{PREFIX}/login", json={"email": officer.email, "password": NEW_PASSWORD}
    )
    assert new.status_code == 200


async def test_reset_password_mismatch_returns_400(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    token = token_service.create_purpose_token(
        officer.id, officer.role, officer.email, TokenPurpose.RESET_PASSWORD
    )
    response = await client.patch(
        f"{PREFIX}/reset-password",
        json={"password": NEW_PASSWORD, "confirmPassword": "Different789!"},
        headers={"reset-token": f"Bearer {token}"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Passwords do not match"


async def test_purpose_tokens_are_not_interchangeable(
    client: AsyncClient, officer, token_service: TokenService
) -> None:
    set_token = token_service.create_purpose_token(
        officer.id, officer.role, officer.email, TokenPurpose.SET_PASSWORD
    )
    response = await client.patch(
        f"{PREFIX}/reset-password",
        json={"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD},
        headers={"reset-token": f"Bearer {set_token}"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token purpose"


async def test_set_password_without_header_returns_401(client: AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/set-password", json={"password": NEW_PASSWORD})
    assert response.status_code == 401


async def test_set_password_with_access_token_returns_401(
    client: AsyncClient, officer, auth_headers
) -> None:
    access = auth_headers(officer)["Authorization"]
    response = await client.post(
        f"{PREFIX}/set-password",
        json={"password": NEW_PASSWORD},
        headers={"set-token": access},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


async def test_validate_otp_wrong_code_returns_400(client: AsyncClient, officer, last_otp) -> None:
    await client.post(f"{PREFIX}/forgot-password", json={"email": officer.email})
    code = last_otp(officer.email)
    wrong = "100000" if code != "100000" else "100001"
    response = await client.post(
        f"{PREFIX}/validate-otp",
        json={"email": officer.email, "otp": wrong, "purpose": "reset-password"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "OTP_MISMATCH"


async def test_validate_otp_is_single_use(client: AsyncClient, officer, last_otp) -> None:
    await client.post(f"{PREFIX}/forgot-password", json={"email": officer.email})
    payload = {"email": officer.email, "otp": last_otp(officer.email), "purpose": "reset-password"}
    first = await client.post(f"{PREFIX}/validate-otp", json=payload)
    assert first.status_code == 200
    second = await client.post(f"{PREFIX}/validate-otp", json=payload)
    assert second.status_code == 404
    assert second.json()["error"] == "OTP_NOT_FOUND"


async def test_validate_otp_rejects_non_numeric_code(client: AsyncClient, officer) -> None:
    response = await client.post(
        f"{PREFIX}/validate-otp",
        json={"email": officer.email, "otp": "12ab56", "purpose": "reset-password"},
    )
    assert response.status_code == 422


async def test_resend_otp_supersedes_previous_code(
    app, client: AsyncClient, officer, otp_sender, last_otp
) -> None:
    # Four recovery calls for one email exceed the password-reset budget.
    app.state.rate_limiter.enabled = False
    await client.post(f"{PREFIX}/forgot-password", json={"email": officer.email})
    first_code = last_otp(officer.email)
    resend = await client.post(f"{PREFIX}/resend-otp", json={"email": officer.email})
    assert resend.status_code == 200
    assert len(otp_sender.sent) == 2
    second_code = last_otp(officer.email)
    if first_code != second_code:
        stale = await client.post(
            f"{PREFIX}/validate-otp",
            json={"email": officer.email, "otp": first_code, "purpose": "reset-password"},
        )
        assert stale.status_code == 400
    fresh = await client.post(
        f"{PREFIX}/validate-otp",
        json={"email": officer.email, "otp": second_code, "purpose": "reset-password"},
    )
    assert fresh.status_code == 200


async def test_logout_clears_cookies(client: AsyncClient, officer) -> None:
    await client.post(f"{PREFIX}/login", json={"email": officer.email, "password": "Password123!"})
    response = await client.post(f"{PREFIX}/logout")
    assert response.status_code == 200
    assert response.json()["message"] == "User logged out successfully"
    assert client.cookies.get("accessToken") is None
    assert client.cookies.get("refreshToken") is None


async def test_logout_requires_authentication(client: AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/logout")
    assert response.status_code == 401


async def test_set_password_is_kept_when_auto_login_is_refused(
    client: AsyncClient, admin, create_user, last_otp, auth_headers
) -> None:
    """A disabled account still gets the password it set."""
    user = await create_user("dormant@example.com", password=None, is_active=False)
    await client.post(f"{PREFIX}/check-user", json={"email": user.email})
    validate = await client.post(
        f"{PREFIX}/validate-otp",
        json={"email": user.email, "otp": last_otp(user.email), "purpose": "set-password"},
    )
    token = validate.json()["data"]["token"]

    response = await client.post(
        f"{PREFIX}/set-password",
        json={"password": NEW_PASSWORD},
        headers={"set-token": f"Bearer {token}"},
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Your account has been disabled"

    enable = await client.patch(
        f"/api/v1/users/{user.id}/status", json={"status": True}, headers=auth_headers(admin)
    )
    assert enable.status_code == 200
    login = await client.post(
        f"{PREFIX}/login", json={"email": user.email, "password": NEW_PASSWORD}
    )
    assert login.status_code == 200


async def test_reset_token_is_rejected_by_set_password(
    client: AsyncClient, create_user, token_service
) -> None:
    user = await create_user("fresh@example.com", password=None)
    token = token_service.create_purpose_token(
        user.id, user.role, user.email, TokenPurpose.RESET_PASSWORD
    )
    response = await client.post(
        f"{PREFIX}/set-password",
        json={"password": NEW_PASSWORD},
        headers={"set-token": f"Bearer {token}"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token purpose"

    check = await client.post(f"{PREFIX}/check-user", json={"email": user.email})
    assert check.json()["data"] == {"hasPassword": False}


async def test_forgot_password_unknown_email_returns_404(
    client: AsyncClient, otp_sender
) -> None:
    response = await client.post(f"{PREFIX}/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 404
    assert list(otp_sender.sent) == []
