"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses (SRP, OCP for adding new handlers).

Every error body has the shape
{"success": false, "statusCode", "error", "message", "details"} except
rate-limit rejections, which use {"success": false, "message", "statusCode": 429}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.limiter import GLOBAL
from app.domain.exceptions import AuthGateException, RateLimitExceededException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "USER_NOT_FOUND": 404,
    "OTP_NOT_FOUND": 404,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "ACCOUNT_DISABLED": 403,
    "VALIDATION_ERROR": 400,
    "OTP_EXPIRED": 400,
    "OTP_MISMATCH": 400,
    "USER_ALREADY_EXISTS": 409,
    "RATE_LIMITED": 429,
    "CONFIGURATION_ERROR": 500,
}


def error_body(
    status: int, error: str, message: Any, details: Any = None
) -> dict[str, Any]:
    return {
        "success": False,
        "statusCode": status,
        "error": error,
        "message": message,
        "details": details if details is not None else {},
    }


def rate_limited_response(message: str, retry_after: int) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": message, "statusCode": 429},
        headers={"Retry-After": str(max(retry_after, 1))},
    )


def _domain_exception_handler(request: Request, exc: AuthGateException) -> JSONResponse:
    """Return the error envelope from AuthGateException.to_dict() with the mapped status."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    payload = exc.to_dict()
    return JSONResponse(
        status_code=status,
        content=error_body(status, payload["error"], payload["message"], payload["details"]),
    )


def _policy_rate_limit_handler(
    request: Request, exc: RateLimitExceededException
) -> JSONResponse:
    return rate_limited_response(exc.message, exc.retry_after)


def _global_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """slowapi rejection. Sync: SlowAPIMiddleware calls it without awaiting."""
    retry_after = GLOBAL.window_seconds
    limit = getattr(exc, "limit", None)
    if limit is not None:
        retry_after = limit.limit.get_expiry()
    logger.warning("Global rate limit exceeded on %s: %s", request.url.path, exc.detail)
    return rate_limited_response(GLOBAL.message, retry_after)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content=error_body(
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            jsonable_encoder(exc.errors()),
        ),
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, "HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=error_body(500, "INTERNAL_ERROR", detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Starlette picks the handler for the
    most specific class in the exception's MRO, so RateLimitExceededException
    gets its own envelope even though it subclasses AuthGateException.
    """
    app.add_exception_handler(RateLimitExceededException, _policy_rate_limit_handler)
    app.add_exception_handler(RateLimitExceeded, _global_rate_limit_handler)
    app.add_exception_handler(AuthGateException, _domain_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
