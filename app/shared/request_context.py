"""Shared helpers that derive caller identity from a Starlette Request."""

from __future__ import annotations

from slowapi.util import get_remote_address
from starlette.requests import Request

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# Clients that serialise a missing token send this literal.
_MISSING_TOKEN_LITERAL = "undefined"


def client_ip(request: Request) -> str:
    """Peer address of the connection.

    Forwarding headers are not read here; behind a proxy, TRUSTED_PROXIES
    enables ProxyHeadersMiddleware, which rewrites the peer for trusted hops.
    """
    return get_remote_address(request)


def parse_bearer(value: str | None) -> str | None:
    """Accept 'Bearer <t>' or a bare token; empty and 'undefined' mean absent."""
    if not value:
        return None
    value = value.strip()
    scheme, _, rest = value.partition(" ")
    token = rest.strip() if scheme.lower() == "bearer" else value
    if not token or token == _MISSING_TOKEN_LITERAL:
        return None
    return token


def extract_bearer_token(request: Request) -> str | None:
    """Access token from the Authorization header, else the accessToken cookie."""
    header = request.headers.get("Authorization")
    if header and header.lower().startswith("bearer "):
        token = parse_bearer(header)
        if token:
            return token
    return parse_bearer(request.cookies.get(ACCESS_TOKEN_COOKIE))
