"""Request ID middleware.

Forwards a safe client X-Request-ID or mints one, exposes it on
request.state and in the response, and binds it to the logging context
so every log line for the request carries it. Raw ASGI.
"""

import re
import uuid
from typing import Callable

from app.shared.telemetry.logging import request_id_var

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


def _header_value(scope: dict, name: str) -> str | None:
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("latin-1")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Keep raw only if it is short and log-safe; otherwise mint a UUID4 hex."""
    candidate = (raw or "").strip()
    if REQUEST_ID_ALLOWED_PATTERN.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    header_bytes = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_bytes, request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)

    return asgi_app
