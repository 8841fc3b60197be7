"""Security headers middleware.

Every response is marked non-cacheable (bodies carry tokens and profile
data) and non-embeddable. HSTS is sent only when hsts=True (production),
so local HTTP development does not pin the browser to HTTPS. Raw ASGI.
"""

from typing import Callable

BASE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}
HSTS_VALUE = "max-age=31536000; includeSubDomains"


def build_security_headers(hsts: bool) -> list[tuple[bytes, bytes]]:
    headers = dict(BASE_HEADERS)
    if hsts:
        headers["Strict-Transport-Security"] = HSTS_VALUE
    return [(k.lower().encode(), v.encode()) for k, v in headers.items()]


def SecurityHeadersMiddleware(app: Callable, hsts: bool = False) -> Callable:
    defaults = build_security_headers(hsts)

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                existing = list(message.get("headers", []))
                present = {name.lower() for name, _ in existing}
                # Route-set values win over the defaults.
                existing.extend(h for h in defaults if h[0] not in present)
                message["headers"] = existing
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
