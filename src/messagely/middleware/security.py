"""Response hardening for a private-messaging API.

Every response is JSON that may contain someone's messages, so on top of
the usual anti-sniffing and anti-framing headers nothing may be cached by
browsers or shared proxies. Routes can still set their own Cache-Control.

HSTS is only sent when the request reached us over TLS, either directly
or through a proxy that reports it in X-Forwarded-Proto.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

PRIVATE_RESPONSE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}

HSTS = "max-age=31536000; includeSubDomains"


def _is_https(request: Request) -> bool:
    forwarded = request.headers.get("X-Forwarded-Proto", "")
    return request.url.scheme == "https" or forwarded.split(",")[0].strip() == "https"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(PRIVATE_RESPONSE_HEADERS)
        for name, value in NO_CACHE_HEADERS.items():
            response.headers.setdefault(name, value)
        if _is_https(request):
            response.headers["Strict-Transport-Security"] = HSTS
        return response
