"""
Raw ASGI middleware: security headers, rate limiting and the request gate.

Raw ASGI classes (not BaseHTTPMiddleware) so request streams are never
wrapped; rejected requests get the JSON error envelope sent directly.
"""

import json
import math
import threading
import time
from typing import Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from studio_cms.utils.exceptions import (
    CMSError,
    InvalidContentTypeError,
    MissingAuthHeaderError,
    RateLimitError,
)
from studio_web.responses import error_body

# Resources anyone may read without a token
PUBLIC_GET_PATHS = {
    "/api/hero",
    "/api/work",
    "/api/process",
    "/api/story",
    "/api/locations",
    "/api/contact",
    "/api/faq",
    "/api/images",
}
PUBLIC_PREFIXES = ["/api/auth/"]
PUBLIC_ROUTES = {"/api/health", "/api/contact/submit"}

ALLOWED_CONTENT_TYPES = ("application/json", "multipart/form-data")

BASE_SECURITY_HEADERS = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"x-xss-protection", b"1; mode=block"),
    (b"referrer-policy", b"strict-origin-when-cross-origin"),
]
PRODUCTION_SECURITY_HEADERS = [
    (b"strict-transport-security", b"max-age=31536000; includeSubDomains; preload"),
    (b"x-permitted-cross-domain-policies", b"none"),
    (b"x-download-options", b"noopen"),
    (b"x-dns-prefetch-control", b"off"),
]
ADMIN_CSP_DEVELOPMENT = (
    b"default-src 'self'; script-src 'self' 'unsafe-inline' 'unsafe-eval'; "
    b"style-src 'self' 'unsafe-inline'; img-src 'self' data: blob: http: https:; "
    b"connect-src 'self' ws: http: https:"
)
ADMIN_CSP_PRODUCTION = (
    b"default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
    b"img-src 'self' data: blob:; connect-src 'self'; frame-ancestors 'none'"
)


def _header(scope: Scope, name: bytes) -> Optional[str]:
    for key, value in scope.get("headers") or []:
        if key.lower() == name:
            return value.decode("latin-1")
    return None


async def send_error(send: Send, exc: CMSError, headers: Iterable[Tuple[bytes, bytes]] = ()) -> None:
    """Write ``exc`` as a JSON error envelope without entering the app"""
    payload = json.dumps(error_body(exc.message, exc.code, exc.details)).encode("utf-8")
    await send({
        "type": "http.response.start",
        "status": exc.status_code,
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(payload)).encode("latin-1")),
            *headers,
        ],
    })
    await send({"type": "http.response.body", "body": payload})


class SecurityHeadersMiddleware:
    """Adds hardening headers to every HTTP response"""

    def __init__(self, app: ASGIApp, production: bool = False):
        self.app = app
        self.production = production

    def _headers_for(self, path: str) -> List[Tuple[bytes, bytes]]:
        headers = list(BASE_SECURITY_HEADERS)
        if self.production:
            headers.extend(PRODUCTION_SECURITY_HEADERS)
        if path.startswith("/admin"):
            csp = ADMIN_CSP_PRODUCTION if self.production else ADMIN_CSP_DEVELOPMENT
            headers.append((b"content-security-policy", csp))
        return headers

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        extra = self._headers_for(scope.get("path") or "")

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                existing = {key.lower() for key, _ in message.get("headers") or []}
                headers = list(message.get("headers") or [])
                headers.extend((key, value) for key, value in extra if key not in existing)
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_headers)


class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows of ``window_seconds``"""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._lock = threading.Lock()
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep: Optional[float] = None

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int]:
        """Record one request; returns (allowed, seconds until the window resets)"""
        now = time.monotonic() if now is None else now
        with self._lock:
            if self._last_sweep is None or now - self._last_sweep >= self.window_seconds:
                self._cleanup(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)
            retry_after = max(1, math.ceil(self.window_seconds - (now - started)))
            return count <= self.max_requests, retry_after

    def _cleanup(self, now: float) -> None:
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now


class RateLimitMiddleware:
    """Per-IP budget: strict for login, looser for the rest of ``/api``"""

    LOGIN_PATH = "/api/auth/login"

    def __init__(self, app: ASGIApp, window_seconds: int = 900, auth_max: int = 5, api_max: int = 100):
        self.app = app
        self.auth_limiter = FixedWindowRateLimiter(auth_max, window_seconds)
        self.api_limiter = FixedWindowRateLimiter(api_max, window_seconds)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path = scope.get("path") or ""
        if scope.get("type") != "http" or not path.startswith("/api/"):
            await self.app(scope, receive, send)
            return

        client = scope.get("client")
        ip = client[0] if client else "unknown"
        if path == self.LOGIN_PATH:
            allowed, retry_after = self.auth_limiter.hit(ip)
            message = "Too many authentication attempts, please try again later."
        else:
            allowed, retry_after = self.api_limiter.hit(ip)
            message = None

        if not allowed:
            await send_error(
                send,
                RateLimitError(message, retry_after=retry_after),
                headers=[(b"retry-after", str(retry_after).encode("latin-1"))],
            )
            return
        await self.app(scope, receive, send)


class RequestGateMiddleware:
    """
    Cheap checks before routing:
    - POST/PUT bodies must be JSON or multipart
    - Non-public ``/api`` requests must at least carry an Authorization header
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    @staticmethod
    def _has_body(scope: Scope) -> bool:
        length = _header(scope, b"content-length")
        if length is not None:
            return length.strip() not in ("", "0")
        return _header(scope, b"transfer-encoding") is not None

    @staticmethod
    def _is_public(method: str, path: str) -> bool:
        if path in PUBLIC_ROUTES or any(path.startswith(p) for p in PUBLIC_PREFIXES):
            return True
        return method in ("GET", "HEAD", "OPTIONS") and path.rstrip("/") in PUBLIC_GET_PATHS

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path") or ""

        if method in ("POST", "PUT") and self._has_body(scope):
            content_type = (_header(scope, b"content-type") or "").lower()
            if not content_type.startswith(ALLOWED_CONTENT_TYPES):
                await send_error(send, InvalidContentTypeError())
                return

        if path.startswith("/api/") and not self._is_public(method, path):
            if not _header(scope, b"authorization"):
                await send_error(send, MissingAuthHeaderError())
                return

        await self.app(scope, receive, send)
