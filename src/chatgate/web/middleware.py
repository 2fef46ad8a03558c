"""HTTP middleware: security headers and per-client rate limiting for the API."""

import math
import time
from collections import deque
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from chatgate.web.error_handlers import create_json_error_response

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com https://cdnjs.cloudflare.com",
        "font-src 'self' https://fonts.gstatic.com https://cdnjs.cloudflare.com",
        "script-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https: http:",
        "connect-src 'self' https://generativelanguage.googleapis.com",
        "object-src 'none'",
        "base-uri 'self'",
        "frame-ancestors 'self'",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add browser hardening headers to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window request limit per client address on paths under `path_prefix`."""

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int,
        window_seconds: int,
        path_prefix: str = "/api/",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        current = self._clock()
        self._sweep(current)
        hits = self._hits.setdefault(self._client_key(request), deque())
        self._prune(hits, current)

        if len(hits) >= self.max_requests:
            reset = max(1, math.ceil(self.window_seconds - (current - hits[0])))
            response: Response = create_json_error_response(
                status_code=429, message="Too many requests, please try again later.", error_type="rate_limited"
            )
            response.headers["Retry-After"] = str(reset)
            self._set_rate_limit_headers(response, remaining=0, reset=reset)
            return response

        hits.append(current)
        oldest = hits[0]
        response = await call_next(request)
        reset = max(1, math.ceil(self.window_seconds - (current - oldest)))
        self._set_rate_limit_headers(response, remaining=self.max_requests - len(hits), reset=reset)
        return response

    def _prune(self, hits: deque[float], current: float) -> None:
        while hits and current - hits[0] >= self.window_seconds:
            hits.popleft()

    def _sweep(self, current: float) -> None:
        """Drop clients with no hits inside the window, at most once per window."""
        if current - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = current
        for key, hits in list(self._hits.items()):
            self._prune(hits, current)
            if not hits:
                del self._hits[key]

    def _set_rate_limit_headers(self, response: Response, remaining: int, reset: int) -> None:
        response.headers["RateLimit-Limit"] = str(self.max_requests)
        response.headers["RateLimit-Remaining"] = str(remaining)
        response.headers["RateLimit-Reset"] = str(reset)
