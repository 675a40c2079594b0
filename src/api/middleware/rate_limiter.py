"""
Per-client rate limiting middleware.
In-memory sliding window keyed by client IP; health and docs are exempt.
Forwarding headers are only read when the app sits behind a trusted proxy
(config.API_TRUST_PROXY_HEADERS).
"""
import time
from collections import deque
from typing import Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

EXEMPT_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects a client with 429 once it exceeds ``requests_per_minute``."""

    def __init__(self, app, requests_per_minute: int = 60, window_seconds: int = 60,
                 trust_proxy_headers: bool = False):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.window_seconds = window_seconds
        self.trust_proxy_headers = trust_proxy_headers
        self._requests: Dict[str, Deque[float]] = {}
        self._last_sweep = 0.0

    def client_key(self, request: Request) -> str:
        if self.trust_proxy_headers:
            # The proxy puts the original client first
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
            real_ip = request.headers.get("x-real-ip")
            if real_ip:
                return real_ip
        return request.client.host if request.client else "unknown"

    def _trim(self, hits: Deque[float], now: float):
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now: float):
        """Forget clients with no hits left in the window."""
        for key in list(self._requests):
            self._trim(self._requests[key], now)
            if not self._requests[key]:
                del self._requests[key]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(EXEMPT_PREFIXES):
            return await call_next(request)

        now = time.time()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        key = self.client_key(request)
        hits = self._requests.setdefault(key, deque())
        self._trim(hits, now)

        if len(hits) >= self.requests_per_minute:
            retry_after = max(1, int(hits[0] + self.window_seconds - now))
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Rate limit exceeded",
                    "detail": f"Maximum {self.requests_per_minute} requests per minute",
                    "retry_after": retry_after,
                },
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(self.requests_per_minute),
                    "X-RateLimit-Remaining": "0",
                },
            )

        hits.append(now)
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_minute - len(hits)))
        return response
