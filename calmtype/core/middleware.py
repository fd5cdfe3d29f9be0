"""Middleware configuration for FastAPI application"""
import time
from dataclasses import dataclass, field
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from calmtype.core.config import Settings
from calmtype.core.logging import security_logger

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "style-src 'self' 'unsafe-inline'",
        "script-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https:",
        "connect-src 'self' https://api.deepseek.com",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


@dataclass
class FixedWindowRateLimiter:
    """Per-identifier request counter that resets every `window_seconds`.

    State is per process; several workers each keep their own counts.
    """

    max_requests: int
    window_seconds: int
    clock: Callable[[], float] = time.monotonic
    _windows: dict = field(default_factory=dict)

    def hit(self, identifier: str) -> bool:
        """Count one request; False when the identifier is over its limit."""
        now = self.clock()
        started, count = self._windows.get(identifier, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[identifier] = (started, count)
        if len(self._windows) > 10_000:
            self._evict(now)
        return count <= self.max_requests

    def _evict(self, now: float) -> None:
        expired = [k for k, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]


def get_client_identifier(request: Request) -> str:
    # behind a proxy (Render, Caddy) the first X-Forwarded-For hop is the client
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def setup_cors_middleware(app: FastAPI, settings: Settings):
    """Setup CORS middleware for FastAPI app"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def setup_security_middleware(app: FastAPI, settings: Settings):
    """Security headers on every response and a rate limit on /api/."""
    limiter = None
    if settings.rate_limit_enabled:
        limiter = FixedWindowRateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.state.rate_limiter = limiter

    @app.middleware("http")
    async def security_middleware(request: Request, call_next):
        if limiter is not None and request.url.path.startswith("/api/"):
            identifier = get_client_identifier(request)
            if not limiter.hit(identifier):
                security_logger.warning("Rate limit exceeded for %s on %s", identifier, request.url.path)
                response = JSONResponse(status_code=429, content={"error": RATE_LIMIT_MESSAGE})
                response.headers.update(SECURITY_HEADERS)
                return response

        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
