import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = structlog.get_logger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request limit per client IP.

    Counters live in process memory, so limits apply per worker.
    """

    def __init__(self, app: ASGIApp, limit: int, window: int = 60) -> None:
        super().__init__(app)
        self.limit = limit
        self.window = window
        self._windows: dict[str, tuple[int, int]] = {}  # client -> (window start, request count)

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def hit(self, key: str, now: float | None = None) -> tuple[bool, int, int]:
        """Count a request. Returns (allowed, remaining, seconds until reset)."""
        current = int(now if now is not None else time.time())
        window_start = current - current % self.window
        start, count = self._windows.get(key, (window_start, 0))
        if start != window_start:
            start, count = window_start, 0
            # Drop counters from earlier windows
            self._windows = {k: v for k, v in self._windows.items() if v[0] == window_start}
        count += 1
        self._windows[key] = (start, count)
        return count <= self.limit, max(0, self.limit - count), start + self.window - current

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        key = self.client_key(request)
        allowed, remaining, reset_in = self.hit(key)
        if not allowed:
            logger.warning("rate_limit_exceeded", client=key, path=request.url.path)
            return JSONResponse(
                status_code=429,
                content={"message": "Too many requests", "type": "rate_limited"},
                headers={"Retry-After": str(reset_in), "X-RateLimit-Limit": str(self.limit), "X-RateLimit-Remaining": "0"},
            )
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
