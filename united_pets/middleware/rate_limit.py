"""
United Pets Backend — Rate Limiting Middleware
===============================================

What:  Per-IP sliding-window limiter; over the limit → 429 with Retry-After.
How:   Each client IP keeps a deque of request timestamps. On every request,
       timestamps older than the window are dropped from the left; if the
       remaining count has reached the limit the request is rejected.

    window = 60s, limit = 300
    ──────────────[ t-60 ········ now ]──▶
                    └ counted ┘

Single-process only: state lives in this process's memory. Behind several
workers each one enforces its own budget.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from united_pets.config import settings

logger = logging.getLogger(__name__)

# Drop idle client entries every N admitted requests
CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self.enabled = settings.rate_limit_enabled if enabled is None else enabled
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._admitted = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.enabled or request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window_start = now - self.window_seconds

        hits = self._hits[client_ip]
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds",
                client_ip, len(hits), self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many requests. Please wait {retry_after} seconds before retrying.",
                    "details": {"retry_after": retry_after},
                },
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        self._admitted += 1
        if self._admitted % CLEANUP_EVERY == 0:
            self._forget_idle_clients(window_start)

        return await call_next(request)

    def _forget_idle_clients(self, window_start: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for ip in idle:
            del self._hits[ip]
        if idle:
            logger.debug("Dropped rate limit state for %d idle clients", len(idle))
