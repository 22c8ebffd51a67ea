"""
United Pets Backend — Access Log Middleware
============================================

What:  One log line per HTTP request on the `united_pets.access` logger.

Line format:
    PATCH /pets/0f1e.../adopt 403 12.4ms [a1b2c3d4e5f6] from 10.0.0.7 as bob@example.com

Level by outcome:
    5xx → ERROR   4xx → WARNING   otherwise → INFO

Request bodies and the Authorization header are never logged. The caller's
email appears only once the route has verified it.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from united_pets.middleware.request_id import request_id_var

logger = logging.getLogger("united_pets.access")

# Probed every few seconds by load balancers
QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        identity = getattr(request.state, "identity", None)
        caller = identity.email if identity is not None else "anonymous"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s as %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            caller,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
