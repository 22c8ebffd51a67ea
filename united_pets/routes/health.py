"""
United Pets Backend — Root & Health Routes
===========================================

What:  `GET /` greeting and `GET /health` probe.
Who:   Load balancers, container health checks, and anyone checking the
       server is up.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from united_pets import __version__
from united_pets.schemas.common import HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: set once when the app is imported
_start_time = time.time()


@router.get("/", response_model=MessageResponse, summary="Server greeting")
async def root() -> MessageResponse:
    return MessageResponse(message="welcome to the server")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports database connectivity and uptime.",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Probe the database with SELECT 1.

    Payment and mail providers are not probed; their failures surface on the
    routes that use them and the payment circuit breaker covers the rest.
    """
    database_ok = await request.app.state.database.ping()
    if not database_ok:
        logger.warning("Health check: database unreachable")
        response.status_code = 503

    return HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        version=__version__,
        database="connected" if database_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
