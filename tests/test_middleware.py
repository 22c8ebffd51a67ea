"""
United Pets Backend — Middleware Tests
=======================================

What we test:
    ✅ Rate limiter: 429 + Retry-After past the limit, excluded paths untouched
    ✅ Request ID: sane client ids echoed, unsafe ones replaced
    ✅ Access log level follows the response status
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from united_pets.middleware.logging import level_for_status
from united_pets.middleware.rate_limit import RateLimitMiddleware
from united_pets.middleware.request_id import RequestIDMiddleware


def build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_rejects_after_limit(self):
        app = build_app()
        app.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60, enabled=True)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get("/ping")).status_code for _ in range(3)]
            limited = await client.get("/ping")
            health = await client.get("/health")

        assert statuses == [200, 200, 429]
        assert limited.json()["error"] == "rate_limit_exceeded"
        assert 1 <= int(limited.headers["Retry-After"]) <= 61
        assert health.status_code == 200

    @pytest.mark.asyncio
    async def test_disabled_limiter_lets_everything_through(self):
        app = build_app()
        app.add_middleware(RateLimitMiddleware, max_requests=1, window_seconds=60, enabled=False)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get("/ping")).status_code for _ in range(3)]

        assert statuses == [200, 200, 200]


class TestRequestId:

    @pytest.mark.asyncio
    async def test_client_id_echoed_or_replaced(self):
        app = build_app()
        app.add_middleware(RequestIDMiddleware)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            echoed = await client.get("/ping", headers={"X-Request-ID": "abc-123"})
            replaced = await client.get("/ping", headers={"X-Request-ID": "bad id with spaces"})
            generated = await client.get("/ping")

        assert echoed.headers["X-Request-ID"] == "abc-123"
        assert replaced.headers["X-Request-ID"] != "bad id with spaces"
        assert len(generated.headers["X-Request-ID"]) == 12


@pytest.mark.parametrize(
    "status, level",
    [(200, logging.INFO), (302, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
)
def test_access_log_level(status, level):
    assert level_for_status(status) == level
