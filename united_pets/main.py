"""
United Pets Backend — FastAPI Application Factory
==================================================

What:  Builds the FastAPI application: logging, middleware, exception
       handlers, routers, and the process-scoped collaborators.
Who:   uvicorn (`uvicorn united_pets.main:app`) and the test suite, which
       calls `create_app(...)` with an in-memory database and fake adapters.

Application Architecture:
    ┌──────────────────────────────────────────────────────────────┐
    │                        FastAPI App                           │
    │                                                              │
    │  Middleware:  RateLimit → RequestID → Logging → GZip → CORS  │
    │                                                              │
    │  Routers:     health · users · pets · adoption_requests      │
    │               donations · payments · mail                    │
    │                                                              │
    │  app.state:   database · identity_verifier                   │
    │               payment_gateway · mailer                       │
    │                                                              │
    │  Errors:      UnitedPetsError → its status_code / error_code │
    │               RequestValidationError → 400                   │
    │               anything else → 500                            │
    └──────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report missing secrets, ping the database.
    Shutdown: close the payment HTTP client, dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from united_pets import __version__
from united_pets.config import settings
from united_pets.database import Database
from united_pets.exceptions import CircuitBreakerOpenError, UnitedPetsError
from united_pets.middleware.logging import RequestLoggingMiddleware
from united_pets.middleware.rate_limit import RateLimitMiddleware
from united_pets.middleware.request_id import RequestIDMiddleware, request_id_var
from united_pets.routes import adoption_requests, donations, health, mail, payments, pets, users
from united_pets.services.adapter_base import IdentityVerifier, Mailer, PaymentGateway
from united_pets.services.identity_service import FirebaseIdentityVerifier
from united_pets.services.mail_service import SmtpMailer
from united_pets.services.payment_service import StripePaymentGateway

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configure the root logger once: stdout, one line per record."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("United Pets Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: public routes and /health still work
        logger.error("Configuration error: %s", str(e))

    if await app.state.database.ping():
        logger.info("Database reachable")
    else:
        logger.error("Database unreachable at startup; requests will fail until it is back")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("United Pets Backend shutting down...")
    await app.state.payment_gateway.close()
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the shared error body `{error, message, details?, request_id}`.

    Every UnitedPetsError subclass carries its own status_code and error_code,
    so one handler covers the whole hierarchy:
        4xx → message and context returned (the client can act on them)
        5xx → context logged only; adapter and database internals stay server-side
    """

    @app.exception_handler(UnitedPetsError)
    async def handle_app_error(request: Request, exc: UnitedPetsError):
        rid = request_id_var.get("")
        status_code = exc.status_code
        headers = {}

        if isinstance(exc, CircuitBreakerOpenError):
            headers["Retry-After"] = str(exc.recovery_time)

        if status_code >= 500:
            logger.error(
                "[%s] %s on %s %s: %s | Context: %s",
                rid, type(exc).__name__, request.method, request.url.path, exc.message, exc.context,
            )
            details = {"recovery_time": exc.recovery_time} if isinstance(exc, CircuitBreakerOpenError) else None
            content = _error_body(exc.error_code, exc.message, details)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            content = _error_body(exc.error_code, exc.message, exc.context)

        return JSONResponse(status_code=status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed body, path or query parameter → 400 with the offending locations."""
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "Request validation failed", {"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace to the log, generic message to the client."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    database: Optional[Database] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
    payment_gateway: Optional[PaymentGateway] = None,
    mailer: Optional[Mailer] = None,
) -> FastAPI:
    """
    Assemble the application.

    Every collaborator defaults to the production implementation built from
    settings; tests pass their own. They are attached to `app.state` here
    (not in the lifespan) so requests work even when no lifespan runs.
    """
    app = FastAPI(
        title="United Pets API",
        description=(
            "Pet adoption platform backend: users, pets, adoption requests and "
            "donation campaigns with role and ownership based authorization."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.database = database or Database()
    app.state.identity_verifier = identity_verifier or FirebaseIdentityVerifier()
    app.state.payment_gateway = payment_gateway or StripePaymentGateway()
    app.state.mailer = mailer or SmtpMailer()

    # ── Middleware (last added runs first) ────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # ── Routers ───────────────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(pets.router)
    app.include_router(adoption_requests.router)
    app.include_router(donations.router)
    app.include_router(payments.router)
    app.include_router(mail.router)

    return app


# uvicorn entry point: `uvicorn united_pets.main:app`
app = create_app()
