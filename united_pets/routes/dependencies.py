"""
United Pets Backend — Request Dependencies (Authorization Gate, HTTP side)
===========================================================================

What:  FastAPI dependencies that resolve the caller and the process-scoped
       adapters for a route.

Tiers:
    public          no dependency
    authenticated   Depends(get_current_identity)
    admin           Depends(require_admin)
    owner-or-admin  Depends(get_current_identity) + the service's ownership check

Outcomes:
    no / empty bearer credential  → UnauthorizedError       (401)
    verifier rejects the token    → InvalidCredentialError  (403)
    signing keys unreachable      → IdentityProviderError   (503)
"""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.database import get_db_session
from united_pets.exceptions import UnauthorizedError
from united_pets.services.adapter_base import Identity, IdentityVerifier, Mailer, PaymentGateway
from united_pets.services.authorization_service import authorization_service

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches our handler as a 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Identity:
    """Verify the bearer token and return the caller's identity."""
    if credentials is None or not credentials.credentials.strip():
        raise UnauthorizedError()

    identity = await verifier.verify(credentials.credentials.strip())
    request.state.identity = identity
    return identity


async def require_admin(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> Identity:
    """Authenticated AND users.role == 'admin'."""
    await authorization_service.require_admin(db, identity)
    return identity
