"""
United Pets Backend — Firebase ID Token Verifier
=================================================

What:  Verifies the bearer tokens the web client obtains from Firebase
       Authentication and turns them into an `Identity(email, subject)`.
How:   Firebase ID tokens are RS256 JWTs. The signing keys are published as a
       JWKS document; PyJWT's PyJWKClient fetches and caches them, then
       `jwt.decode` checks signature, expiry, audience (project id) and
       issuer (https://securetoken.google.com/<project id>).
When:  Once per authenticated request, from the authorization dependency.

Failure mapping:
    malformed / expired / wrong audience / unknown key id → InvalidCredentialError (403)
    JWKS endpoint unreachable or project id not configured → IdentityProviderError (503)
"""

import asyncio
import logging
from typing import Optional

import jwt
from jwt import PyJWKClient
from jwt.exceptions import InvalidTokenError, PyJWKClientConnectionError, PyJWKClientError

from united_pets.config import settings
from united_pets.exceptions import IdentityProviderError, InvalidCredentialError
from united_pets.services.adapter_base import Identity, IdentityVerifier

logger = logging.getLogger(__name__)

ISSUER_PREFIX = "https://securetoken.google.com/"


class FirebaseIdentityVerifier(IdentityVerifier):

    def __init__(
        self,
        project_id: Optional[str] = None,
        jwks_url: Optional[str] = None,
        jwk_client: Optional[PyJWKClient] = None,
        leeway: int = 30,
    ):
        self.project_id = project_id if project_id is not None else settings.firebase_project_id
        self.issuer = f"{ISSUER_PREFIX}{self.project_id}"
        self.leeway = leeway
        # Keys rotate every few hours; cache them for an hour
        self._jwk_client = jwk_client or PyJWKClient(
            jwks_url or settings.firebase_jwks_url,
            cache_keys=True,
            lifespan=3600,
            timeout=int(settings.identity_timeout),
        )

    async def verify(self, token: str) -> Identity:
        if not self.project_id:
            logger.error("FIREBASE_PROJECT_ID is not configured; rejecting token")
            raise IdentityProviderError()

        try:
            # PyJWKClient fetches over blocking urllib; keep it off the event loop
            signing_key = await asyncio.to_thread(self._jwk_client.get_signing_key_from_jwt, token)
        except PyJWKClientConnectionError as exc:
            logger.warning("Could not fetch identity signing keys: %s", exc)
            raise IdentityProviderError(context={"error_type": type(exc).__name__})
        except (PyJWKClientError, InvalidTokenError) as exc:
            raise InvalidCredentialError(context={"reason": str(exc)})

        try:
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=self.issuer,
                leeway=self.leeway,
                options={"require": ["exp", "iat", "sub"]},
            )
        except InvalidTokenError as exc:
            raise InvalidCredentialError(context={"reason": str(exc)})

        subject = claims.get("sub")
        email = claims.get("email")
        if not isinstance(subject, str) or not subject:
            raise InvalidCredentialError(message="Token has no subject")
        if not isinstance(email, str) or not email.strip():
            raise InvalidCredentialError(message="Token carries no email address")

        return Identity(email=email.strip().lower(), subject=subject)
