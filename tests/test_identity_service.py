"""
United Pets Backend — Firebase Token Verifier Unit Tests
=========================================================

What:  FirebaseIdentityVerifier with locally signed RS256 tokens and a stub
       key client, so no JWKS document is fetched.

What we test:
    ✅ Valid token → Identity with lower-cased email
    ✅ Wrong audience, wrong issuer, expired, missing email → InvalidCredentialError
    ✅ Unknown key id → InvalidCredentialError; JWKS unreachable → IdentityProviderError
    ✅ No project configured → IdentityProviderError
"""

import time
from types import SimpleNamespace

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError

from united_pets.exceptions import IdentityProviderError, InvalidCredentialError
from united_pets.services.identity_service import FirebaseIdentityVerifier

PROJECT = "united-pets-test"


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class StubKeyClient:
    """Stands in for PyJWKClient: returns a fixed key, or raises."""

    def __init__(self, public_key=None, error=None):
        self.public_key = public_key
        self.error = error

    def get_signing_key_from_jwt(self, token):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(key=self.public_key)


def make_token(private_key, **overrides):
    now = int(time.time())
    claims = {
        "iss": f"https://securetoken.google.com/{PROJECT}",
        "aud": PROJECT,
        "sub": "firebase-uid-1",
        "email": "Alice@Example.com",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "key-1"})


def make_verifier(signing_key, project_id=PROJECT, **client_options):
    client_options.setdefault("public_key", signing_key.public_key())
    return FirebaseIdentityVerifier(project_id=project_id, jwk_client=StubKeyClient(**client_options))


class TestVerify:

    @pytest.mark.asyncio
    async def test_valid_token(self, signing_key):
        identity = await make_verifier(signing_key).verify(make_token(signing_key))

        assert identity.email == "alice@example.com"
        assert identity.subject == "firebase-uid-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"aud": "someone-elses-project"},
            {"iss": "https://accounts.example.com"},
            {"exp": int(time.time()) - 3600, "iat": int(time.time()) - 7200},
            {"email": None},
            {"sub": None},
        ],
    )
    async def test_rejected_claims(self, signing_key, overrides):
        with pytest.raises(InvalidCredentialError):
            await make_verifier(signing_key).verify(make_token(signing_key, **overrides))

    @pytest.mark.asyncio
    async def test_token_signed_by_other_key(self, signing_key):
        other = rsa.generate_private_key(public_exponent=65537, key_size=2048)

        with pytest.raises(InvalidCredentialError):
            await make_verifier(signing_key).verify(make_token(other))

    @pytest.mark.asyncio
    async def test_garbage_token(self, signing_key):
        verifier = make_verifier(signing_key, error=PyJWKClientError("Unable to find a signing key"))

        with pytest.raises(InvalidCredentialError):
            await verifier.verify("not.a.jwt")

    @pytest.mark.asyncio
    async def test_unreachable_key_endpoint(self, signing_key):
        verifier = make_verifier(signing_key, error=PyJWKClientConnectionError("timed out"))

        with pytest.raises(IdentityProviderError):
            await verifier.verify(make_token(signing_key))

    @pytest.mark.asyncio
    async def test_missing_project_id(self, signing_key):
        verifier = make_verifier(signing_key, project_id="")

        with pytest.raises(IdentityProviderError):
            await verifier.verify(make_token(signing_key))
