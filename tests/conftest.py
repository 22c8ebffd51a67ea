"""
United Pets Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared fixtures: an in-memory database, fake adapters, and an HTTP
       client wired to a fresh application per test.

Fixture Hierarchy (all function-scoped):
    database            in-memory SQLite (aiosqlite), schema created
    identity_verifier   token → Identity lookup table
    payment_gateway     records intents, returns a fixed client secret
    mailer              records sent messages
    app / client        create_app(...) with the fakes + httpx AsyncClient
    admin_user          a stored user with role 'admin'

Tokens understood by the fake verifier:
    alice-token, bob-token, carol-token, admin-token
"""

import os

# Settings are read when united_pets is first imported, so configure first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FIREBASE_PROJECT_ID"] = "united-pets-test"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_not_real"
os.environ["MAIL_FROM"] = "noreply@unitedpets.example.com"
os.environ["RETRY_MAX_ATTEMPTS"] = "3"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"
os.environ["CB_FAILURE_THRESHOLD"] = "3"
os.environ["CB_RECOVERY_TIMEOUT"] = "60"

from typing import Dict, List, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from united_pets.database import Database  # noqa: E402
from united_pets.exceptions import InvalidCredentialError  # noqa: E402
from united_pets.main import create_app  # noqa: E402
from united_pets.models import ROLE_ADMIN, User  # noqa: E402
from united_pets.services.adapter_base import (  # noqa: E402
    Identity,
    IdentityVerifier,
    Mailer,
    PaymentGateway,
)

ALICE = "alice@example.com"
BOB = "bob@example.com"
CAROL = "carol@example.com"
ADMIN = "admin@example.com"


# ══════════════════════════════════════════════════════════════════════════
# Fake Adapters
# ══════════════════════════════════════════════════════════════════════════

class StaticIdentityVerifier(IdentityVerifier):
    """Accepts only the tokens it was given."""

    def __init__(self, tokens: Dict[str, str]):
        self.tokens = tokens

    async def verify(self, token: str) -> Identity:
        email = self.tokens.get(token)
        if email is None:
            raise InvalidCredentialError()
        return Identity(email=email, subject=f"uid-{email.split('@')[0]}")


class RecordingPaymentGateway(PaymentGateway):

    def __init__(self):
        self.intents: List[Tuple[int, str]] = []
        self.closed = False

    async def create_payment_intent(self, amount_minor: int, currency: str) -> str:
        self.intents.append((amount_minor, currency))
        return f"pi_test_{len(self.intents)}_secret"

    async def close(self) -> None:
        self.closed = True


class RecordingMailer(Mailer):

    def __init__(self):
        self.sent: List[dict] = []

    async def send(self, sender: str, to: str, subject: str, html: str) -> None:
        self.sent.append({"sender": sender, "to": to, "subject": subject, "html": html})


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database; StaticPool keeps the single connection alive."""
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def identity_verifier():
    return StaticIdentityVerifier(
        {
            "alice-token": ALICE,
            "bob-token": BOB,
            "carol-token": CAROL,
            "admin-token": ADMIN,
        }
    )


@pytest.fixture
def payment_gateway():
    return RecordingPaymentGateway()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(database, identity_verifier, payment_gateway, mailer):
    return create_app(
        database=database,
        identity_verifier=identity_verifier,
        payment_gateway=payment_gateway,
        mailer=mailer,
    )


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_root(client):
            response = await client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def admin_user(database):
    """Store the admin directly; registration can never grant the role."""
    async with database.session() as session:
        session.add(User(email=ADMIN, name="Admin", role=ROLE_ADMIN, profile={}))
    return ADMIN


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
