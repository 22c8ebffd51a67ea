"""
United Pets Backend — External Adapter Interfaces
==================================================

What:  Abstract contracts for the three external collaborators.
Why:   Route handlers depend on these interfaces, not on Firebase, Stripe or
       SMTP. Concrete instances are created once per process and placed on
       `app.state`; tests inject fakes through `create_app(...)`.

Implementations:
    IdentityVerifier → FirebaseIdentityVerifier (identity_service.py)
    PaymentGateway   → StripePaymentGateway     (payment_service.py)
    Mailer           → SmtpMailer               (mail_service.py)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """A verified caller: normalised email plus the provider's subject id."""
    email: str
    subject: str


class IdentityVerifier(ABC):

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        """
        Validate a bearer token and return the identity it proves.

        Raises:
            InvalidCredentialError: the token is malformed, expired, or not
                issued for this project (→ 403).
            IdentityProviderError: signing keys could not be fetched (→ 503).
        """
        ...


class PaymentGateway(ABC):

    @abstractmethod
    async def create_payment_intent(self, amount_minor: int, currency: str) -> str:
        """
        Create a payment intent and return its client secret.

        Args:
            amount_minor: Amount in the currency's minor unit (cents).
            currency: ISO 4217 code, lower-case.

        Raises:
            PaymentError: the provider rejected the request or failed.
            CircuitBreakerOpenError: too many recent failures.
        """
        ...

    async def close(self) -> None:
        """Release network resources (called on shutdown)."""


class Mailer(ABC):

    @abstractmethod
    async def send(self, sender: str, to: str, subject: str, html: str) -> None:
        """
        Send one HTML e-mail.

        Raises:
            NotificationError: not configured, refused, or unreachable.
        """
        ...
