"""Schemas for the payment-intent and mail endpoints."""

from pydantic import EmailStr, Field

from united_pets.config import settings
from united_pets.schemas.common import CamelModel


class PaymentIntentRequest(CamelModel):
    amount: float = Field(
        gt=0,
        le=settings.max_amount,
        description="Amount in major currency units, e.g. 12.5",
    )


class PaymentIntentResponse(CamelModel):
    client_secret: str


class MailRequest(CamelModel):
    to: EmailStr
    subject: str = Field(min_length=1, max_length=300)
    html: str = Field(min_length=1)


class MailResponse(CamelModel):
    sent: bool = True
    to: str
