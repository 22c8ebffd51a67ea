"""
United Pets Backend — Payment Intent Route
===========================================

What:  POST /create-payment-intent, the first step of a card donation.
How:   The web client sends the amount in major units; the gateway receives
       integer cents in the configured currency and returns the intent's
       client secret, which the client confirms with the provider directly.
       The donation itself is recorded afterwards through POST /donate/{id}.
"""

import logging

from fastapi import APIRouter, Depends

from united_pets.config import settings
from united_pets.money import to_cents
from united_pets.routes.dependencies import get_current_identity, get_payment_gateway
from united_pets.schemas.common import ErrorResponse
from united_pets.schemas.integrations import PaymentIntentRequest, PaymentIntentResponse
from united_pets.services.adapter_base import Identity, PaymentGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payments"])


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={
        400: {"description": "Invalid amount", "model": ErrorResponse},
        500: {"description": "Payment provider failed", "model": ErrorResponse},
        503: {"description": "Payment provider circuit open", "model": ErrorResponse},
    },
    summary="Create a payment intent",
)
async def create_payment_intent(
    payload: PaymentIntentRequest,
    identity: Identity = Depends(get_current_identity),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentIntentResponse:
    amount_minor = to_cents(payload.amount)
    logger.info("Creating payment intent of %d %s for %s", amount_minor, settings.payment_currency, identity.email)
    client_secret = await gateway.create_payment_intent(amount_minor, settings.payment_currency)
    return PaymentIntentResponse(client_secret=client_secret)
