"""
United Pets Backend — Stripe Payment Gateway
=============================================

What:  Creates Stripe PaymentIntents for donations and returns the client
       secret the browser needs to confirm the card payment.
How:   Calls the Stripe REST API (`POST /v1/payment_intents`) with httpx,
       form-encoded as Stripe expects.
Who:   Called by POST /create-payment-intent.

Resilience:
    1. Tenacity retries ONLY transport failures (connect/read timeouts,
       resets). Every attempt sends the same Idempotency-Key, so Stripe never
       creates two intents for one request.
    2. Stripe 4xx answers (bad amount, bad currency) are not retried and are
       reported with Stripe's own message.
    3. A circuit breaker stops calling Stripe after repeated outages.
"""

import logging
import uuid
from typing import Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from united_pets.config import settings
from united_pets.exceptions import CircuitBreakerOpenError, PaymentError
from united_pets.services.adapter_base import PaymentGateway
from united_pets.services.resilience import CircuitBreaker

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):

    def __init__(
        self,
        secret_key: Optional[str] = None,
        api_base: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self._client = httpx.AsyncClient(
            base_url=api_base or settings.stripe_api_base,
            timeout=timeout or settings.payment_timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {self.secret_key}"},
        )
        self.circuit_breaker = CircuitBreaker(
            name="payment service",
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )

    async def create_payment_intent(self, amount_minor: int, currency: str) -> str:
        if not self.secret_key:
            raise PaymentError(message="Payments are not configured on this server.")
        if amount_minor <= 0:
            raise PaymentError(message="Payment amount must be positive.")

        self.circuit_breaker.can_execute()

        idempotency_key = str(uuid.uuid4())
        form = {
            "amount": str(amount_minor),
            "currency": currency,
            "payment_method_types[]": "card",
        }

        try:
            response = await self._post_payment_intent(form, idempotency_key)
        except CircuitBreakerOpenError:
            raise
        except httpx.HTTPError as exc:
            self.circuit_breaker.record_failure()
            logger.error("Stripe unreachable after retries: %s", exc)
            raise PaymentError(context={"error_type": type(exc).__name__})

        body = self._json_or_empty(response)

        if response.status_code >= 500:
            self.circuit_breaker.record_failure()
            logger.error("Stripe returned %d", response.status_code)
            raise PaymentError(context={"status": response.status_code})

        # Stripe answered, so the service itself is healthy
        self.circuit_breaker.record_success()

        if response.status_code >= 400:
            error = body.get("error") or {}
            logger.warning(
                "Stripe rejected payment intent (%d): %s",
                response.status_code,
                error.get("message"),
            )
            raise PaymentError(
                message=error.get("message") or "The payment request was rejected.",
                context={"status": response.status_code, "type": error.get("type")},
            )

        client_secret = body.get("client_secret")
        if not client_secret:
            raise PaymentError(context={"reason": "missing client_secret"})

        logger.info("Payment intent %s created for %d %s", body.get("id"), amount_minor, currency)
        return client_secret

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=settings.retry_min_wait,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_payment_intent(self, form: dict, idempotency_key: str) -> httpx.Response:
        return await self._client.post(
            "/v1/payment_intents",
            data=form,
            headers={"Idempotency-Key": idempotency_key},
        )

    @staticmethod
    def _json_or_empty(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    async def close(self) -> None:
        await self._client.aclose()
