"""
United Pets Backend — Root, Health, Payment and Mail Route Tests
=================================================================

What we test:
    ✅ GET / greeting and GET /health database status
    ✅ Payment intents: major units → cents in the configured currency
    ✅ Adapter failures map to 500 / 503 with generic bodies
    ✅ Mail is sent from the configured sender address
"""

import pytest

from conftest import auth
from united_pets.exceptions import CircuitBreakerOpenError, NotificationError, PaymentError


class TestRootAndHealth:

    @pytest.mark.asyncio
    async def test_root_greeting(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "welcome to the server"}

    @pytest.mark.asyncio
    async def test_health_reports_database(self, client):
        response = await client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "X-Request-ID" in response.headers


class TestPaymentIntent:

    @pytest.mark.asyncio
    async def test_amount_converted_to_cents(self, client, payment_gateway):
        response = await client.post(
            "/create-payment-intent", json={"amount": 12.5}, headers=auth("alice-token")
        )

        assert response.status_code == 200
        assert response.json() == {"clientSecret": "pi_test_1_secret"}
        assert payment_gateway.intents == [(1250, "usd")]

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client, payment_gateway):
        response = await client.post("/create-payment-intent", json={"amount": 5})

        assert response.status_code == 401
        assert payment_gateway.intents == []

    @pytest.mark.asyncio
    async def test_out_of_range_amount_is_400(self, client, payment_gateway):
        response = await client.post(
            "/create-payment-intent", json={"amount": 1e30}, headers=auth("alice-token")
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert payment_gateway.intents == []

    @pytest.mark.asyncio
    async def test_gateway_failure_is_generic_500(self, client, payment_gateway, monkeypatch):
        async def failing(amount_minor, currency):
            raise PaymentError(context={"status": 502, "secret": "internal"})

        monkeypatch.setattr(payment_gateway, "create_payment_intent", failing)

        response = await client.post(
            "/create-payment-intent", json={"amount": 5}, headers=auth("alice-token")
        )

        assert response.status_code == 500
        assert response.json()["error"] == "payment_error"
        assert "details" not in response.json()

    @pytest.mark.asyncio
    async def test_open_circuit_is_503_with_retry_after(self, client, payment_gateway, monkeypatch):
        async def open_circuit(amount_minor, currency):
            raise CircuitBreakerOpenError(service="payment service", recovery_time=42)

        monkeypatch.setattr(payment_gateway, "create_payment_intent", open_circuit)

        response = await client.post(
            "/create-payment-intent", json={"amount": 5}, headers=auth("alice-token")
        )

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "42"
        assert response.json()["details"] == {"recovery_time": 42}


class TestSendMail:

    @pytest.mark.asyncio
    async def test_mail_sent_from_platform_address(self, client, mailer):
        response = await client.post(
            "/send-mail",
            json={"to": "bob@example.com", "subject": "Adoption request", "html": "<p>Hi</p>"},
            headers=auth("alice-token"),
        )

        assert response.status_code == 200
        assert response.json() == {"sent": True, "to": "bob@example.com"}
        assert mailer.sent == [
            {
                "sender": "noreply@unitedpets.example.com",
                "to": "bob@example.com",
                "subject": "Adoption request",
                "html": "<p>Hi</p>",
            }
        ]

    @pytest.mark.asyncio
    async def test_mail_failure_is_500(self, client, mailer, monkeypatch):
        async def refuse(sender, to, subject, html):
            raise NotificationError()

        monkeypatch.setattr(mailer, "send", refuse)

        response = await client.post(
            "/send-mail",
            json={"to": "bob@example.com", "subject": "Hi", "html": "<p>Hi</p>"},
            headers=auth("alice-token"),
        )

        assert response.status_code == 500
        assert response.json()["error"] == "notification_error"
