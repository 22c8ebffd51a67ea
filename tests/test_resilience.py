"""
United Pets Backend — Circuit Breaker Unit Tests
=================================================

What we test:
    ✅ Opens after the failure threshold and rejects calls while open
    ✅ Half-opens after the recovery timeout; success closes, failure re-opens
    ✅ A success resets the consecutive failure count
"""

import pytest

from united_pets.exceptions import CircuitBreakerOpenError
from united_pets.services.resilience import CircuitBreaker


class TestCircuitBreaker:

    def test_opens_after_threshold(self):
        breaker = CircuitBreaker("payments", failure_threshold=2, recovery_timeout=30)

        breaker.record_failure()
        assert breaker.can_execute() is True
        breaker.record_failure()

        assert breaker.state == CircuitBreaker.OPEN
        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            breaker.can_execute()
        assert 1 <= exc_info.value.recovery_time <= 30

    def test_success_resets_failures(self):
        breaker = CircuitBreaker("payments", failure_threshold=2, recovery_timeout=30)

        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()

        assert breaker.state == CircuitBreaker.CLOSED

    def test_half_open_trial(self):
        breaker = CircuitBreaker("payments", failure_threshold=1, recovery_timeout=0)
        breaker.record_failure()

        assert breaker.can_execute() is True
        assert breaker.state == CircuitBreaker.HALF_OPEN

        breaker.record_failure()
        assert breaker.state == CircuitBreaker.OPEN

        breaker.can_execute()
        breaker.record_success()
        assert breaker.state == CircuitBreaker.CLOSED
        assert breaker.failure_count == 0
