"""
United Pets Backend — Circuit Breaker
======================================

What:  Small circuit breaker guarding calls to external APIs (payment gateway).
Why:   When Stripe is down, each request would otherwise wait for the HTTP
       timeout times the retry count before failing.

State Machine:
    CLOSED ──(failure_threshold consecutive failures)──▶ OPEN
    OPEN ──(recovery_timeout elapsed)──▶ HALF_OPEN (one trial call allowed)
    HALF_OPEN ──success──▶ CLOSED
    HALF_OPEN ──failure──▶ OPEN (timer restarts)

Not shared between worker processes; each uvicorn worker trips independently.
"""

import logging
import time
from typing import Optional

from united_pets.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)


class CircuitBreaker:
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, name: str, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None

    def can_execute(self) -> bool:
        """
        Return True if a call may proceed.

        Raises:
            CircuitBreakerOpenError while OPEN and the recovery timeout has not elapsed.
        """
        if self.state != self.OPEN:
            return True

        elapsed = time.monotonic() - (self.last_failure_time or 0)
        if elapsed >= self.recovery_timeout:
            logger.info("Circuit '%s' half-open after %.1fs", self.name, elapsed)
            self.state = self.HALF_OPEN
            return True

        remaining = max(int(self.recovery_timeout - elapsed), 1)
        raise CircuitBreakerOpenError(service=self.name, recovery_time=remaining)

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Circuit '%s' closed (service recovered)", self.name)
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.monotonic()

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit '%s' re-opened (trial call failed)", self.name)
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit '%s' opening after %d consecutive failures",
                self.name,
                self.failure_count,
            )
            self.state = self.OPEN
