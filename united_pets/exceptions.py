"""
United Pets Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions, one per error category the API reports.
Why:   Services raise domain errors; global handlers in main.py turn them into
       a consistent JSON body with the right status code.
How:   Each exception carries a user-facing `message` and a `context` dict that
       is logged but only echoed to the client for 4xx responses.

Exception Hierarchy:
    UnitedPetsError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (duplicate unique key)
    ├── UnauthorizedError        → 401 Unauthorized (no credential)
    ├── ForbiddenError           → 403 Forbidden (role / ownership)
    │   └── InvalidCredentialError → 403 (token rejected by verifier)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── AdapterError             → 500 Internal Server Error
    │   ├── PaymentError
    │   └── NotificationError
    ├── IdentityProviderError    → 503 Service Unavailable
    └── CircuitBreakerOpenError  → 503 Service Unavailable
"""

from typing import Any, Dict, Optional


class UnitedPetsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UnitedPetsError):
    """Client input is malformed or violates a business rule it can fix."""

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(UnitedPetsError):
    """
    A unique key already exists, or stored state contradicts the request.

    HTTP: 400 — the platform's clients treat duplicates like any other bad
    input (e.g. "user already exist" on a second registration).
    """

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(UnitedPetsError):
    """No bearer credential was presented on a route that requires one."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(UnitedPetsError):
    """The caller is identified but not allowed to perform the operation."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialError(ForbiddenError):
    """The identity verifier rejected the presented token."""

    def __init__(
        self,
        message: str = "Invalid or expired credential",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(UnitedPetsError):
    """A referenced resource id does not resolve."""

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(UnitedPetsError):
    """
    A store operation failed unexpectedly.

    The client always gets a generic message; the SQL error type stays in the
    server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AdapterError(UnitedPetsError):
    """An external collaborator (payment API, mail server) failed."""

    error_code = "adapter_error"

    def __init__(
        self,
        message: str = "An external service failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PaymentError(AdapterError):
    """The payment provider could not create the payment intent."""

    error_code = "payment_error"

    def __init__(
        self,
        message: str = "Payment could not be initiated. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotificationError(AdapterError):
    """The mail server refused or could not be reached."""

    error_code = "notification_error"

    def __init__(
        self,
        message: str = "The email could not be sent.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class IdentityProviderError(UnitedPetsError):
    """Signing keys could not be fetched, so no token can be checked right now."""

    status_code = 503
    error_code = "identity_provider_unavailable"

    def __init__(
        self,
        message: str = "Authentication is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CircuitBreakerOpenError(UnitedPetsError):
    """
    Raised while a circuit breaker is OPEN.

    After `cb_failure_threshold` consecutive failures, calls fail immediately
    for `cb_recovery_timeout` seconds instead of waiting on a dead upstream.
    """

    status_code = 503
    error_code = "service_unavailable"

    def __init__(
        self,
        service: str = "external service",
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"The {service} is temporarily unavailable due to repeated failures. "
            f"Please retry in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time
