"""
UYNM Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure class the API reports.
How:   Each exception carries a client-safe message, a machine-readable error
       code, the HTTP status it maps to, and an optional context dict that is
       logged but never returned. Global handlers in main.py turn them into the
       uniform `{"success": false, ...}` envelope.
Who:   Raised by services, dependencies and middleware.

Exception Hierarchy:
    UYNMError (base)
    ├── ValidationError          → 400 Bad Request (per-field error list)
    ├── ConflictError            → 400 Bad Request (duplicate email / registration)
    ├── NotFoundError            → 404 Not Found
    ├── AuthenticationError      → 401 Unauthorized (bad credentials)
    ├── AuthorizationError       → 401 / 403 (admin key missing or wrong)
    ├── IdentityProviderError    → 400 or 502 (identity service rejected / failed)
    ├── DatabaseError            → 500 Internal Server Error (generic message)
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, List, Optional


class UYNMError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:     User-facing description (safe to return in API response)
        context:     Debug info (logged, NOT returned to the client)
        status_code: HTTP status used by the global handler
        error_code:  Machine-readable `error` value of the envelope
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UYNMError):
    """
    Raised when client input fails one or more validation rules.

    Carries the complete list of field errors so the caller can fix every field
    in one round trip.

    Example response:
        {
            "success": false,
            "error": "validation_error",
            "message": "Validation failed",
            "errors": [
                {"field": "firstName", "message": "First name is required", "location": "body"},
                {"field": "message", "message": "Message must be at least 10 characters", "location": "body"}
            ]
        }
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors or [])


class ConflictError(UYNMError):
    """
    Raised when a mutation would violate a uniqueness rule of the domain.

    When:  Member email already registered, newsletter email already active,
           (event, email) pair already registered.
    HTTP:  400, matching what the website's forms already expect.
    """

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        if error_code:
            self.error_code = error_code


class NotFoundError(UYNMError):
    """
    Raised when a requested resource does not exist.

    Services convert "no row" results into this exception so routes never
    have to check for None.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class AuthenticationError(UYNMError):
    """Raised when the identity provider rejects a credential pair."""

    status_code = 401
    error_code = "authentication_failed"

    def __init__(
        self,
        message: str = "Invalid email or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(UYNMError):
    """
    Raised by the admin gate.

    401 when no admin credential was presented, 403 when it was wrong or when
    the deployment has no admin key configured.
    """

    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Admin access required",
        status_code: int = 403,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code
        if status_code == 401:
            self.error_code = "unauthorized"


class IdentityProviderError(UYNMError):
    """
    Raised when the identity provider rejects or fails a request.

    caller_error=True: the provider refused the input (e.g. weak password,
    already-registered address) → 400 with the provider's message.
    caller_error=False: the provider was unreachable or returned 5xx → 502 with
    a generic message; detail is logged.
    """

    error_code = "identity_error"

    def __init__(
        self,
        message: str = "Authentication service is temporarily unavailable",
        caller_error: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.caller_error = caller_error
        self.status_code = 400 if caller_error else 502


class DatabaseError(UYNMError):
    """
    Raised when the structured-data store fails unexpectedly.

    The message returned to the client is always generic; the underlying
    driver error is logged server-side through `context`.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "Something went wrong. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(UYNMError):
    """Raised when a client exceeds the per-IP request rate limit."""

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
