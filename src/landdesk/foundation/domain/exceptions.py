"""Domain exception hierarchy for type-safe error handling.

Every error carries a machine-readable ``error_code`` and a structured
``context`` dict so the API layer can render RFC 7807 problem details
and the logs can show what went wrong without string parsing.

Example:
    >>> from landdesk.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("Client", "6f1c2a9e-0000-4000-8000-000000000001")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "PlotUnavailableError",
    "RecordLockedError",
    "TenantRequiredError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (record ids, field names).
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested record does not exist in the current tenant.

    Maps to HTTP 404 Not Found.

    Example:
        >>> raise NotFoundError("Payment", payment_id)
        NotFoundError: Payment not found: ...
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of record (e.g., "Client", "Plot").
            resource_id: Identifier of the missing record.
            **extra_context: Additional debugging context (e.g., tenant_id).
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input breaks a business rule.

    Maps to HTTP 422. Pydantic schema errors are handled separately by the
    request validation handler.

    Example:
        >>> raise ValidationError("amount", "Payment exceeds outstanding balance")
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class ConflictError(DomainError):
    """Raised when an operation conflicts with current state.

    Maps to HTTP 409 Conflict. Used for duplicates and for guarded updates
    that matched no row.
    """

    error_code: str = "CONFLICT"

    def __init__(
        self,
        reason: str,
        **context: Any,
    ) -> None:
        self.reason = reason
        message = f"Conflict: {reason}"
        super().__init__(message, context)


class InvalidStateTransitionError(ConflictError):
    """Raised when a state machine transition is not allowed.

    Example:
        >>> raise InvalidStateTransitionError(
        ...     "Cannot activate tenant: current state is SUSPENDED"
        ... )
    """

    error_code: str = "INVALID_STATE_TRANSITION"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, **context)


class PlotUnavailableError(ConflictError):
    """Raised when a guarded plot update finds the plot already taken.

    The sell and reserve operations update a plot only while it is still
    in an allowed status. Zero affected rows means another sale won.

    Attributes:
        plot_id: Identifier of the plot that could not be allocated.
    """

    error_code: str = "PLOT_UNAVAILABLE"

    def __init__(self, plot_id: UUID | str, **context: Any) -> None:
        self.plot_id = plot_id
        super().__init__(f"Plot {plot_id} is not available", plot_id=str(plot_id), **context)


class RecordLockedError(ConflictError):
    """Raised when modifying a payroll record that has been approved."""

    error_code: str = "RECORD_LOCKED"

    def __init__(self, resource_type: str, resource_id: UUID | str) -> None:
        super().__init__(
            f"{resource_type} {resource_id} is locked",
            resource_type=resource_type,
            resource_id=str(resource_id),
        )


class TenantRequiredError(DomainError):
    """Raised when a tenant-scoped endpoint is called without tenant context.

    Maps to HTTP 400 via the generic domain error handler.
    """

    error_code: str = "TENANT_REQUIRED"

    def __init__(self) -> None:
        super().__init__("A tenant context is required for this operation")


class AuthenticationError(DomainError):
    """Raised when authentication fails (missing, expired, invalid token).

    Maps to HTTP 401 Unauthorized with a ``WWW-Authenticate`` header.

    Attributes:
        error_code: Machine-readable error code (e.g., "MISSING_TOKEN").
        auth_error: RFC 6750 error code for the WWW-Authenticate header.
    """

    error_code: str = "AUTHENTICATION_ERROR"

    def __init__(
        self,
        message: str,
        auth_error: str = "invalid_token",
        error_code: str = "AUTHENTICATION_ERROR",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.auth_error = auth_error
        self.error_code = error_code
        super().__init__(message, context)


class AuthorizationError(DomainError):
    """Raised when an authenticated principal lacks a required role.

    Maps to HTTP 403 Forbidden.

    Example:
        >>> raise AuthorizationError("Missing required role: admin")
    """

    error_code: str = "AUTHORIZATION_ERROR"
