"""Request-scoped context for tenant, acting user and correlation id.

Middleware stores a frozen :class:`RequestContext` in a ContextVar at the
start of every request. Services and SQLAlchemy listeners read it back
without threading the values through every call, which is how the RLS
session variable and the ``created_by`` audit columns get populated.

The authenticated :class:`Principal` lives in its own ContextVar. The auth
middleware owns its lifecycle, and the request-context middleware reads it
to decide which tenant the request acts on.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from contextvars import Token

    from landdesk.foundation.domain.principal import Principal

ANONYMOUS_USER_ID = UUID(int=0)


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Immutable container for request-scoped context data.

    Attributes:
        tenant_id: Tenant slug the request acts on. Empty when unknown.
        user_id: Acting user, or :data:`ANONYMOUS_USER_ID`.
        correlation_id: Unique ID for distributed tracing.
    """

    tenant_id: str
    user_id: UUID
    correlation_id: str


request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


class NoRequestContextError(RuntimeError):
    """Raised when request context is accessed outside of a request."""

    def __init__(self) -> None:
        super().__init__(
            "No request context available. "
            "Ensure this code is called within an HTTP request with context middleware."
        )


def get_current_context() -> RequestContext:
    """Return the active RequestContext.

    Raises:
        NoRequestContextError: If called outside of a request.
    """
    ctx = request_context.get()
    if ctx is None:
        raise NoRequestContextError()
    return ctx


def get_current_tenant_id() -> str:
    """Return the tenant slug of the current request."""
    return get_current_context().tenant_id


def get_current_user_id() -> UUID:
    """Return the acting user of the current request."""
    return get_current_context().user_id


def get_current_actor() -> str | None:
    """Return the acting user as a string for audit columns.

    Returns ``None`` outside a request or for anonymous callers, so
    background jobs write NULL into ``created_by`` rather than failing.
    """
    ctx = request_context.get()
    if ctx is None or ctx.user_id == ANONYMOUS_USER_ID:
        return None
    return str(ctx.user_id)


def get_current_correlation_id() -> str:
    """Return the correlation ID of the current request."""
    return get_current_context().correlation_id


def set_request_context(
    tenant_id: str,
    user_id: UUID,
    correlation_id: str,
) -> Token[RequestContext | None]:
    """Set the request context for the current task.

    Returns:
        Token for :func:`clear_request_context`.
    """
    ctx = RequestContext(
        tenant_id=tenant_id,
        user_id=user_id,
        correlation_id=correlation_id,
    )
    return request_context.set(ctx)


def clear_request_context(token: Token[RequestContext | None]) -> None:
    """Reset the request context using the token from :func:`set_request_context`."""
    request_context.reset(token)


# ---------------------------------------------------------------------------
# Principal context
# ---------------------------------------------------------------------------

_principal_context: ContextVar[Principal | None] = ContextVar("principal_context", default=None)


def set_principal_context(principal: Principal) -> Token[Principal | None]:
    """Store the authenticated principal. Called by the JWT middleware."""
    return _principal_context.set(principal)


def clear_principal_context(token: Token[Principal | None]) -> None:
    """Reset the principal context in the middleware ``finally`` block."""
    _principal_context.reset(token)


def get_current_principal() -> Principal:
    """Return the authenticated principal.

    Raises:
        NoRequestContextError: If the request is not authenticated.
    """
    principal = _principal_context.get()
    if principal is None:
        raise NoRequestContextError()
    return principal


def get_optional_principal() -> Principal | None:
    """Return the authenticated principal, or None."""
    return _principal_context.get()
