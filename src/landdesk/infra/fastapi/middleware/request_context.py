"""Middleware that populates the request context ContextVar.

The tenant and acting user come from the authenticated principal when the
JWT middleware has set one. Otherwise the ``X-Tenant-ID`` and ``X-User-ID``
headers are used, which is how platform operators (``super_admin``) pick
the tenant they act on and how local development works with auth disabled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from landdesk.foundation.application import MiddlewareContribution
from landdesk.foundation.application.context import (
    ANONYMOUS_USER_ID,
    clear_request_context,
    get_optional_principal,
    set_request_context,
)
from landdesk.foundation.domain.principal import Role
from landdesk.infra.fastapi.middleware.request_id import extract_header

if TYPE_CHECKING:
    from collections.abc import Callable

    from landdesk.foundation.domain.principal import Principal

TENANT_ID_HEADER = "X-Tenant-ID"
USER_ID_HEADER = "X-User-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"


def _parse_user_id(raw: str) -> UUID:
    if not raw:
        return ANONYMOUS_USER_ID
    try:
        return UUID(raw)
    except ValueError:
        return ANONYMOUS_USER_ID


def _resolve_tenant(principal: Principal | None, header_tenant: str) -> str:
    if principal is None:
        return header_tenant
    # Platform operators have no tenant of their own and choose one per request.
    if principal.has_any_role(Role.SUPER_ADMIN) and header_tenant:
        return header_tenant
    return principal.tenant_id or header_tenant


class RequestContextMiddleware:
    """Pure ASGI middleware that sets tenant, user and correlation id.

    The context is cleared after the request completes and the correlation
    id is echoed in the ``X-Correlation-ID`` response header.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = scope.get("headers", [])
        principal = get_optional_principal()
        tenant_id = _resolve_tenant(principal, extract_header(headers, b"x-tenant-id"))
        if principal is not None:
            user_id = principal.user_id
        else:
            user_id = _parse_user_id(extract_header(headers, b"x-user-id"))
        correlation_id = extract_header(headers, b"x-correlation-id") or str(uuid4())

        token = set_request_context(
            tenant_id=tenant_id,
            user_id=user_id,
            correlation_id=correlation_id,
        )

        async def send_with_correlation_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                resp_headers = list(message.get("headers", []))
                resp_headers.append((b"x-correlation-id", correlation_id.encode("latin-1")))
                message = {**message, "headers": resp_headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            clear_request_context(token)


contribution = MiddlewareContribution(
    middleware_class=RequestContextMiddleware,
    priority=200,  # Context band (200-299)
)
