"""Middleware to block requests for suspended or decommissioned tenants.

Runs after :class:`RequestContextMiddleware`, so the tenant it checks is
the one the request will act on. Fails open when the checker has no
answer (unknown tenant, directory unavailable).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from landdesk.foundation.application.context import request_context
from landdesk.foundation.domain import TenantStatus

if TYPE_CHECKING:
    from collections.abc import Callable

DEFAULT_EXCLUDED_PREFIXES: tuple[str, ...] = (
    "/healthz",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/favicon",
    "/api/v1/tenants",
)

_PROBLEM_MEDIA_TYPE = "application/problem+json"
_BLOCKED = frozenset({TenantStatus.SUSPENDED.value, TenantStatus.DECOMMISSIONED.value})


class TenantStateMiddleware:
    """Enforces tenant suspension by answering 403 before routing.

    Args:
        app: The ASGI application.
        excluded_prefixes: URL path prefixes to skip. The tenant admin API
            is excluded by default so operators can reactivate a tenant.
        tenant_status_checker: Callable mapping a tenant slug to its status
            string, or None when unknown. Without a checker nothing is
            enforced.
    """

    def __init__(
        self,
        app: Any,
        excluded_prefixes: tuple[str, ...] | None = None,
        tenant_status_checker: Callable[[str], str | None] | None = None,
    ) -> None:
        self.app = app
        self._excluded_prefixes = (
            excluded_prefixes if excluded_prefixes is not None else DEFAULT_EXCLUDED_PREFIXES
        )
        self._check_status = tenant_status_checker

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] not in ("http", "websocket") or self._check_status is None:
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        if any(path.startswith(prefix) for prefix in self._excluded_prefixes):
            await self.app(scope, receive, send)
            return

        ctx = request_context.get()
        tenant_slug = ctx.tenant_id if ctx is not None else ""
        if not tenant_slug:
            await self.app(scope, receive, send)
            return

        status = self._check_status(tenant_slug)
        if status is None or status not in _BLOCKED:
            await self.app(scope, receive, send)
            return

        body = json.dumps(
            {
                "type": "/errors/tenant-suspended",
                "title": "Tenant Suspended",
                "status": 403,
                "detail": (
                    f"Tenant '{tenant_slug}' is {status.lower()}. "
                    "Contact your platform administrator."
                ),
                "instance": path,
                "error_code": "TENANT_SUSPENDED",
            }
        ).encode("utf-8")
        await send(
            {
                "type": "http.response.start",
                "status": 403,
                "headers": [
                    (b"content-type", _PROBLEM_MEDIA_TYPE.encode("latin-1")),
                    (b"content-length", str(len(body)).encode("latin-1")),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
