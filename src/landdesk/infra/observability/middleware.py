"""Correlate logs, traces and support requests.

While a span is recording, its ids are bound into the structlog context,
the span is tagged with the tenant named in ``X-Tenant-ID`` and the trace
id is returned as ``X-Trace-ID`` so staff can quote it when something goes
wrong. With tracing off the middleware passes requests straight through.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace

from landdesk.foundation.application.contributions import MiddlewareContribution

if TYPE_CHECKING:
    from collections.abc import Callable

TRACE_HEADER = b"x-trace-id"
TENANT_HEADER = b"x-tenant-id"
TENANT_ATTRIBUTE = "landdesk.tenant_id"


class TraceContextMiddleware:
    """Pure ASGI middleware; outermost so the whole request shares one trace id."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        span = trace.get_current_span()
        if scope["type"] != "http" or not span.is_recording():
            await self.app(scope, receive, send)
            return

        ctx = span.get_span_context()
        trace_id = format(ctx.trace_id, "032x")
        structlog.contextvars.bind_contextvars(
            trace_id=trace_id, span_id=format(ctx.span_id, "016x")
        )
        tenant = dict(scope.get("headers") or []).get(TENANT_HEADER)
        if tenant:
            span.set_attribute(TENANT_ATTRIBUTE, tenant.decode("latin-1"))

        async def send_with_trace_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                headers = [*message.get("headers", []), (TRACE_HEADER, trace_id.encode())]
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_trace_id)
        finally:
            structlog.contextvars.unbind_contextvars("trace_id", "span_id")


contribution = MiddlewareContribution(
    middleware_class=TraceContextMiddleware,
    priority=5,
)
