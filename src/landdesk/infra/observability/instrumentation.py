"""Manual span helpers for multi-step ledger operations.

Usage:
    from landdesk.infra.observability.instrumentation import traced_operation

    @traced_operation("sales.cancel_sale")
    def cancel_sale(session, tenant_id, client_id, ...):
        ...
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar, cast

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Callable

F = TypeVar("F", bound="Callable[..., Any]")


def get_tracer(name: str) -> trace.Tracer:
    """Return a named tracer; a no-op tracer when tracing is not configured."""
    return trace.get_tracer(name)


def traced_operation(operation_name: str, **attributes: Any) -> Callable[[F], F]:
    """Wrap a synchronous function in a span named ``operation_name``.

    ``tenant_id`` is recorded as a span attribute when passed by keyword
    or as the second positional argument (services take
    ``(session, tenant_id, ...)``). Exceptions mark the span as errored and
    propagate unchanged.
    """

    def decorator(func: F) -> F:
        tracer = get_tracer(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(operation_name) as span:
                for key, value in attributes.items():
                    span.set_attribute(key, value)
                tenant_id = kwargs.get("tenant_id", args[1] if len(args) > 1 else None)
                if isinstance(tenant_id, str):
                    span.set_attribute("landdesk.tenant_id", tenant_id)
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        return cast("F", wrapper)

    return decorator
