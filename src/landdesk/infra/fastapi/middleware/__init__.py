"""ASGI middleware for the landdesk API."""

from landdesk.infra.fastapi.middleware.request_context import RequestContextMiddleware
from landdesk.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    get_request_id,
)
from landdesk.infra.fastapi.middleware.tenant_state import TenantStateMiddleware

__all__ = [
    "RequestContextMiddleware",
    "RequestIdMiddleware",
    "TenantStateMiddleware",
    "get_request_id",
]
