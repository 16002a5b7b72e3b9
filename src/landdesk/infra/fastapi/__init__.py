"""landdesk Infra FastAPI -- app factory, error handlers, middleware, dependencies."""

from landdesk.infra.fastapi.app_factory import create_app
from landdesk.infra.fastapi.dependencies import TenantId, get_tenant_id
from landdesk.infra.fastapi.error_handlers import (
    ProblemDetail,
    register_exception_handlers,
)
from landdesk.infra.fastapi.middleware import (
    RequestContextMiddleware,
    RequestIdMiddleware,
    TenantStateMiddleware,
    get_request_id,
)
from landdesk.infra.fastapi.settings import AppSettings, CORSSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "ProblemDetail",
    "RequestContextMiddleware",
    "RequestIdMiddleware",
    "TenantId",
    "TenantStateMiddleware",
    "create_app",
    "get_request_id",
    "get_tenant_id",
    "register_exception_handlers",
]
