"""landdesk Infra Persistence -- session factories, declarative base, RLS helpers."""

from landdesk.infra.persistence.base import AuditedMixin, Base, TenantScopedMixin
from landdesk.infra.persistence.database import (
    DatabaseManager,
    DatabaseSettings,
    DbSession,
    dispose_engine,
    get_database_manager,
    get_db_session,
    get_engine,
    get_sync_engine,
    get_sync_session_factory,
)
from landdesk.infra.persistence.lifespan import lifespan_contribution
from landdesk.infra.persistence.tenant_context import (
    bind_tenant,
    register_tenant_context_handler,
)

__all__ = [
    "AuditedMixin",
    "Base",
    "DatabaseManager",
    "DatabaseSettings",
    "DbSession",
    "TenantScopedMixin",
    "bind_tenant",
    "dispose_engine",
    "get_database_manager",
    "get_db_session",
    "get_engine",
    "get_sync_engine",
    "get_sync_session_factory",
    "lifespan_contribution",
    "register_tenant_context_handler",
]
