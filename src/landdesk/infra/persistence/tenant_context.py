"""SQLAlchemy session event handler for tenant context propagation.

Bridges the request-scoped ContextVar (set by middleware) to a PostgreSQL
session variable (consumed by RLS policies). Uses ``set_config(..., true)``
so the value is transaction-scoped and safe with connection pooling.

Registration: Called once during application lifespan startup.
"""

from __future__ import annotations

import logging

from sqlalchemy import event, text
from sqlalchemy.orm import Session

from landdesk.foundation.application.context import (
    NoRequestContextError,
    get_current_tenant_id,
)

logger = logging.getLogger(__name__)


def _set_tenant_context_on_begin(
    session: Session,
    transaction: object,
    connection: object,
) -> None:
    """Set ``app.current_tenant`` for the transaction that just began.

    Args:
        session: The SQLAlchemy Session.
        transaction: The SessionTransaction (unused).
        connection: The Connection to run ``set_config`` on.
    """
    if connection.dialect.name != "postgresql":  # type: ignore[attr-defined]
        return

    try:
        tenant_id = get_current_tenant_id()
    except NoRequestContextError:
        # Migrations, health checks and scheduled jobs. RLS default-deny
        # returns zero rows unless the job sets its own context.
        logger.debug("tenant_context_skipped: no_request_context")
        return

    if not tenant_id:
        logger.warning("tenant_context_empty: tenant_id is empty string")
        return

    connection.execute(  # type: ignore[attr-defined]
        text("SELECT set_config('app.current_tenant', :tenant, true)"),
        {"tenant": tenant_id},
    )
    logger.debug("tenant_context_set: tenant_id=%s", tenant_id)


def register_tenant_context_handler() -> None:
    """Register the after_begin event handler on the Session class.

    Applies to every session from any engine. Idempotent: SQLAlchemy
    deduplicates identical listener registrations.
    """
    if not event.contains(Session, "after_begin", _set_tenant_context_on_begin):
        event.listen(Session, "after_begin", _set_tenant_context_on_begin)
    logger.info("tenant_context_handler_registered")


def bind_tenant(session: Session, tenant_id: str) -> None:
    """Set ``app.current_tenant`` on the session's current transaction.

    For code acting on a tenant other than the request's own: platform
    operators managing memberships and scheduled jobs iterating tenants.
    No-op on databases without RLS.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    session.execute(
        text("SELECT set_config('app.current_tenant', :tenant, true)"),
        {"tenant": tenant_id},
    )
    logger.debug("tenant_context_bound: tenant_id=%s", tenant_id)
