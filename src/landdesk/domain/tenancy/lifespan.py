"""Tenancy lifespan hook: creates the TenantApplication singleton.

Priority 100 runs after persistence (75) so the database settings the
event store reuses are already validated.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from landdesk.domain.tenancy.tenant_app import TenantApplication, event_store_env
from landdesk.foundation.application import LifespanContribution
from landdesk.foundation.application.contributions import LIFESPAN_PRIORITY_TENANCY
from landdesk.infra.persistence.database import get_database_manager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _tenancy_lifespan(app: Any) -> AsyncIterator[None]:
    env = event_store_env(get_database_manager().settings)
    app.state.tenant_app = TenantApplication(env=env)
    logger.info(
        "tenancy_lifespan: event store ready (persistence=%s)",
        env.get("PERSISTENCE_MODULE", "memory"),
    )
    try:
        yield
    finally:
        app.state.tenant_app.close()
        logger.info("tenancy_lifespan: event store closed")


lifespan_contribution = LifespanContribution(
    hook=_tenancy_lifespan,
    priority=LIFESPAN_PRIORITY_TENANCY,
)
