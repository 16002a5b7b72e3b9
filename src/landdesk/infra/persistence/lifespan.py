"""Database startup and shutdown.

On startup the RLS tenant hook is registered and the sync engine, which
serves every request, is checked for reachability and for the tables the
loaded models expect. A missing table means ``alembic upgrade head`` has
not been run; it is logged, not fatal, so the health endpoint can still
report it. Both engines are disposed on shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect, text
from starlette.concurrency import run_in_threadpool

from landdesk.foundation.application import LifespanContribution
from landdesk.foundation.application.contributions import LIFESPAN_PRIORITY_PERSISTENCE
from landdesk.infra.persistence.base import Base
from landdesk.infra.persistence.database import get_database_manager
from landdesk.infra.persistence.tenant_context import register_tenant_context_handler

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


def missing_tables(engine: Engine) -> list[str]:
    """Tables declared on ``Base`` that the database does not have, sorted."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        present = set(inspect(conn).get_table_names())
    return sorted(set(Base.metadata.tables) - present)


@asynccontextmanager
async def _persistence_lifespan(app: Any) -> AsyncIterator[None]:
    manager = get_database_manager()
    register_tenant_context_handler()

    missing = await run_in_threadpool(missing_tables, manager.get_sync_engine())
    if missing:
        logger.warning(
            "schema_incomplete: missing=%s hint='alembic upgrade head'", ",".join(missing)
        )
    else:
        logger.info("database_ready: tables=%d", len(Base.metadata.tables))

    try:
        yield
    finally:
        await manager.dispose()
        logger.info("database_engines_disposed")


lifespan_contribution = LifespanContribution(
    hook=_persistence_lifespan,
    priority=LIFESPAN_PRIORITY_PERSISTENCE,
)
