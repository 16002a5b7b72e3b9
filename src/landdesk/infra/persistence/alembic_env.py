"""Async Alembic runner shared by ``migrations/env.py``.

Usage in ``env.py``::

    from landdesk.infra.persistence.alembic_env import run_migrations
    from landdesk.infra.persistence.base import Base

    run_migrations(Base.metadata)

Online runs connect through the application's async engine, so
``DATABASE_URL`` (or the ``DATABASE_*`` parts) decide the target. Offline
runs render SQL against the same URL with literal binds.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from alembic import context

from landdesk.infra.persistence.database import get_database_manager

if TYPE_CHECKING:
    from sqlalchemy import Connection, MetaData
    from sqlalchemy.ext.asyncio import AsyncEngine


def _do_run_migrations(connection: Connection, target_metadata: MetaData) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations(engine: AsyncEngine, target_metadata: MetaData) -> None:
    """Run migrations on ``engine`` through ``run_sync`` and dispose it."""
    async with engine.connect() as connection:
        await connection.run_sync(_do_run_migrations, target_metadata)
    await engine.dispose()


def run_offline_migrations(url: str, target_metadata: MetaData) -> None:
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations(target_metadata: MetaData) -> None:
    """Entry point for ``env.py``: offline or online depending on the Alembic mode."""
    manager = get_database_manager()
    if context.is_offline_mode():
        run_offline_migrations(manager.settings.database_url, target_metadata)
    else:
        asyncio.run(run_async_migrations(manager.get_engine(), target_metadata))
