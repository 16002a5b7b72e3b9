"""Application service for Tenant aggregate persistence.

Lifespan singleton, stored in ``app.state.tenant_app``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar
from uuid import UUID

from eventsourcing.application import Application
from sqlalchemy.engine.url import make_url

from landdesk.domain.tenancy.tenant import Tenant

if TYPE_CHECKING:
    from landdesk.infra.persistence.database import DatabaseSettings


class TenantApplication(Application[UUID]):
    """Event store for Tenant aggregates.

    Persistence is configured through the eventsourcing environment
    (``PERSISTENCE_MODULE`` and ``POSTGRES_*``); without it events are kept
    in memory, which is what the tests use.

    Attributes:
        snapshotting_intervals: Snapshot every 50 events for Tenant.
    """

    snapshotting_intervals: ClassVar[dict[type, int]] = {Tenant: 50}


def event_store_env(settings: DatabaseSettings) -> dict[str, str]:
    """Build the eventsourcing environment for the landdesk database.

    SQLite URLs (local development) fall back to the in-memory store.
    """
    if settings.is_sqlite:
        return {}
    url = make_url(settings.database_url)
    return {
        "PERSISTENCE_MODULE": "eventsourcing.postgres",
        "POSTGRES_DBNAME": url.database or settings.name,
        "POSTGRES_HOST": url.host or settings.host,
        "POSTGRES_PORT": str(url.port or settings.port),
        "POSTGRES_USER": url.username or settings.user,
        "POSTGRES_PASSWORD": url.password or settings.password,
        "POSTGRES_SCHEMA": "public",
        "CREATE_TABLE": "true",
    }
