"""Scheduled jobs for client accounts.

Run with the TaskIQ worker and scheduler, see
:mod:`landdesk.infra.taskiq.broker`. No reminders are sent; the job only
keeps ``status`` in step with ``next_payment_date``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import TYPE_CHECKING

from landdesk.domain.sales.service import refresh_overdue_statuses
from landdesk.domain.tenancy.repository import TenantRepository
from landdesk.foundation.domain import TenantStatus
from landdesk.infra.persistence.database import get_sync_session_factory
from landdesk.infra.persistence.tenant_context import bind_tenant
from landdesk.infra.taskiq.broker import broker
from landdesk.infra.taskiq.settings import get_taskiq_settings

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def refresh_all_tenants(
    session_factory: sessionmaker[Session], today: date | None = None
) -> dict[str, tuple[int, int]]:
    """Refresh overdue statuses for every active tenant.

    Each tenant runs in its own transaction so one failure does not roll
    back the others.

    Returns:
        ``{tenant_slug: (marked_overdue, restored_active)}`` for the tenants
        that succeeded.
    """
    today = today or date.today()
    with session_factory() as session:
        slugs = [t.slug for t in TenantRepository(session).list_all(TenantStatus.ACTIVE.value)]

    results: dict[str, tuple[int, int]] = {}
    for slug in slugs:
        with session_factory() as session:
            try:
                bind_tenant(session, slug)
                results[slug] = refresh_overdue_statuses(session, slug, today=today)
            except Exception:
                session.rollback()
                logger.exception("overdue_refresh_failed: tenant_id=%s", slug)
    return results


@broker.task(
    task_name="sales.refresh_overdue_statuses",
    schedule=[{"cron": get_taskiq_settings().overdue_cron}],
)
async def refresh_overdue_statuses_task() -> dict[str, list[int]]:
    results = await asyncio.to_thread(refresh_all_tenants, get_sync_session_factory())
    logger.info("overdue_refresh_completed: tenants=%d", len(results))
    return {slug: list(counts) for slug, counts in results.items()}
