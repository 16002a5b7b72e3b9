"""Scheduled tenant backups, run by the TaskIQ scheduler."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from landdesk.domain.backup.service import BackupType, export_backup, prune_backups, write_backup
from landdesk.domain.backup.settings import BackupSettings, get_backup_settings
from landdesk.domain.tenancy.repository import TenantRepository
from landdesk.foundation.domain import TenantStatus
from landdesk.infra.persistence.database import get_sync_session_factory
from landdesk.infra.persistence.tenant_context import bind_tenant
from landdesk.infra.taskiq.broker import broker
from landdesk.infra.taskiq.settings import get_taskiq_settings

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def backup_all_tenants(
    session_factory: sessionmaker[Session], settings: BackupSettings
) -> dict[str, Path]:
    """Write one backup per active tenant and prune the old ones.

    A failing tenant is logged and skipped.

    Returns:
        ``{tenant_slug: written_path}`` for the tenants that succeeded.
    """
    with session_factory() as session:
        slugs = [t.slug for t in TenantRepository(session).list_all(TenantStatus.ACTIVE.value)]

    written: dict[str, Path] = {}
    for slug in slugs:
        with session_factory() as session:
            try:
                bind_tenant(session, slug)
                document = export_backup(session, slug, backup_type=BackupType.SCHEDULED)
                written[slug] = write_backup(settings.directory, document)
                removed = prune_backups(settings.directory, slug, settings.retention)
            except Exception:
                logger.exception("scheduled_backup_failed: tenant_id=%s", slug)
                continue
        logger.info(
            "scheduled_backup_written: tenant_id=%s path=%s pruned=%d",
            slug,
            written[slug],
            len(removed),
        )
    return written


@broker.task(
    task_name="backup.backup_all_tenants",
    schedule=[{"cron": get_taskiq_settings().backup_cron}],
)
async def backup_all_tenants_task() -> dict[str, str]:
    written = await asyncio.to_thread(
        backup_all_tenants, get_sync_session_factory(), get_backup_settings()
    )
    return {slug: str(path) for slug, path in written.items()}
