"""Repository for the tenant directory (control plane).

Unfiltered by tenant: platform operators see every tenant, and the
tenant-state middleware looks statuses up before any tenant is bound.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from landdesk.domain.tenancy.models import TenantRecord
from landdesk.foundation.domain import TenantStatus
from landdesk.infra.persistence.base import utcnow

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

_STATUS_TIMESTAMPS = {
    TenantStatus.ACTIVE.value: "activated_at",
    TenantStatus.SUSPENDED.value: "suspended_at",
    TenantStatus.DECOMMISSIONED.value: "decommissioned_at",
}


class TenantRepository:
    """Read/write access to the ``tenants`` table within a caller's session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, slug: str) -> TenantRecord | None:
        return self._session.scalar(select(TenantRecord).where(TenantRecord.slug == slug))

    def list_all(self, status: str | None = None) -> list[TenantRecord]:
        """List tenants newest first, optionally filtered by status."""
        stmt = select(TenantRecord).order_by(TenantRecord.created_at.desc())
        if status is not None:
            stmt = stmt.where(TenantRecord.status == status)
        return list(self._session.scalars(stmt))

    def get_status(self, slug: str) -> str | None:
        return self._session.scalar(select(TenantRecord.status).where(TenantRecord.slug == slug))

    def upsert(self, aggregate_id: UUID, slug: str, name: str, status: str) -> TenantRecord:
        """Insert or update the directory row for an aggregate.

        The timestamp column matching ``status`` is stamped when the status
        changes. Does not commit.
        """
        record = self._session.get(TenantRecord, aggregate_id)
        changed = record is None or record.status != status
        if record is None:
            record = TenantRecord(id=aggregate_id, slug=slug, name=name, status=status)
            self._session.add(record)
        record.name = name
        record.status = status
        column = _STATUS_TIMESTAMPS.get(status)
        if changed and column is not None:
            setattr(record, column, utcnow())
        return record
