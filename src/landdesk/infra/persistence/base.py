"""Declarative base and shared columns for tenant-scoped tables."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, Numeric, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from landdesk.foundation.application.context import get_current_actor

Money = Numeric(14, 2, asdecimal=True)


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base for every landdesk table."""

    type_annotation_map = {Decimal: Money}

    def to_dict(self) -> dict[str, Any]:
        """Return column values keyed by attribute name."""
        return {attr.key: getattr(self, attr.key) for attr in self.__mapper__.column_attrs}


class TenantScopedMixin:
    """Primary key, tenant partition and timestamps shared by business rows.

    ``tenant_id`` holds the tenant slug. On PostgreSQL the
    ``tenant_isolation_policy`` compares it with ``app.current_tenant``.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[str] = mapped_column(String(63), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class AuditedMixin:
    """Records the acting user that created the row."""

    created_by: Mapped[str | None] = mapped_column(
        String(64), nullable=True, default=get_current_actor
    )
