"""Relational tenant directory and membership tables.

``tenants`` is a control-plane table: it has no ``tenant_id`` column and no
RLS policy. ``tenant_users`` is tenant scoped.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from landdesk.infra.persistence.base import Base, TenantScopedMixin, utcnow


class TenantRecord(Base):
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    slug: Mapped[str] = mapped_column(String(63), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    activated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    suspended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    decommissioned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class TenantUser(TenantScopedMixin, Base):
    """Membership of a user in a tenant. A user belongs to one tenant."""

    __tablename__ = "tenant_users"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="staff")  # admin|staff
    is_tenant_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
