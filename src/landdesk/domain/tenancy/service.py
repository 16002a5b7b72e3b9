"""Tenant lifecycle and membership operations.

Lifecycle commands go through the event-sourced :class:`Tenant` aggregate;
after every save the relational directory row is upserted in the same
database session so listings and the tenant-state middleware see the new
status immediately.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from landdesk.domain.tenancy.models import TenantUser
from landdesk.domain.tenancy.repository import TenantRepository
from landdesk.domain.tenancy.tenant import Tenant
from landdesk.foundation.domain import (
    ConflictError,
    NotFoundError,
    Role,
    TenantStatus,
    ValidationError,
)
from landdesk.infra.persistence.tenant_context import bind_tenant

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

    from landdesk.domain.tenancy.models import TenantRecord
    from landdesk.domain.tenancy.tenant_app import TenantApplication

logger = logging.getLogger(__name__)

MEMBER_ROLES: frozenset[str] = frozenset({Role.ADMIN.value, Role.STAFF.value})


class TenantService:
    """Operations on tenants and their members.

    Args:
        app: Event store for Tenant aggregates.
        session: Database session holding the directory and memberships.
    """

    def __init__(self, app: TenantApplication, session: Session) -> None:
        self._app = app
        self._session = session
        self._directory = TenantRepository(session)

    # -- Lifecycle ------------------------------------------------------------

    def provision(
        self,
        slug: str,
        name: str,
        profile: dict[str, Any] | None = None,
        *,
        activate: bool = True,
        initiated_by: str = "system",
    ) -> Tenant:
        """Create a tenant and, by default, activate it straight away.

        Raises:
            ConflictError: If the slug is already taken.
            ValueError: If slug, name or profile fail validation.
        """
        if self._directory.get(slug) is not None:
            raise ConflictError(f"Tenant slug '{slug}' is already taken", slug=slug)
        tenant = Tenant(tenant_id=slug, name=name, slug=slug, profile=profile)
        if activate:
            tenant.request_activate(initiated_by=initiated_by)
        self._save(tenant)
        logger.info("tenant_provisioned: slug=%s status=%s", slug, tenant.status)
        return tenant

    def activate(self, slug: str, initiated_by: str) -> Tenant:
        tenant = self.get(slug)
        tenant.request_activate(initiated_by=initiated_by)
        return self._save(tenant)

    def suspend(
        self,
        slug: str,
        initiated_by: str,
        reason: str | None = None,
        category: str | None = None,
    ) -> Tenant:
        tenant = self.get(slug)
        tenant.request_suspend(initiated_by=initiated_by, reason=reason, category=category)
        self._save(tenant)
        logger.info("tenant_suspended: slug=%s category=%s", slug, category)
        return tenant

    def reactivate(self, slug: str, initiated_by: str) -> Tenant:
        tenant = self.get(slug)
        tenant.request_reactivate(initiated_by=initiated_by)
        return self._save(tenant)

    def decommission(self, slug: str, initiated_by: str, reason: str | None = None) -> Tenant:
        tenant = self.get(slug)
        tenant.request_decommission(initiated_by=initiated_by, reason=reason)
        self._save(tenant)
        logger.info("tenant_decommissioned: slug=%s", slug)
        return tenant

    def update_profile(self, slug: str, profile: dict[str, Any], updated_by: str) -> Tenant:
        tenant = self.get(slug)
        tenant.request_update_profile(profile, updated_by=updated_by)
        return self._save(tenant)

    def get(self, slug: str) -> Tenant:
        """Load the aggregate for ``slug``.

        Raises:
            NotFoundError: If the slug is not in the directory.
        """
        record = self._directory.get(slug)
        if record is None:
            raise NotFoundError("Tenant", slug)
        tenant: Tenant = self._app.repository.get(record.id)
        return tenant

    def list_tenants(self, status: str | None = None) -> list[TenantRecord]:
        return self._directory.list_all(status)

    def get_status(self, slug: str) -> str | None:
        return self._directory.get_status(slug)

    def _save(self, tenant: Tenant) -> Tenant:
        self._app.save(tenant)
        self._directory.upsert(tenant.id, tenant.slug, tenant.name, tenant.status)
        self._session.commit()
        return tenant

    # -- Memberships ----------------------------------------------------------

    def add_member(
        self,
        slug: str,
        user_id: UUID,
        role: str = Role.STAFF.value,
        *,
        email: str | None = None,
        is_tenant_admin: bool = False,
    ) -> TenantUser:
        """Add ``user_id`` to the tenant, or update an existing membership.

        Raises:
            NotFoundError: If the tenant does not exist.
            ValidationError: If ``role`` is not admin or staff.
            ConflictError: If the user belongs to another tenant, or the
                tenant is decommissioned.
        """
        if role not in MEMBER_ROLES:
            raise ValidationError("role", f"must be one of {sorted(MEMBER_ROLES)}")
        record = self._directory.get(slug)
        if record is None:
            raise NotFoundError("Tenant", slug)
        if record.status == TenantStatus.DECOMMISSIONED.value:
            raise ConflictError(f"Tenant '{slug}' is decommissioned", slug=slug)

        bind_tenant(self._session, slug)
        member = self._session.scalar(select(TenantUser).where(TenantUser.user_id == user_id))
        if member is not None and member.tenant_id != slug:
            raise ConflictError(
                "User already belongs to another tenant",
                user_id=str(user_id),
            )
        if member is None:
            member = TenantUser(tenant_id=slug, user_id=user_id)
            self._session.add(member)
        member.role = role
        member.email = email
        member.is_tenant_admin = is_tenant_admin
        self._session.commit()
        logger.info("tenant_member_saved: slug=%s user_id=%s role=%s", slug, user_id, role)
        return member

    def remove_member(self, slug: str, user_id: UUID) -> None:
        """Raises NotFoundError if the user is not a member of ``slug``."""
        bind_tenant(self._session, slug)
        member = self._member(slug, user_id)
        self._session.delete(member)
        self._session.commit()
        logger.info("tenant_member_removed: slug=%s user_id=%s", slug, user_id)

    def list_members(self, slug: str) -> list[TenantUser]:
        if self._directory.get(slug) is None:
            raise NotFoundError("Tenant", slug)
        bind_tenant(self._session, slug)
        stmt = (
            select(TenantUser)
            .where(TenantUser.tenant_id == slug)
            .order_by(TenantUser.created_at)
        )
        return list(self._session.scalars(stmt))

    def _member(self, slug: str, user_id: UUID) -> TenantUser:
        member = self._session.scalar(
            select(TenantUser).where(
                TenantUser.tenant_id == slug,
                TenantUser.user_id == user_id,
            )
        )
        if member is None:
            raise NotFoundError("TenantUser", user_id, tenant_id=slug)
        return member
