"""Tenant admin REST API.

Platform operators (``super_admin``) provision tenants, move them through
their lifecycle and manage memberships. The prefix is excluded from the
tenant-state middleware so a suspended tenant can be reactivated.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Annotated, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from landdesk.domain.tenancy.dependencies import TenantServiceDep
from landdesk.domain.tenancy.status import status_checker
from landdesk.foundation.domain import Principal, Role, SuspensionCategory, ValidationError
from landdesk.infra.auth.dependencies import require_role

if TYPE_CHECKING:
    from landdesk.domain.tenancy.models import TenantRecord, TenantUser
    from landdesk.domain.tenancy.tenant import Tenant

router = APIRouter(prefix="/api/v1/tenants", tags=["tenants"])

Operator = Annotated[Principal, Depends(require_role(Role.SUPER_ADMIN))]


# -- Request / Response models ------------------------------------------------


class ProvisionTenantRequest(BaseModel):
    slug: str = Field(..., min_length=2, max_length=63)
    name: str = Field(..., min_length=1, max_length=255)
    profile: dict[str, Any] = Field(default_factory=dict)
    activate: bool = True


class SuspendTenantRequest(BaseModel):
    reason: str | None = None
    category: SuspensionCategory | None = None


class DecommissionTenantRequest(BaseModel):
    reason: str | None = None


class TenantResponse(BaseModel):
    id: UUID
    slug: str
    name: str
    status: str
    profile: dict[str, Any]
    suspension_reason: str | None = None
    suspension_category: str | None = None
    decommission_reason: str | None = None
    version: int


class TenantSummary(BaseModel):
    id: UUID
    slug: str
    name: str
    status: str
    created_at: datetime
    activated_at: datetime | None = None
    suspended_at: datetime | None = None
    decommissioned_at: datetime | None = None


class TenantStatusResponse(BaseModel):
    slug: str
    status: str


class MemberRequest(BaseModel):
    role: str = Role.STAFF.value
    email: str | None = None
    is_tenant_admin: bool = False


class MemberResponse(BaseModel):
    user_id: UUID
    tenant_id: str
    role: str
    email: str | None
    is_tenant_admin: bool
    created_at: datetime


# -- Lifecycle endpoints ------------------------------------------------------


@router.post("", status_code=status.HTTP_201_CREATED)
def provision_tenant(
    body: ProvisionTenantRequest,
    service: TenantServiceDep,
    principal: Operator,
) -> TenantResponse:
    """Provision a tenant; it is activated immediately unless ``activate`` is false."""
    try:
        tenant = service.provision(
            body.slug,
            body.name,
            body.profile,
            activate=body.activate,
            initiated_by=principal.subject,
        )
    except ValueError as exc:
        raise ValidationError("tenant", str(exc)) from exc
    return _tenant_response(tenant)


@router.get("")
def list_tenants(
    service: TenantServiceDep,
    _: Operator,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> list[TenantSummary]:
    return [_summary(record) for record in service.list_tenants(status_filter)]


@router.get("/{slug}")
def get_tenant(slug: str, service: TenantServiceDep, _: Operator) -> TenantResponse:
    return _tenant_response(service.get(slug))


@router.get("/{slug}/status")
def get_tenant_status(slug: str, service: TenantServiceDep, _: Operator) -> TenantStatusResponse:
    tenant = service.get(slug)
    return TenantStatusResponse(slug=tenant.slug, status=tenant.status)


@router.post("/{slug}/activate")
def activate_tenant(slug: str, service: TenantServiceDep, principal: Operator) -> TenantResponse:
    tenant = service.activate(slug, initiated_by=principal.subject)
    status_checker.invalidate(slug)
    return _tenant_response(tenant)


@router.post("/{slug}/suspend")
def suspend_tenant(
    slug: str,
    body: SuspendTenantRequest,
    service: TenantServiceDep,
    principal: Operator,
) -> TenantResponse:
    tenant = service.suspend(
        slug,
        initiated_by=principal.subject,
        reason=body.reason,
        category=body.category.value if body.category else None,
    )
    status_checker.invalidate(slug)
    return _tenant_response(tenant)


@router.post("/{slug}/reactivate")
def reactivate_tenant(slug: str, service: TenantServiceDep, principal: Operator) -> TenantResponse:
    tenant = service.reactivate(slug, initiated_by=principal.subject)
    status_checker.invalidate(slug)
    return _tenant_response(tenant)


@router.post("/{slug}/decommission")
def decommission_tenant(
    slug: str,
    body: DecommissionTenantRequest,
    service: TenantServiceDep,
    principal: Operator,
) -> TenantResponse:
    tenant = service.decommission(slug, initiated_by=principal.subject, reason=body.reason)
    status_checker.invalidate(slug)
    return _tenant_response(tenant)


@router.patch("/{slug}/profile")
def update_tenant_profile(
    slug: str,
    body: dict[str, Any],
    service: TenantServiceDep,
    principal: Operator,
) -> TenantResponse:
    try:
        tenant = service.update_profile(slug, body, updated_by=principal.subject)
    except ValueError as exc:
        raise ValidationError("profile", str(exc)) from exc
    return _tenant_response(tenant)


# -- Membership endpoints -----------------------------------------------------


@router.get("/{slug}/members")
def list_members(slug: str, service: TenantServiceDep, _: Operator) -> list[MemberResponse]:
    return [_member_response(member) for member in service.list_members(slug)]


@router.put("/{slug}/members/{user_id}")
def add_member(
    slug: str,
    user_id: UUID,
    body: MemberRequest,
    service: TenantServiceDep,
    _: Operator,
) -> MemberResponse:
    member = service.add_member(
        slug,
        user_id,
        body.role,
        email=body.email,
        is_tenant_admin=body.is_tenant_admin,
    )
    return _member_response(member)


@router.delete("/{slug}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(slug: str, user_id: UUID, service: TenantServiceDep, _: Operator) -> None:
    service.remove_member(slug, user_id)


# -- Helpers ------------------------------------------------------------------


def _tenant_response(tenant: Tenant) -> TenantResponse:
    return TenantResponse(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.name,
        status=tenant.status,
        profile=dict(tenant.profile),
        suspension_reason=tenant.suspension_reason,
        suspension_category=tenant.suspension_category,
        decommission_reason=tenant.decommission_reason,
        version=tenant.version,
    )


def _summary(record: TenantRecord) -> TenantSummary:
    return TenantSummary(
        id=record.id,
        slug=record.slug,
        name=record.name,
        status=record.status,
        created_at=record.created_at,
        activated_at=record.activated_at,
        suspended_at=record.suspended_at,
        decommissioned_at=record.decommissioned_at,
    )


def _member_response(member: TenantUser) -> MemberResponse:
    return MemberResponse(
        user_id=member.user_id,
        tenant_id=member.tenant_id,
        role=member.role,
        email=member.email,
        is_tenant_admin=member.is_tenant_admin,
        created_at=member.created_at,
    )
