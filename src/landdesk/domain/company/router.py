"""Company settings REST API."""

from __future__ import annotations

from fastapi import APIRouter

from landdesk.domain.company import service
from landdesk.domain.company.schemas import CompanySettingsResponse, CompanySettingsUpdate
from landdesk.infra.auth.dependencies import AdminOnly, StaffOrAdmin
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1/company-settings", tags=["company"])


@router.get("", dependencies=[StaffOrAdmin])
def get_settings(session: DbSession, tenant_id: TenantId) -> CompanySettingsResponse:
    return service.get_settings(session, tenant_id)


@router.put("", dependencies=[AdminOnly])
def update_settings(
    body: CompanySettingsUpdate, session: DbSession, tenant_id: TenantId
) -> CompanySettingsResponse:
    return service.update_settings(session, tenant_id, body)
