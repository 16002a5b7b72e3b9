"""Backup export REST API."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from landdesk.domain.backup import service
from landdesk.infra.auth.dependencies import AdminOnly
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.base import utcnow
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1/backup", tags=["backup"], dependencies=[AdminOnly])


@router.get("/export")
def export_backup(session: DbSession, tenant_id: TenantId) -> JSONResponse:
    """Download every row of the tenant as a JSON attachment."""
    document = service.export_backup(session, tenant_id)
    filename = service.backup_filename(tenant_id, utcnow())
    return JSONResponse(
        document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
