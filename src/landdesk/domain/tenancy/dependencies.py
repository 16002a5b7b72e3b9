"""FastAPI dependencies for the tenant admin API."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from landdesk.domain.tenancy.service import TenantService
from landdesk.domain.tenancy.tenant_app import TenantApplication
from landdesk.infra.persistence.database import DbSession


def get_tenant_application(request: Request) -> TenantApplication:
    """Return the TenantApplication created by the tenancy lifespan hook."""
    tenant_app: TenantApplication = request.app.state.tenant_app
    return tenant_app


def get_tenant_service(
    tenant_app: Annotated[TenantApplication, Depends(get_tenant_application)],
    session: DbSession,
) -> TenantService:
    return TenantService(tenant_app, session)


TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]
