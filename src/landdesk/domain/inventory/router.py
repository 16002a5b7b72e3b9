"""Projects and plots REST API."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, status

from landdesk.domain.inventory import service
from landdesk.domain.inventory.models import PlotStatus  # noqa: TC001
from landdesk.domain.inventory.schemas import (
    BulkPlotCreate,
    BulkPlotResult,
    CleanupResult,
    InventoryStats,
    PlotAllocation,
    PlotCreate,
    PlotResponse,
    PlotUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectStats,
    ProjectUpdate,
)
from landdesk.foundation.domain import ValidationError
from landdesk.infra.auth.dependencies import AdminOnly, StaffOrAdmin
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1", tags=["inventory"], dependencies=[StaffOrAdmin])


# -- Projects -----------------------------------------------------------------


@router.get("/projects")
def list_projects(session: DbSession, tenant_id: TenantId) -> list[ProjectResponse]:
    return [ProjectResponse.model_validate(p) for p in service.list_projects(session, tenant_id)]


@router.post("/projects", status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreate, session: DbSession, tenant_id: TenantId
) -> ProjectResponse:
    return ProjectResponse.model_validate(service.create_project(session, tenant_id, body))


@router.get("/projects/stats")
def inventory_stats(session: DbSession, tenant_id: TenantId) -> InventoryStats:
    return service.inventory_stats(session, tenant_id)


@router.get("/projects/{project_id}")
def get_project(project_id: UUID, session: DbSession, tenant_id: TenantId) -> ProjectResponse:
    return ProjectResponse.model_validate(service.get_project(session, tenant_id, project_id))


@router.patch("/projects/{project_id}")
def update_project(
    project_id: UUID, body: ProjectUpdate, session: DbSession, tenant_id: TenantId
) -> ProjectResponse:
    project = service.update_project(session, tenant_id, project_id, body)
    return ProjectResponse.model_validate(project)


@router.delete(
    "/projects/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[AdminOnly],
)
def delete_project(project_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_project(session, tenant_id, project_id)


@router.get("/projects/{project_id}/stats")
def project_stats(project_id: UUID, session: DbSession, tenant_id: TenantId) -> ProjectStats:
    return service.project_stats(session, tenant_id, project_id)


@router.post("/projects/{project_id}/plots", status_code=status.HTTP_201_CREATED)
def add_plot(
    project_id: UUID, body: PlotCreate, session: DbSession, tenant_id: TenantId
) -> PlotResponse:
    return PlotResponse.model_validate(service.add_plot(session, tenant_id, project_id, body))


@router.post("/projects/{project_id}/plots/bulk", status_code=status.HTTP_201_CREATED)
def bulk_add_plots(
    project_id: UUID, body: BulkPlotCreate, session: DbSession, tenant_id: TenantId
) -> BulkPlotResult:
    created, skipped = service.bulk_add_plots(session, tenant_id, project_id, body)
    return BulkPlotResult(
        created=[PlotResponse.model_validate(p) for p in created],
        skipped=skipped,
    )


# -- Plots --------------------------------------------------------------------


@router.get("/plots")
def list_plots(
    session: DbSession,
    tenant_id: TenantId,
    project_id: UUID | None = None,
    status_filter: Annotated[PlotStatus | None, Query(alias="status")] = None,
) -> list[PlotResponse]:
    plots = service.list_plots(
        session,
        tenant_id,
        project_id=project_id,
        status=status_filter.value if status_filter else None,
    )
    return [PlotResponse.model_validate(p) for p in plots]


@router.post("/plots/cleanup-orphans", dependencies=[AdminOnly])
def cleanup_orphaned_plots(session: DbSession, tenant_id: TenantId) -> CleanupResult:
    return CleanupResult(returned=service.cleanup_orphaned_plots(session, tenant_id))


@router.get("/plots/{plot_id}")
def get_plot(plot_id: UUID, session: DbSession, tenant_id: TenantId) -> PlotResponse:
    return PlotResponse.model_validate(service.get_plot(session, tenant_id, plot_id))


@router.patch("/plots/{plot_id}")
def update_plot(
    plot_id: UUID, body: PlotUpdate, session: DbSession, tenant_id: TenantId
) -> PlotResponse:
    return PlotResponse.model_validate(service.update_plot(session, tenant_id, plot_id, body))


@router.delete("/plots/{plot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plot(plot_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_plot(session, tenant_id, plot_id)


@router.post("/plots/{plot_id}/sell")
def sell_plot(
    plot_id: UUID, body: PlotAllocation, session: DbSession, tenant_id: TenantId
) -> PlotResponse:
    if body.client_id is None:
        raise ValidationError("client_id", "is required to sell a plot")
    return PlotResponse.model_validate(
        service.sell_plot(session, tenant_id, plot_id, body.client_id)
    )


@router.post("/plots/{plot_id}/reserve")
def reserve_plot(
    plot_id: UUID, body: PlotAllocation, session: DbSession, tenant_id: TenantId
) -> PlotResponse:
    return PlotResponse.model_validate(
        service.reserve_plot(session, tenant_id, plot_id, body.client_id)
    )


@router.post("/plots/{plot_id}/return")
def return_plot(plot_id: UUID, session: DbSession, tenant_id: TenantId) -> PlotResponse:
    return PlotResponse.model_validate(service.return_plot(session, tenant_id, plot_id))
