"""Project and plot inventory operations.

Plot allocation uses guarded single-row updates: a plot is sold only while
it is still ``available`` or ``reserved``. When the guard matches no row,
another sale got there first and :class:`PlotUnavailableError` is raised.

Functions named after an API operation commit their own unit of work.
``allocate_plot`` and ``release_client_plots`` do not; they run inside the
caller's transaction (client registration, deletion, cancellation).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select, update

from landdesk.domain.inventory.models import Plot, PlotStatus, Project
from landdesk.domain.inventory.schemas import InventoryStats, ProjectStats
from landdesk.domain.sales.models import Client
from landdesk.foundation.domain import (
    ZERO,
    ConflictError,
    NotFoundError,
    PlotUnavailableError,
    money_sum,
)
from landdesk.infra.persistence.base import utcnow

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

    from landdesk.domain.inventory.schemas import (
        BulkPlotCreate,
        PlotCreate,
        PlotUpdate,
        ProjectCreate,
        ProjectUpdate,
    )

logger = logging.getLogger(__name__)

_HELD = (PlotStatus.SOLD.value, PlotStatus.RESERVED.value)


# -- Projects -----------------------------------------------------------------


def list_projects(session: Session, tenant_id: str) -> list[Project]:
    stmt = select(Project).where(Project.tenant_id == tenant_id).order_by(Project.name)
    return list(session.scalars(stmt))


def get_project(session: Session, tenant_id: str, project_id: UUID) -> Project:
    project = session.scalar(
        select(Project).where(Project.id == project_id, Project.tenant_id == tenant_id)
    )
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def create_project(session: Session, tenant_id: str, data: ProjectCreate) -> Project:
    _ensure_unique_project_name(session, tenant_id, data.name)
    project = Project(tenant_id=tenant_id, **data.model_dump())
    session.add(project)
    session.commit()
    logger.info("project_created: project_id=%s name=%s", project.id, project.name)
    return project


def update_project(
    session: Session, tenant_id: str, project_id: UUID, data: ProjectUpdate
) -> Project:
    project = get_project(session, tenant_id, project_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] != project.name:
        _ensure_unique_project_name(session, tenant_id, changes["name"])
    for field, value in changes.items():
        setattr(project, field, value)
    session.commit()
    return project


def delete_project(session: Session, tenant_id: str, project_id: UUID) -> None:
    """Delete a project and its plots.

    Raises:
        ConflictError: While any plot is sold or reserved.
    """
    project = get_project(session, tenant_id, project_id)
    held = session.scalar(
        select(func.count(Plot.id)).where(Plot.project_id == project.id, Plot.status.in_(_HELD))
    )
    if held:
        raise ConflictError(
            f"Project '{project.name}' has {held} sold or reserved plots",
            project_id=str(project.id),
        )
    session.delete(project)
    session.commit()
    logger.info("project_deleted: project_id=%s", project_id)


def _ensure_unique_project_name(session: Session, tenant_id: str, name: str) -> None:
    exists = session.scalar(
        select(Project.id).where(Project.tenant_id == tenant_id, Project.name == name)
    )
    if exists is not None:
        raise ConflictError(f"Project '{name}' already exists", name=name)


# -- Plots --------------------------------------------------------------------


def list_plots(
    session: Session,
    tenant_id: str,
    *,
    project_id: UUID | None = None,
    status: str | None = None,
) -> list[Plot]:
    stmt = select(Plot).where(Plot.tenant_id == tenant_id)
    if project_id is not None:
        stmt = stmt.where(Plot.project_id == project_id)
    if status is not None:
        stmt = stmt.where(Plot.status == status)
    return list(session.scalars(stmt.order_by(Plot.project_id, Plot.plot_number)))


def get_plot(session: Session, tenant_id: str, plot_id: UUID) -> Plot:
    plot = session.scalar(select(Plot).where(Plot.id == plot_id, Plot.tenant_id == tenant_id))
    if plot is None:
        raise NotFoundError("Plot", plot_id)
    return plot


def add_plot(session: Session, tenant_id: str, project_id: UUID, data: PlotCreate) -> Plot:
    """Raises ConflictError if the plot number exists in the project."""
    project = get_project(session, tenant_id, project_id)
    if data.plot_number in _existing_numbers(session, project.id):
        raise ConflictError(
            f"Plot {data.plot_number} already exists in '{project.name}'",
            plot_number=data.plot_number,
        )
    plot = Plot(tenant_id=tenant_id, project_id=project.id, **data.model_dump())
    session.add(plot)
    session.flush()
    _recount(session, project)
    session.commit()
    return plot


def bulk_add_plots(
    session: Session, tenant_id: str, project_id: UUID, data: BulkPlotCreate
) -> tuple[list[Plot], list[str]]:
    """Create a numbered run of plots, skipping numbers that already exist.

    Returns:
        The created plots and the skipped plot numbers.
    """
    project = get_project(session, tenant_id, project_id)
    existing = _existing_numbers(session, project.id)
    created: list[Plot] = []
    skipped: list[str] = []
    for n in range(data.start, data.start + data.count):
        number = f"{data.prefix}{n}"
        if number in existing:
            skipped.append(number)
            continue
        plot = Plot(
            tenant_id=tenant_id,
            project_id=project.id,
            plot_number=number,
            size=data.size,
            price=data.price,
        )
        session.add(plot)
        created.append(plot)
    session.flush()
    _recount(session, project)
    session.commit()
    logger.info(
        "plots_bulk_added: project_id=%s created=%d skipped=%d",
        project.id,
        len(created),
        len(skipped),
    )
    return created, skipped


def update_plot(session: Session, tenant_id: str, plot_id: UUID, data: PlotUpdate) -> Plot:
    plot = get_plot(session, tenant_id, plot_id)
    changes = data.model_dump(exclude_unset=True)
    number = changes.get("plot_number")
    if number is not None and number != plot.plot_number:
        if number in _existing_numbers(session, plot.project_id):
            raise ConflictError(f"Plot {number} already exists", plot_number=number)
    for field, value in changes.items():
        setattr(plot, field, value)
    session.commit()
    return plot


def delete_plot(session: Session, tenant_id: str, plot_id: UUID) -> None:
    """Raises ConflictError unless the plot is available."""
    plot = get_plot(session, tenant_id, plot_id)
    if plot.status != PlotStatus.AVAILABLE.value:
        raise ConflictError(
            f"Plot {plot.plot_number} is {plot.status} and cannot be deleted",
            plot_id=str(plot.id),
        )
    project = plot.project
    session.delete(plot)
    session.flush()
    _recount(session, project)
    session.commit()


def allocate_plot(session: Session, tenant_id: str, plot_id: UUID, client_id: UUID) -> Plot:
    """Mark a plot sold to ``client_id`` without committing.

    Raises:
        NotFoundError: If the plot does not exist in the tenant.
        PlotUnavailableError: If the plot is already sold.
    """
    result = session.execute(
        update(Plot)
        .where(
            Plot.id == plot_id,
            Plot.tenant_id == tenant_id,
            Plot.status.in_((PlotStatus.AVAILABLE.value, PlotStatus.RESERVED.value)),
        )
        .values(status=PlotStatus.SOLD.value, client_id=client_id, sold_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        get_plot(session, tenant_id, plot_id)
        raise PlotUnavailableError(plot_id)
    logger.info("plot_sold: plot_id=%s client_id=%s", plot_id, client_id)
    return get_plot(session, tenant_id, plot_id)


def sell_plot(session: Session, tenant_id: str, plot_id: UUID, client_id: UUID) -> Plot:
    get_client_reference(session, tenant_id, client_id)
    plot = allocate_plot(session, tenant_id, plot_id, client_id)
    session.commit()
    return plot


def reserve_plot(
    session: Session, tenant_id: str, plot_id: UUID, client_id: UUID | None = None
) -> Plot:
    """Hold an available plot, optionally for a client.

    Raises:
        PlotUnavailableError: If the plot is not available.
    """
    if client_id is not None:
        get_client_reference(session, tenant_id, client_id)
    result = session.execute(
        update(Plot)
        .where(
            Plot.id == plot_id,
            Plot.tenant_id == tenant_id,
            Plot.status == PlotStatus.AVAILABLE.value,
        )
        .values(status=PlotStatus.RESERVED.value, client_id=client_id)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        get_plot(session, tenant_id, plot_id)
        raise PlotUnavailableError(plot_id)
    session.commit()
    return get_plot(session, tenant_id, plot_id)


def return_plot(session: Session, tenant_id: str, plot_id: UUID) -> Plot:
    """Put a plot back in stock."""
    plot = get_plot(session, tenant_id, plot_id)
    _make_available(plot)
    session.commit()
    logger.info("plot_returned: plot_id=%s", plot_id)
    return plot


def release_client_plots(session: Session, tenant_id: str, client_id: UUID) -> int:
    """Return every plot held by ``client_id`` to stock without committing."""
    plots = session.scalars(
        select(Plot).where(Plot.tenant_id == tenant_id, Plot.client_id == client_id)
    ).all()
    for plot in plots:
        _make_available(plot)
    session.flush()
    return len(plots)


def cleanup_orphaned_plots(session: Session, tenant_id: str) -> int:
    """Return sold or reserved plots whose client no longer exists.

    A sold plot with no client at all is also treated as orphaned.

    Returns:
        Number of plots put back in stock.
    """
    live_clients = select(Client.id).where(Client.tenant_id == tenant_id)
    orphans = session.scalars(
        select(Plot).where(
            Plot.tenant_id == tenant_id,
            Plot.status.in_(_HELD),
            or_(
                Plot.client_id.not_in(live_clients),
                (Plot.client_id.is_(None)) & (Plot.status == PlotStatus.SOLD.value),
            ),
        )
    ).all()
    for plot in orphans:
        _make_available(plot)
    session.commit()
    if orphans:
        logger.warning("orphaned_plots_returned: tenant_id=%s count=%d", tenant_id, len(orphans))
    return len(orphans)


def get_client_reference(session: Session, tenant_id: str, client_id: UUID) -> Client:
    client = session.scalar(
        select(Client).where(Client.id == client_id, Client.tenant_id == tenant_id)
    )
    if client is None:
        raise NotFoundError("Client", client_id)
    return client


def _make_available(plot: Plot) -> None:
    plot.status = PlotStatus.AVAILABLE.value
    plot.client_id = None
    plot.sold_at = None


def _existing_numbers(session: Session, project_id: UUID) -> set[str]:
    return set(session.scalars(select(Plot.plot_number).where(Plot.project_id == project_id)))


def _recount(session: Session, project: Project) -> None:
    count = session.scalar(select(func.count(Plot.id)).where(Plot.project_id == project.id)) or 0
    project.total_plots = count
    if count > project.capacity:
        project.capacity = count


# -- Statistics ---------------------------------------------------------------


def project_stats(session: Session, tenant_id: str, project_id: UUID) -> ProjectStats:
    return _stats_for(session, get_project(session, tenant_id, project_id))


def inventory_stats(session: Session, tenant_id: str) -> InventoryStats:
    """Totals across every project of the tenant.

    A project counts as fully sold when it has a capacity, no available
    plots and at least as many plots as its capacity.
    """
    per_project = [_stats_for(session, p) for p in list_projects(session, tenant_id)]
    return InventoryStats(
        total_projects=len(per_project),
        total_plots=sum(s.total for s in per_project),
        available=sum(s.available for s in per_project),
        sold=sum(s.sold for s in per_project),
        reserved=sum(s.reserved for s in per_project),
        total_capacity=sum(s.effective_capacity for s in per_project),
        sold_value=money_sum(s.sold_value for s in per_project),
        fully_sold_projects=sum(
            1
            for s in per_project
            if s.capacity > 0 and s.available == 0 and s.total >= s.capacity
        ),
        projects=per_project,
    )


def _stats_for(session: Session, project: Project) -> ProjectStats:
    rows = session.execute(
        select(Plot.status, func.count(Plot.id), func.coalesce(func.sum(Plot.price), ZERO))
        .where(Plot.project_id == project.id)
        .group_by(Plot.status)
    ).all()
    counts = {status: count for status, count, _ in rows}
    values = {status: value for status, _, value in rows}
    total = sum(counts.values())
    return ProjectStats(
        project_id=project.id,
        name=project.name,
        total=total,
        available=counts.get(PlotStatus.AVAILABLE.value, 0),
        sold=counts.get(PlotStatus.SOLD.value, 0),
        reserved=counts.get(PlotStatus.RESERVED.value, 0),
        capacity=project.capacity,
        effective_capacity=max(project.capacity, total),
        sold_value=money_sum([values.get(PlotStatus.SOLD.value, ZERO)]),
    )
