"""Projects (land parcels being subdivided) and their plots."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from landdesk.foundation.domain import ZERO
from landdesk.infra.persistence.base import Base, TenantScopedMixin


class PlotStatus(StrEnum):
    AVAILABLE = "available"
    SOLD = "sold"
    RESERVED = "reserved"


class Project(TenantScopedMixin, Base):
    __tablename__ = "projects"
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_projects_tenant_name"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_plots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    buying_price: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    description: Mapped[str | None] = mapped_column(Text)

    plots: Mapped[list[Plot]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Plot.plot_number",
    )


class Plot(TenantScopedMixin, Base):
    """A sellable unit of a project.

    ``client_id`` is a plain reference without a foreign key: a client may
    be removed while its plots are being returned, and
    ``cleanup_orphaned_plots`` repairs any plot left pointing at nobody.
    """

    __tablename__ = "plots"
    __table_args__ = (
        UniqueConstraint("project_id", "plot_number", name="uq_plots_project_number"),
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plot_number: Mapped[str] = mapped_column(String(64), nullable=False)
    size: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PlotStatus.AVAILABLE.value, index=True
    )
    client_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    sold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(Text)

    project: Mapped[Project] = relationship(back_populates="plots")
