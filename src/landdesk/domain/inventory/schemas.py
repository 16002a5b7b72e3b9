"""Request and response models for projects and plots."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from decimal import Decimal
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from landdesk.domain.inventory.models import PlotStatus
from landdesk.foundation.domain import PartialUpdate

# -- Projects -----------------------------------------------------------------


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = ""
    capacity: int = Field(default=0, ge=0)
    buying_price: Decimal = Field(default=Decimal("0"), ge=0)
    description: str | None = None


class ProjectUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "location", "capacity", "buying_price"})

    name: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    buying_price: Decimal | None = Field(default=None, ge=0)
    description: str | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    location: str
    capacity: int
    total_plots: int
    buying_price: Decimal
    description: str | None
    created_at: datetime
    updated_at: datetime


class ProjectStats(BaseModel):
    project_id: UUID
    name: str
    total: int
    available: int
    sold: int
    reserved: int
    capacity: int
    effective_capacity: int
    sold_value: Decimal


class InventoryStats(BaseModel):
    total_projects: int
    total_plots: int
    available: int
    sold: int
    reserved: int
    total_capacity: int
    sold_value: Decimal
    fully_sold_projects: int
    projects: list[ProjectStats]


# -- Plots --------------------------------------------------------------------


class PlotCreate(BaseModel):
    plot_number: str = Field(..., min_length=1, max_length=64)
    size: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = None


class BulkPlotCreate(BaseModel):
    """Plots ``<prefix><start>`` .. ``<prefix><start + count - 1>``."""

    prefix: str = Field(default="", max_length=32)
    start: int = Field(default=1, ge=0)
    count: int = Field(..., ge=1, le=1000)
    size: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0)


class PlotUpdate(PartialUpdate):
    non_nullable = frozenset({"plot_number", "size", "price"})

    plot_number: str | None = Field(default=None, min_length=1, max_length=64)
    size: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class PlotAllocation(BaseModel):
    client_id: UUID | None = None


class PlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    plot_number: str
    size: str
    price: Decimal
    status: PlotStatus
    client_id: UUID | None
    sold_at: datetime | None
    notes: str | None


class BulkPlotResult(BaseModel):
    created: list[PlotResponse]
    skipped: list[str]


class CleanupResult(BaseModel):
    returned: int
