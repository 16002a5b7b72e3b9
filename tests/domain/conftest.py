"""Factories for domain tests.

Each factory goes through the service layer so rows are created the way
the API creates them.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest

from landdesk.domain.inventory import service as inventory
from landdesk.domain.inventory.schemas import PlotCreate, ProjectCreate
from landdesk.domain.sales import service as sales
from landdesk.domain.sales.schemas import ClientCreate

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

    from landdesk.domain.inventory.models import Plot, Project
    from landdesk.domain.sales.models import Client

SALE_DATE = date(2026, 3, 2)


@pytest.fixture()
def today() -> date:
    return date(2026, 10, 19)


@pytest.fixture()
def make_project(session: Session, tenant_id: str) -> Callable[..., Project]:
    def _make(name: str = "Kitengela Gardens", **fields: Any) -> Project:
        fields.setdefault("location", "Kitengela")
        fields.setdefault("capacity", 10)
        return inventory.create_project(
            session, tenant_id, ProjectCreate(name=name, **fields)
        )

    return _make


@pytest.fixture()
def make_plot(session: Session, tenant_id: str) -> Callable[..., Plot]:
    def _make(project: Project, number: str = "A1", price: str = "500000") -> Plot:
        return inventory.add_plot(
            session,
            tenant_id,
            project.id,
            PlotCreate(plot_number=number, size="50x100", price=Decimal(price)),
        )

    return _make


@pytest.fixture()
def make_client(session: Session, tenant_id: str) -> Callable[..., Client]:
    def _make(
        name: str = "Wanjiru Kamau",
        total_price: str = "500000",
        initial_payment: str = "0",
        **fields: Any,
    ) -> Client:
        fields.setdefault("phone", "0712345678")
        fields.setdefault("sale_date", SALE_DATE)
        data = ClientCreate(
            name=name,
            total_price=Decimal(total_price),
            initial_payment=Decimal(initial_payment),
            **fields,
        )
        return sales.register_client(session, tenant_id, data, today=SALE_DATE)

    return _make
