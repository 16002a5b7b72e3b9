"""Expenses and commission report REST API."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, status

from landdesk.domain.expenses import service
from landdesk.domain.expenses.models import ExpenseCategory  # noqa: TC001
from landdesk.domain.expenses.schemas import (
    CommissionReport,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
)
from landdesk.infra.auth.dependencies import StaffOrAdmin
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1/expenses", tags=["expenses"], dependencies=[StaffOrAdmin])


@router.get("")
def list_expenses(
    session: DbSession,
    tenant_id: TenantId,
    category: ExpenseCategory | None = None,
    start: Annotated[date | None, Query(alias="from")] = None,
    end: Annotated[date | None, Query(alias="to")] = None,
    client_id: UUID | None = None,
) -> list[ExpenseResponse]:
    expenses = service.list_expenses(
        session,
        tenant_id,
        category=category.value if category else None,
        start=start,
        end=end,
        client_id=client_id,
    )
    return [ExpenseResponse.model_validate(e) for e in expenses]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_expense(
    body: ExpenseCreate, session: DbSession, tenant_id: TenantId
) -> ExpenseResponse:
    return ExpenseResponse.model_validate(service.create_expense(session, tenant_id, body))


@router.get("/commissions")
def commission_report(session: DbSession, tenant_id: TenantId) -> CommissionReport:
    return service.commission_report(session, tenant_id)


@router.get("/{expense_id}")
def get_expense(expense_id: UUID, session: DbSession, tenant_id: TenantId) -> ExpenseResponse:
    return ExpenseResponse.model_validate(service.get_expense(session, tenant_id, expense_id))


@router.patch("/{expense_id}")
def update_expense(
    expense_id: UUID, body: ExpenseUpdate, session: DbSession, tenant_id: TenantId
) -> ExpenseResponse:
    expense = service.update_expense(session, tenant_id, expense_id, body)
    return ExpenseResponse.model_validate(expense)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_expense(session, tenant_id, expense_id)
