"""Accounting reports REST API."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from landdesk.domain.accounting import service
from landdesk.domain.accounting.schemas import (
    CancellationAudit,
    ClientSummary,
    GeneralLedger,
    ProfitAndLoss,
)
from landdesk.foundation.domain import ValidationError
from landdesk.infra.auth.dependencies import StaffOrAdmin
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1/accounting", tags=["accounting"], dependencies=[StaffOrAdmin])


def _period(
    start: Annotated[date | None, Query(alias="from")] = None,
    end: Annotated[date | None, Query(alias="to")] = None,
) -> tuple[date | None, date | None]:
    if start is not None and end is not None and start > end:
        raise ValidationError("from", "must not be after 'to'")
    return start, end


Period = Annotated[tuple[date | None, date | None], Depends(_period)]


@router.get("/profit-and-loss")
def profit_and_loss(session: DbSession, tenant_id: TenantId, period: Period) -> ProfitAndLoss:
    start, end = period
    return service.profit_and_loss(session, tenant_id, start=start, end=end)


@router.get("/client-summary")
def client_summary(session: DbSession, tenant_id: TenantId) -> ClientSummary:
    return service.client_summary(session, tenant_id)


@router.get("/general-ledger")
def general_ledger(
    session: DbSession, tenant_id: TenantId, period: Period, search: str | None = None
) -> GeneralLedger:
    start, end = period
    return service.general_ledger(session, tenant_id, start=start, end=end, search=search)


@router.get("/cancellation-audit")
def cancellation_audit(
    session: DbSession, tenant_id: TenantId, period: Period
) -> CancellationAudit:
    start, end = period
    return service.cancellation_audit(session, tenant_id, start=start, end=end)
