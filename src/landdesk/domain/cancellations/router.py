"""Cancelled sales REST API."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, status

from landdesk.domain.cancellations import service
from landdesk.domain.cancellations.models import RefundStatus  # noqa: TC001
from landdesk.domain.cancellations.schemas import (
    CancellationSummary,
    CancelledSaleResponse,
    CancelSaleRequest,
    RefundUpdate,
)
from landdesk.infra.auth.dependencies import AdminOnly, StaffOrAdmin
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1", tags=["cancellations"], dependencies=[StaffOrAdmin])


@router.post(
    "/clients/{client_id}/cancel",
    status_code=status.HTTP_201_CREATED,
    dependencies=[AdminOnly],
)
def cancel_sale(
    client_id: UUID, body: CancelSaleRequest, session: DbSession, tenant_id: TenantId
) -> CancelledSaleResponse:
    """Cancel a sale: return plots, roll back payments, unlink expenses, delete the client."""
    record = service.cancel_sale(session, tenant_id, client_id, body)
    return CancelledSaleResponse.model_validate(record)


@router.get("/cancelled-sales")
def list_cancelled_sales(
    session: DbSession,
    tenant_id: TenantId,
    start: Annotated[date | None, Query(alias="from")] = None,
    end: Annotated[date | None, Query(alias="to")] = None,
    refund_status: RefundStatus | None = None,
) -> list[CancelledSaleResponse]:
    records = service.list_cancelled_sales(
        session,
        tenant_id,
        start=start,
        end=end,
        refund_status=refund_status.value if refund_status else None,
    )
    return [CancelledSaleResponse.model_validate(r) for r in records]


@router.get("/cancelled-sales/summary")
def cancellation_summary(
    session: DbSession,
    tenant_id: TenantId,
    start: Annotated[date | None, Query(alias="from")] = None,
    end: Annotated[date | None, Query(alias="to")] = None,
) -> CancellationSummary:
    return service.cancellation_summary(session, tenant_id, start=start, end=end)


@router.get("/cancelled-sales/{record_id}")
def get_cancelled_sale(
    record_id: UUID, session: DbSession, tenant_id: TenantId
) -> CancelledSaleResponse:
    record = service.get_cancelled_sale(session, tenant_id, record_id)
    return CancelledSaleResponse.model_validate(record)


@router.patch("/cancelled-sales/{record_id}/refund", dependencies=[AdminOnly])
def update_refund(
    record_id: UUID, body: RefundUpdate, session: DbSession, tenant_id: TenantId
) -> CancelledSaleResponse:
    record = service.update_refund(session, tenant_id, record_id, body)
    return CancelledSaleResponse.model_validate(record)


@router.delete(
    "/cancelled-sales/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[AdminOnly],
)
def delete_cancelled_sale(record_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_cancelled_sale(session, tenant_id, record_id)
