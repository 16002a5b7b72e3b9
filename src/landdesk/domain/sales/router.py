"""Clients, payments and receipts REST API."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, status

from landdesk.domain.sales import service
from landdesk.domain.sales.models import ClientStatus  # noqa: TC001
from landdesk.domain.sales.schemas import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    OverdueClient,
    OverdueRefreshResult,
    PaymentCreate,
    PaymentHistory,
    PaymentRegister,
    PaymentResponse,
    PaymentUpdate,
    Receipt,
)
from landdesk.foundation.domain import ValidationError
from landdesk.infra.auth.dependencies import AdminOnly, StaffOrAdmin
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1", tags=["sales"], dependencies=[StaffOrAdmin])


# -- Clients ------------------------------------------------------------------


@router.get("/clients")
def list_clients(
    session: DbSession,
    tenant_id: TenantId,
    status_filter: Annotated[ClientStatus | None, Query(alias="status")] = None,
    project: str | None = None,
    search: str | None = None,
) -> list[ClientResponse]:
    clients = service.list_clients(
        session,
        tenant_id,
        status=status_filter.value if status_filter else None,
        project=project,
        search=search,
    )
    return [ClientResponse.model_validate(c) for c in clients]


@router.post("/clients", status_code=status.HTTP_201_CREATED)
def register_client(body: ClientCreate, session: DbSession, tenant_id: TenantId) -> ClientResponse:
    """Register a buyer; optionally sell ``plot_id`` and take an initial payment."""
    return ClientResponse.model_validate(service.register_client(session, tenant_id, body))


@router.get("/clients/overdue")
def overdue_clients(
    session: DbSession,
    tenant_id: TenantId,
    today: date | None = None,
) -> list[OverdueClient]:
    return service.overdue_clients(session, tenant_id, today=today)


@router.post("/clients/overdue/refresh", dependencies=[AdminOnly])
def refresh_overdue_statuses(
    session: DbSession,
    tenant_id: TenantId,
    today: date | None = None,
) -> OverdueRefreshResult:
    marked, restored = service.refresh_overdue_statuses(session, tenant_id, today=today)
    return OverdueRefreshResult(marked_overdue=marked, restored_active=restored)


@router.get("/clients/{client_id}")
def get_client(client_id: UUID, session: DbSession, tenant_id: TenantId) -> ClientResponse:
    return ClientResponse.model_validate(service.get_client(session, tenant_id, client_id))


@router.patch("/clients/{client_id}")
def update_client(
    client_id: UUID, body: ClientUpdate, session: DbSession, tenant_id: TenantId
) -> ClientResponse:
    client = service.update_client(session, tenant_id, client_id, body)
    return ClientResponse.model_validate(client)


@router.delete(
    "/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[AdminOnly],
)
def delete_client(client_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_client(session, tenant_id, client_id)


# -- Payments -----------------------------------------------------------------


@router.get("/clients/{client_id}/payments")
def payment_history(client_id: UUID, session: DbSession, tenant_id: TenantId) -> PaymentHistory:
    return service.get_client_payment_history(session, tenant_id, client_id)


@router.post("/clients/{client_id}/payments", status_code=status.HTTP_201_CREATED)
def record_payment(
    client_id: UUID, body: PaymentCreate, session: DbSession, tenant_id: TenantId
) -> PaymentResponse:
    payment = service.record_payment(session, tenant_id, client_id, body)
    return PaymentResponse.model_validate(payment)


@router.get("/payments")
def list_payments(
    session: DbSession,
    tenant_id: TenantId,
    search: str | None = None,
    start: Annotated[date | None, Query(alias="from")] = None,
    end: Annotated[date | None, Query(alias="to")] = None,
    payment_method: str | None = None,
) -> PaymentRegister:
    if start is not None and end is not None and start > end:
        raise ValidationError("from", "must not be after 'to'")
    return service.list_payments(
        session,
        tenant_id,
        search=search,
        start=start,
        end=end,
        payment_method=payment_method,
    )


@router.get("/payments/{payment_id}/receipt")
def get_receipt(payment_id: UUID, session: DbSession, tenant_id: TenantId) -> Receipt:
    return service.build_receipt(session, tenant_id, payment_id)


@router.patch("/payments/{payment_id}", dependencies=[AdminOnly])
def update_payment(
    payment_id: UUID, body: PaymentUpdate, session: DbSession, tenant_id: TenantId
) -> PaymentResponse:
    payment = service.update_payment(session, tenant_id, payment_id, body)
    return PaymentResponse.model_validate(payment)


@router.delete(
    "/payments/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[AdminOnly],
)
def delete_payment(payment_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_payment(session, tenant_id, payment_id)
