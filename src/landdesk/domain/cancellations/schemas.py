"""Request and response models for cancelled sales."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003
from decimal import Decimal
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from landdesk.domain.cancellations.models import RefundStatus

_ZERO = Decimal("0")


class CancelSaleRequest(BaseModel):
    cancellation_fee: Decimal = Field(default=_ZERO, ge=0)
    refund_amount: Decimal = Field(default=_ZERO, ge=0)
    refund_status: RefundStatus = RefundStatus.PENDING
    cancellation_reason: str | None = None
    cancellation_date: date | None = None
    refund_method: str = "cash"
    notes: str | None = None


class RefundUpdate(BaseModel):
    refund_amount: Decimal | None = Field(default=None, ge=0)
    cancellation_fee: Decimal | None = Field(default=None, ge=0)
    refund_status: RefundStatus | None = None
    refund_method: str = "cash"
    notes: str | None = None


class CancelledSaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    client_name: str
    client_phone: str | None
    project_name: str
    plot_number: str
    original_sale_date: date | None
    total_price: Decimal
    total_paid: Decimal
    cancellation_date: date
    cancellation_reason: str | None
    notes: str | None
    cancelled_by: str | None
    refund_amount: Decimal
    refund_status: RefundStatus
    cancellation_fee: Decimal
    net_refund: Decimal
    created_at: datetime


class CancellationSummary(BaseModel):
    total_cancelled: int
    total_sale_value: Decimal
    total_collected: Decimal
    total_refunded: Decimal
    total_fees: Decimal
    pending_refunds: int
    retained: Decimal
    refunds_paid_out: Decimal
    pending_refund_amount: Decimal
