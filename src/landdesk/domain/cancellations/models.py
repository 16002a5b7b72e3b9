"""Audit records of reversed plot sales."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import Date, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from landdesk.foundation.domain import ZERO
from landdesk.infra.persistence.base import Base, TenantScopedMixin


class RefundStatus(StrEnum):
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"
    NONE = "none"


#: Statuses for which money has actually left the company.
PAID_OUT = frozenset({RefundStatus.COMPLETED.value, RefundStatus.PARTIAL.value})


class CancelledSale(TenantScopedMixin, Base):
    """Snapshot of a client taken when their sale was cancelled.

    ``client_id`` keeps the id of the deleted client for reference only.
    """

    __tablename__ = "cancelled_sales"

    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_phone: Mapped[str | None] = mapped_column(String(32))
    project_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    plot_number: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    original_sale_date: Mapped[date | None] = mapped_column(Date)
    total_price: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    total_paid: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    cancellation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    cancelled_by: Mapped[str | None] = mapped_column(String(64))

    refund_amount: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    refund_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RefundStatus.PENDING.value
    )
    cancellation_fee: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    net_refund: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
