"""Client (plot buyer) accounts and the payments made against them."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import Date, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from landdesk.foundation.domain import ZERO
from landdesk.infra.persistence.base import AuditedMixin, Base, TenantScopedMixin


class ClientStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Client(TenantScopedMixin, AuditedMixin, Base):
    """A buyer and the running figures of their purchase.

    ``balance``, ``percent_paid``, ``commission_balance`` and (unless
    cancelled) ``status`` are derived; services recompute them after every
    change to the inputs.
    """

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), index=True)
    project_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    plot_number: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    unit_price: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    number_of_plots: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_price: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    discount: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    total_paid: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    balance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    percent_paid: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    sales_agent: Mapped[str | None] = mapped_column(String(255), index=True)
    commission: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    commission_received: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    commission_balance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    payment_period: Mapped[str | None] = mapped_column(String(64))
    installment_months: Mapped[int | None] = mapped_column(Integer)
    payment_type: Mapped[str | None] = mapped_column(String(32))  # cash|installments
    initial_payment_method: Mapped[str | None] = mapped_column(String(32))
    sale_date: Mapped[date | None] = mapped_column(Date)
    completion_date: Mapped[date | None] = mapped_column(Date)
    next_payment_date: Mapped[date | None] = mapped_column(Date, index=True)

    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ClientStatus.ACTIVE.value, index=True
    )

    payments: Mapped[list[Payment]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        order_by=lambda: [Payment.payment_date, Payment.created_at],
    )


class Payment(TenantScopedMixin, AuditedMixin, Base):
    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("tenant_id", "receipt_number", name="uq_payments_tenant_receipt"),
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False, default="cash")
    receipt_number: Mapped[str] = mapped_column(String(32), nullable=False)
    previous_balance: Mapped[Decimal] = mapped_column(nullable=False)
    new_balance: Mapped[Decimal] = mapped_column(nullable=False)
    agent_name: Mapped[str | None] = mapped_column(String(255))
    authorized_by: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text)

    client: Mapped[Client] = relationship(back_populates="payments")
