"""Operating expenses, commission payouts and refunds."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import Boolean, Date, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from landdesk.infra.persistence.base import AuditedMixin, Base, TenantScopedMixin


class ExpenseCategory(StrEnum):
    COMMISSION_PAYOUT = "Commission Payout"
    OFFICE_SUPPLIES = "Office Supplies"
    UTILITIES = "Utilities"
    RENT = "Rent"
    MARKETING = "Marketing"
    TRANSPORT = "Transport"
    SALARIES = "Salaries"
    LEGAL_FEES = "Legal Fees"
    MAINTENANCE = "Maintenance"
    OTHER = "Other"
    REFUND = "Refund"


class Expense(TenantScopedMixin, AuditedMixin, Base):
    """A cash outflow.

    A commission payout linked to a client moves that client's
    ``commission_received``. ``client_id`` is nulled when the client is
    deleted or their sale cancelled; the expense itself is kept.
    """

    __tablename__ = "expenses"
    __table_args__ = (
        UniqueConstraint("tenant_id", "reference_number", name="uq_expenses_tenant_reference"),
    )

    expense_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False, default="cash")
    recipient: Mapped[str | None] = mapped_column(String(255))
    reference_number: Mapped[str] = mapped_column(String(64), nullable=False)
    agent_name: Mapped[str | None] = mapped_column(String(255), index=True)
    client_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="SET NULL"), index=True
    )
    is_commission_payout: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text)
