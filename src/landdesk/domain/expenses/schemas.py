"""Request and response models for expenses and the commission report."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003
from decimal import Decimal
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from landdesk.domain.expenses.models import ExpenseCategory
from landdesk.foundation.domain import PartialUpdate


class ExpenseCreate(BaseModel):
    expense_date: date | None = None
    category: ExpenseCategory
    description: str = ""
    amount: Decimal = Field(..., gt=0)
    payment_method: str = "cash"
    recipient: str | None = None
    reference_number: str | None = Field(default=None, max_length=64)
    agent_name: str | None = None
    client_id: UUID | None = None
    is_commission_payout: bool = False
    notes: str | None = None


class ExpenseUpdate(PartialUpdate):
    non_nullable = frozenset(
        {
            "expense_date",
            "category",
            "description",
            "amount",
            "payment_method",
            "is_commission_payout",
        }
    )

    expense_date: date | None = None
    category: ExpenseCategory | None = None
    description: str | None = None
    amount: Decimal | None = Field(default=None, gt=0)
    payment_method: str | None = None
    recipient: str | None = None
    agent_name: str | None = None
    client_id: UUID | None = None
    is_commission_payout: bool | None = None
    notes: str | None = None


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    expense_date: date
    category: str
    description: str
    amount: Decimal
    payment_method: str
    recipient: str | None
    reference_number: str
    agent_name: str | None
    client_id: UUID | None
    is_commission_payout: bool
    notes: str | None
    created_by: str | None
    created_at: datetime


class AgentCommission(BaseModel):
    agent_name: str
    client_count: int
    earned: Decimal
    paid: Decimal
    pending: Decimal


class CommissionReport(BaseModel):
    agents: list[AgentCommission]
    total_earned: Decimal
    total_paid: Decimal
    total_pending: Decimal
