"""Report models for the accounting views."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from decimal import Decimal  # noqa: TC003
from typing import Literal

from pydantic import BaseModel


class SalesValue(BaseModel):
    gross: Decimal
    discounts: Decimal
    net: Decimal


class Income(BaseModel):
    cash_from_sales: Decimal
    cancellation_fees: Decimal
    forfeited: Decimal
    total: Decimal


class MonthlyFigures(BaseModel):
    month: str  # YYYY-MM
    income: Decimal
    expenses: Decimal
    net: Decimal


class ProfitAndLoss(BaseModel):
    """Income statement over ``[start, end]``; open bounds cover all history."""

    start: date | None
    end: date | None
    sales_value: SalesValue
    income: Income
    expenses_by_category: dict[str, Decimal]
    refunds: Decimal
    gross_profit: Decimal
    operating_expenses: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_margin: Decimal
    receivables: Decimal
    pending_refunds: Decimal
    monthly: list[MonthlyFigures]


class ClientSummary(BaseModel):
    total_clients: int
    active: int
    completed: int
    overdue: int
    total_sales_value: Decimal
    total_collected: Decimal
    outstanding: Decimal
    collection_rate: Decimal


class LedgerEntry(BaseModel):
    entry_date: date
    type: Literal["credit", "debit"]
    description: str
    category: str
    reference: str
    amount: Decimal
    balance: Decimal


class GeneralLedger(BaseModel):
    """Payments and expenses with a running balance, newest first.

    Totals cover the whole period; ``entries`` holds only those matching
    the search.
    """

    start: date | None
    end: date | None
    entries: list[LedgerEntry]
    total_credits: Decimal
    total_debits: Decimal
    net_balance: Decimal
    entry_count: int


class AuditEntry(BaseModel):
    entry_date: date
    reference: str
    description: str
    client: str
    category: Literal["Revenue Loss", "Cash Outflow", "Fee Income", "Retained"]
    debit: Decimal
    credit: Decimal


class CancellationAudit(BaseModel):
    """Cancelled sales reconciled against the refund expenses on the books.

    ``refund_variance`` is recorded refund expenses minus the net refunds
    owed; anything but zero means the two have drifted apart.
    """

    start: date | None
    end: date | None
    total_cancelled: int
    total_sale_value: Decimal
    total_collected: Decimal
    total_refunded: Decimal
    total_fees: Decimal
    total_retained: Decimal
    refund_expenses: Decimal
    refund_variance: Decimal
    refunded_count: int
    retained_count: int
    pending_count: int
    entries: list[AuditEntry]
