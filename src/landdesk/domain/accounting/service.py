"""Read-only financial reports over clients, payments, expenses and cancellations.

Income is cash actually received: payments in the period plus what the
business kept from cancelled sales (the fee and any amount paid but not
refunded). Refund expenses reduce income to gross profit; every other
expense category is operating cost.

The general ledger lists the same cash movements entry by entry, and the
cancellation audit checks the refund expenses against what cancelled
sales say is owed.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from landdesk.domain.accounting.schemas import (
    AuditEntry,
    CancellationAudit,
    ClientSummary,
    GeneralLedger,
    Income,
    LedgerEntry,
    MonthlyFigures,
    ProfitAndLoss,
    SalesValue,
)
from landdesk.domain.cancellations.models import CancelledSale, RefundStatus
from landdesk.domain.expenses.models import Expense, ExpenseCategory
from landdesk.domain.sales.models import Client, ClientStatus, Payment
from landdesk.foundation.domain import ZERO, money_sum, percentage, to_money

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

#: Months shown in the breakdown, newest first.
MONTHLY_WINDOW = 12


def _in_period(column: ColumnElement[date], start: date | None, end: date | None) -> list:
    clauses = []
    if start is not None:
        clauses.append(column >= start)
    if end is not None:
        clauses.append(column <= end)
    return clauses


def forfeited_amount(record: CancelledSale) -> Decimal:
    """What the business kept beyond the fee: ``max(0, paid - net refund - fee)``."""
    kept = to_money(record.total_paid) - to_money(record.net_refund)
    return max(ZERO, kept - to_money(record.cancellation_fee))


def profit_and_loss(
    session: Session,
    tenant_id: str,
    *,
    start: date | None = None,
    end: date | None = None,
) -> ProfitAndLoss:
    live_clients = (Client.tenant_id == tenant_id, Client.status != ClientStatus.CANCELLED.value)
    gross, discounts, receivables = session.execute(
        select(
            func.coalesce(func.sum(Client.total_price), 0),
            func.coalesce(func.sum(Client.discount), 0),
            func.coalesce(func.sum(Client.balance), 0),
        ).where(*live_clients)
    ).one()

    payments = session.execute(
        select(Payment.payment_date, Payment.amount).where(
            Payment.tenant_id == tenant_id, *_in_period(Payment.payment_date, start, end)
        )
    ).all()
    expenses = session.execute(
        select(Expense.expense_date, Expense.category, Expense.amount).where(
            Expense.tenant_id == tenant_id, *_in_period(Expense.expense_date, start, end)
        )
    ).all()
    cancelled = list(
        session.scalars(
            select(CancelledSale).where(
                CancelledSale.tenant_id == tenant_id,
                *_in_period(CancelledSale.cancellation_date, start, end),
            )
        )
    )

    cash = money_sum(amount for _, amount in payments)
    fees = money_sum(r.cancellation_fee for r in cancelled)
    forfeited = money_sum(forfeited_amount(r) for r in cancelled)
    total_income = cash + fees + forfeited

    by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for _, category, amount in expenses:
        by_category[category] += to_money(amount)
    refunds = by_category.pop(ExpenseCategory.REFUND.value, ZERO)
    operating = money_sum(by_category.values())

    gross_profit = total_income - refunds
    net_profit = gross_profit - operating
    gross = to_money(gross)
    discounts = to_money(discounts)
    return ProfitAndLoss(
        start=start,
        end=end,
        sales_value=SalesValue(gross=gross, discounts=discounts, net=gross - discounts),
        income=Income(
            cash_from_sales=cash,
            cancellation_fees=fees,
            forfeited=forfeited,
            total=total_income,
        ),
        expenses_by_category=dict(sorted(by_category.items())),
        refunds=refunds,
        gross_profit=gross_profit,
        operating_expenses=operating,
        total_expenses=operating + refunds,
        net_profit=net_profit,
        profit_margin=percentage(net_profit, total_income),
        receivables=to_money(receivables),
        pending_refunds=money_sum(
            r.net_refund for r in cancelled if r.refund_status == RefundStatus.PENDING.value
        ),
        monthly=_monthly(payments, expenses),
    )


def _monthly(payments: list, expenses: list) -> list[MonthlyFigures]:
    income: dict[str, Decimal] = defaultdict(lambda: ZERO)
    spent: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for on, amount in payments:
        income[on.strftime("%Y-%m")] += to_money(amount)
    for on, _, amount in expenses:
        spent[on.strftime("%Y-%m")] += to_money(amount)
    months = sorted(income.keys() | spent.keys(), reverse=True)[:MONTHLY_WINDOW]
    return [
        MonthlyFigures(
            month=m,
            income=income[m],
            expenses=spent[m],
            net=income[m] - spent[m],
        )
        for m in months
    ]


def client_summary(session: Session, tenant_id: str) -> ClientSummary:
    counts = dict(
        session.execute(
            select(Client.status, func.count())
            .where(Client.tenant_id == tenant_id)
            .group_by(Client.status)
        ).all()
    )
    sales, discounts, collected, outstanding = session.execute(
        select(
            func.coalesce(func.sum(Client.total_price), 0),
            func.coalesce(func.sum(Client.discount), 0),
            func.coalesce(func.sum(Client.total_paid), 0),
            func.coalesce(func.sum(Client.balance), 0),
        ).where(Client.tenant_id == tenant_id, Client.status != ClientStatus.CANCELLED.value)
    ).one()
    collected = to_money(collected)
    return ClientSummary(
        total_clients=sum(counts.values()),
        active=counts.get(ClientStatus.ACTIVE.value, 0),
        completed=counts.get(ClientStatus.COMPLETED.value, 0),
        overdue=counts.get(ClientStatus.OVERDUE.value, 0),
        total_sales_value=to_money(sales),
        total_collected=collected,
        outstanding=to_money(outstanding),
        collection_rate=percentage(collected, to_money(sales) - to_money(discounts)),
    )


def general_ledger(
    session: Session,
    tenant_id: str,
    *,
    start: date | None = None,
    end: date | None = None,
    search: str | None = None,
) -> GeneralLedger:
    """Payments as credits and expenses (refunds included) as debits.

    The running balance accumulates oldest first over the whole period;
    ``search`` (case-insensitive, over description, reference and
    category) only narrows the entries returned.
    """
    rows = session.execute(
        select(Payment, Client.name, Client.project_name)
        .join(Payment.client)
        .where(Payment.tenant_id == tenant_id, *_in_period(Payment.payment_date, start, end))
    ).all()
    postings = [
        (
            payment.payment_date,
            "credit",
            f"Payment from {name} - {project}",
            "Revenue",
            payment.receipt_number,
            to_money(payment.amount),
        )
        for payment, name, project in rows
    ]
    expenses = session.scalars(
        select(Expense).where(
            Expense.tenant_id == tenant_id, *_in_period(Expense.expense_date, start, end)
        )
    )
    postings.extend(
        (
            e.expense_date,
            "debit",
            e.description or e.category,
            e.category,
            e.reference_number,
            to_money(e.amount),
        )
        for e in expenses
    )
    # Same-day credits post before debits.
    postings.sort(key=lambda p: (p[0], p[1] == "debit", p[4]))

    entries = []
    balance = ZERO
    for on, kind, description, category, reference, amount in postings:
        balance += amount if kind == "credit" else -amount
        entries.append(
            LedgerEntry(
                entry_date=on,
                type=kind,
                description=description,
                category=category,
                reference=reference,
                amount=amount,
                balance=balance,
            )
        )
    entries.reverse()

    credits = money_sum(e.amount for e in entries if e.type == "credit")
    debits = money_sum(e.amount for e in entries if e.type == "debit")
    if search and (needle := search.strip().lower()):
        entries = [
            e
            for e in entries
            if needle in e.description.lower()
            or needle in e.reference.lower()
            or needle in e.category.lower()
        ]
    return GeneralLedger(
        start=start,
        end=end,
        entries=entries,
        total_credits=credits,
        total_debits=debits,
        net_balance=credits - debits,
        entry_count=len(postings),
    )


def cancellation_audit(
    session: Session,
    tenant_id: str,
    *,
    start: date | None = None,
    end: date | None = None,
) -> CancellationAudit:
    records = list(
        session.scalars(
            select(CancelledSale).where(
                CancelledSale.tenant_id == tenant_id,
                *_in_period(CancelledSale.cancellation_date, start, end),
            )
        )
    )
    refund_expenses = to_money(
        session.scalar(
            select(func.coalesce(func.sum(Expense.amount), 0)).where(
                Expense.tenant_id == tenant_id,
                Expense.category == ExpenseCategory.REFUND.value,
                *_in_period(Expense.expense_date, start, end),
            )
        )
    )
    collected = money_sum(r.total_paid for r in records)
    refunded = money_sum(r.net_refund for r in records)
    statuses = [r.refund_status for r in records]

    entries = [entry for r in records for entry in _audit_entries(r)]
    entries.sort(key=lambda e: e.entry_date, reverse=True)
    return CancellationAudit(
        start=start,
        end=end,
        total_cancelled=len(records),
        total_sale_value=money_sum(r.total_price for r in records),
        total_collected=collected,
        total_refunded=refunded,
        total_fees=money_sum(r.cancellation_fee for r in records),
        total_retained=collected - refunded,
        refund_expenses=refund_expenses,
        refund_variance=refund_expenses - refunded,
        refunded_count=statuses.count(RefundStatus.COMPLETED.value),
        retained_count=statuses.count(RefundStatus.NONE.value),
        pending_count=statuses.count(RefundStatus.PENDING.value),
        entries=entries,
    )


def _audit_entries(record: CancelledSale) -> list[AuditEntry]:
    """Ledger lines one cancellation produces, skipping zero amounts."""
    short_id = str(record.id)[:8]
    plot = f"{record.project_name} {record.plot_number}"
    uncollected = to_money(record.total_price) - to_money(record.total_paid)
    fee = to_money(record.cancellation_fee)
    lines = [
        ("CAN", f"Revenue loss - {plot}", "Revenue Loss", uncollected, ZERO),
        ("REF", f"Refund paid - {plot}", "Cash Outflow", to_money(record.net_refund), ZERO),
        ("FEE", f"Cancellation fee - {plot}", "Fee Income", ZERO, fee),
        ("RET", f"Forfeited amount - {plot}", "Retained", ZERO, forfeited_amount(record)),
    ]
    return [
        AuditEntry(
            entry_date=record.cancellation_date,
            reference=f"{prefix}-{short_id}",
            description=description,
            client=record.client_name,
            category=category,
            debit=debit,
            credit=credit,
        )
        for prefix, description, category, debit, credit in lines
        if debit > 0 or credit > 0
    ]
