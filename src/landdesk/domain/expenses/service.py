"""Expense ledger and commission payouts.

A commission payout linked to a client adds its amount to the client's
``commission_received``. Editing or deleting the payout first reverses
what it previously applied, so the client's figures always equal the sum
of its linked payouts.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from landdesk.domain.expenses.models import Expense, ExpenseCategory
from landdesk.domain.expenses.schemas import AgentCommission, CommissionReport
from landdesk.domain.sales.models import Client, ClientStatus
from landdesk.domain.sales.service import get_client, recompute
from landdesk.foundation.domain import (
    ZERO,
    ExpenseReference,
    NotFoundError,
    money_sum,
    to_money,
)
from landdesk.infra.persistence.numbering import get_ledger_settings, next_sequence

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from sqlalchemy.orm import Session

    from landdesk.domain.expenses.schemas import ExpenseCreate, ExpenseUpdate

logger = logging.getLogger(__name__)


def get_expense(session: Session, tenant_id: str, expense_id: UUID) -> Expense:
    expense = session.scalar(
        select(Expense).where(Expense.id == expense_id, Expense.tenant_id == tenant_id)
    )
    if expense is None:
        raise NotFoundError("Expense", expense_id)
    return expense


def list_expenses(
    session: Session,
    tenant_id: str,
    *,
    category: str | None = None,
    start: date | None = None,
    end: date | None = None,
    client_id: UUID | None = None,
) -> list[Expense]:
    """List expenses newest first; ``start`` and ``end`` are inclusive."""
    stmt = select(Expense).where(Expense.tenant_id == tenant_id)
    if category:
        stmt = stmt.where(Expense.category == category)
    if start is not None:
        stmt = stmt.where(Expense.expense_date >= start)
    if end is not None:
        stmt = stmt.where(Expense.expense_date <= end)
    if client_id is not None:
        stmt = stmt.where(Expense.client_id == client_id)
    return list(
        session.scalars(stmt.order_by(Expense.expense_date.desc(), Expense.created_at.desc()))
    )


def create_expense(session: Session, tenant_id: str, data: ExpenseCreate) -> Expense:
    expense = add_expense(session, tenant_id, **data.model_dump())
    session.commit()
    logger.info(
        "expense_created: expense_id=%s category=%s amount=%s",
        expense.id,
        expense.category,
        expense.amount,
    )
    return expense


def add_expense(
    session: Session,
    tenant_id: str,
    *,
    category: str,
    amount: Decimal,
    expense_date: date | None = None,
    reference_number: str | None = None,
    **fields: Any,
) -> Expense:
    """Insert an expense without committing, applying any commission payout.

    ``reference_number`` defaults to the next ``EXP-YYYYMMDD-NNNN`` of the
    expense date.
    """
    expense_date = expense_date or date.today()
    expense = Expense(
        tenant_id=tenant_id,
        category=str(category),
        amount=to_money(amount),
        expense_date=expense_date,
        reference_number=reference_number or _next_reference(session, tenant_id, expense_date),
        **fields,
    )
    _normalize_payout(session, tenant_id, expense)
    session.add(expense)
    _apply_payout(session, tenant_id, expense, sign=1)
    session.flush()
    return expense


def update_expense(
    session: Session, tenant_id: str, expense_id: UUID, data: ExpenseUpdate
) -> Expense:
    expense = get_expense(session, tenant_id, expense_id)
    _apply_payout(session, tenant_id, expense, sign=-1)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "amount":
            value = to_money(value)
        elif field == "category":
            value = str(value)
        setattr(expense, field, value)
    _normalize_payout(session, tenant_id, expense)
    _apply_payout(session, tenant_id, expense, sign=1)
    session.commit()
    return expense


def delete_expense(session: Session, tenant_id: str, expense_id: UUID) -> None:
    expense = get_expense(session, tenant_id, expense_id)
    _apply_payout(session, tenant_id, expense, sign=-1)
    session.delete(expense)
    session.commit()
    logger.info("expense_deleted: expense_id=%s", expense_id)


def _normalize_payout(session: Session, tenant_id: str, expense: Expense) -> None:
    if expense.category == ExpenseCategory.COMMISSION_PAYOUT.value:
        expense.is_commission_payout = True
    if expense.client_id is None:
        return
    client = get_client(session, tenant_id, expense.client_id)
    if expense.is_commission_payout and not expense.agent_name:
        expense.agent_name = client.sales_agent


def _apply_payout(session: Session, tenant_id: str, expense: Expense, *, sign: int) -> None:
    """Add (``sign=1``) or reverse (``sign=-1``) a payout on its client."""
    if not expense.is_commission_payout or expense.client_id is None:
        return
    client = session.scalar(
        select(Client).where(Client.id == expense.client_id, Client.tenant_id == tenant_id)
    )
    if client is None:
        return
    client.commission_received = to_money(client.commission_received) + sign * to_money(
        expense.amount
    )
    recompute(client)


def _next_reference(session: Session, tenant_id: str, on: date) -> str:
    prefix = get_ledger_settings().expense_prefix
    period = ExpenseReference.period_prefix(prefix, on)
    sequence = next_sequence(
        session, Expense.reference_number, Expense.tenant_id, tenant_id, period
    )
    return str(ExpenseReference.build(prefix, on, sequence))


def commission_report(session: Session, tenant_id: str) -> CommissionReport:
    """Commission earned, paid and pending per sales agent.

    Earned counts clients whose sale is not cancelled. Paid counts every
    commission payout naming the agent, linked to a client or not.
    """
    earned_rows = session.execute(
        select(
            Client.sales_agent,
            func.count(Client.id),
            func.coalesce(func.sum(Client.commission), ZERO),
        )
        .where(
            Client.tenant_id == tenant_id,
            Client.status != ClientStatus.CANCELLED.value,
            Client.sales_agent.is_not(None),
            Client.sales_agent != "",
        )
        .group_by(Client.sales_agent)
    ).all()
    paid_rows = session.execute(
        select(Expense.agent_name, func.coalesce(func.sum(Expense.amount), ZERO))
        .where(
            Expense.tenant_id == tenant_id,
            Expense.is_commission_payout.is_(True),
            Expense.agent_name.is_not(None),
            Expense.agent_name != "",
        )
        .group_by(Expense.agent_name)
    ).all()

    earned = {agent: (count, to_money(total)) for agent, count, total in earned_rows}
    paid = {agent: to_money(total) for agent, total in paid_rows}
    agents = [
        AgentCommission(
            agent_name=agent,
            client_count=earned.get(agent, (0, ZERO))[0],
            earned=earned.get(agent, (0, ZERO))[1],
            paid=paid.get(agent, ZERO),
            pending=earned.get(agent, (0, ZERO))[1] - paid.get(agent, ZERO),
        )
        for agent in sorted(earned.keys() | paid.keys())
    ]
    return CommissionReport(
        agents=agents,
        total_earned=money_sum(a.earned for a in agents),
        total_paid=money_sum(a.paid for a in agents),
        total_pending=money_sum(a.pending for a in agents),
    )
