"""Cancelled-sale reconciliation.

Cancelling a sale snapshots the client into an audit record and then
unwinds everything that hung off it, in one transaction:

1. snapshot the client (``net_refund = max(0, refund_amount - fee)``)
2. return the client's plots to stock
3. unlink the client's expenses (commission payouts stay on the books)
4. remove the client's payments (their total stays on the record)
5. delete the client
6. book a ``Refund`` expense when the refund is already paid out
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select

from landdesk.domain.cancellations.models import PAID_OUT, CancelledSale, RefundStatus
from landdesk.domain.cancellations.schemas import CancellationSummary
from landdesk.domain.expenses.models import ExpenseCategory
from landdesk.domain.expenses.service import add_expense
from landdesk.domain.inventory.service import release_client_plots
from landdesk.domain.sales.service import get_client, unlink_client_expenses
from landdesk.foundation.application.context import get_current_actor
from landdesk.foundation.domain import ZERO, NotFoundError, ValidationError, money_sum, to_money
from landdesk.infra.observability.instrumentation import traced_operation

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from sqlalchemy.orm import Session

    from landdesk.domain.cancellations.schemas import CancelSaleRequest, RefundUpdate

logger = logging.getLogger(__name__)


def compute_net_refund(refund_amount: Decimal, fee: Decimal) -> Decimal:
    return max(ZERO, to_money(refund_amount) - to_money(fee))


@traced_operation("cancellations.cancel_sale")
def cancel_sale(
    session: Session,
    tenant_id: str,
    client_id: UUID,
    data: CancelSaleRequest,
    *,
    today: date | None = None,
) -> CancelledSale:
    """Cancel a client's purchase and reconcile plots, payments and expenses.

    Raises:
        NotFoundError: If the client does not exist in the tenant.
        ValidationError: If the refund exceeds what the client paid.
    """
    client = get_client(session, tenant_id, client_id)
    total_paid = money_sum(p.amount for p in client.payments)
    refund_amount = to_money(data.refund_amount)
    if refund_amount > total_paid:
        raise ValidationError(
            "refund_amount",
            f"exceeds the {total_paid} the client has paid",
            total_paid=str(total_paid),
        )
    fee = to_money(data.cancellation_fee)
    record = CancelledSale(
        tenant_id=tenant_id,
        client_id=client.id,
        client_name=client.name,
        client_phone=client.phone,
        project_name=client.project_name,
        plot_number=client.plot_number,
        original_sale_date=client.sale_date,
        total_price=to_money(client.total_price),
        total_paid=total_paid,
        cancellation_date=data.cancellation_date or today or date.today(),
        cancellation_reason=data.cancellation_reason,
        notes=data.notes,
        cancelled_by=get_current_actor(),
        refund_amount=refund_amount,
        refund_status=data.refund_status.value,
        cancellation_fee=fee,
        net_refund=compute_net_refund(refund_amount, fee),
    )
    session.add(record)

    plots_returned = release_client_plots(session, tenant_id, client.id)
    expenses_unlinked = unlink_client_expenses(session, tenant_id, client.id)
    payments_removed = len(client.payments)
    client.payments.clear()
    session.delete(client)
    session.flush()

    if record.refund_status in PAID_OUT and record.net_refund > 0:
        _book_refund(
            session,
            tenant_id,
            record,
            record.net_refund,
            data.refund_method,
            on=record.cancellation_date,
        )

    session.commit()
    logger.info(
        "sale_cancelled: client_id=%s plots_returned=%d payments_removed=%d "
        "expenses_unlinked=%d net_refund=%s",
        client_id,
        plots_returned,
        payments_removed,
        expenses_unlinked,
        record.net_refund,
    )
    return record


def update_refund(
    session: Session, tenant_id: str, record_id: UUID, data: RefundUpdate
) -> CancelledSale:
    """Change the refund figures, booking any newly paid-out amount.

    Moving from ``pending``/``none`` to ``completed``/``partial`` books the
    full net refund. Raising the net refund of a record already paid out
    books only the increase.
    """
    record = get_cancelled_sale(session, tenant_id, record_id)
    was_paid = record.refund_status in PAID_OUT
    previous_net = to_money(record.net_refund)

    if data.refund_amount is not None:
        record.refund_amount = to_money(data.refund_amount)
    if data.cancellation_fee is not None:
        record.cancellation_fee = to_money(data.cancellation_fee)
    if data.refund_status is not None:
        record.refund_status = data.refund_status.value
    if data.notes is not None:
        record.notes = data.notes
    if record.refund_amount > record.total_paid:
        raise ValidationError(
            "refund_amount",
            f"exceeds the {record.total_paid} the client had paid",
        )
    record.net_refund = compute_net_refund(record.refund_amount, record.cancellation_fee)

    if record.refund_status in PAID_OUT:
        if not was_paid and record.net_refund > 0:
            _book_refund(session, tenant_id, record, record.net_refund, data.refund_method)
        elif was_paid and record.net_refund > previous_net:
            _book_refund(
                session, tenant_id, record, record.net_refund - previous_net, data.refund_method
            )

    session.commit()
    logger.info(
        "refund_updated: record_id=%s status=%s net_refund=%s",
        record.id,
        record.refund_status,
        record.net_refund,
    )
    return record


def _book_refund(
    session: Session,
    tenant_id: str,
    record: CancelledSale,
    amount: Decimal,
    payment_method: str,
    *,
    on: date | None = None,
) -> None:
    add_expense(
        session,
        tenant_id,
        category=ExpenseCategory.REFUND.value,
        amount=amount,
        expense_date=on or date.today(),
        description=(
            f"Refund for cancelled sale: {record.client_name} "
            f"({record.project_name} plot {record.plot_number})"
        ),
        payment_method=payment_method,
        recipient=record.client_name,
        notes=(
            f"Cancelled sale refund. Project: {record.project_name}, "
            f"Original sale: {to_money(record.total_price)}, "
            f"Was paid: {to_money(record.total_paid)}, "
            f"Net refund: {to_money(amount)}"
        ),
    )


def get_cancelled_sale(session: Session, tenant_id: str, record_id: UUID) -> CancelledSale:
    record = session.scalar(
        select(CancelledSale).where(
            CancelledSale.id == record_id, CancelledSale.tenant_id == tenant_id
        )
    )
    if record is None:
        raise NotFoundError("CancelledSale", record_id)
    return record


def list_cancelled_sales(
    session: Session,
    tenant_id: str,
    *,
    start: date | None = None,
    end: date | None = None,
    refund_status: str | None = None,
) -> list[CancelledSale]:
    stmt = select(CancelledSale).where(CancelledSale.tenant_id == tenant_id)
    if start is not None:
        stmt = stmt.where(CancelledSale.cancellation_date >= start)
    if end is not None:
        stmt = stmt.where(CancelledSale.cancellation_date <= end)
    if refund_status:
        stmt = stmt.where(CancelledSale.refund_status == refund_status)
    return list(session.scalars(stmt.order_by(CancelledSale.cancellation_date.desc())))


def delete_cancelled_sale(session: Session, tenant_id: str, record_id: UUID) -> None:
    session.delete(get_cancelled_sale(session, tenant_id, record_id))
    session.commit()
    logger.info("cancelled_sale_deleted: record_id=%s", record_id)


def cancellation_summary(
    session: Session,
    tenant_id: str,
    *,
    start: date | None = None,
    end: date | None = None,
) -> CancellationSummary:
    """Totals over cancelled sales.

    ``total_refunded`` is the net refund owed on every record whatever its
    status, so ``retained`` (collected minus refunded) is what the business
    keeps once all refunds are settled. ``pending_refunds`` counts records
    still awaiting payout; ``refunds_paid_out`` and ``pending_refund_amount``
    split the money by status.
    """
    records = list_cancelled_sales(session, tenant_id, start=start, end=end)
    collected = money_sum(r.total_paid for r in records)
    refunded = money_sum(r.net_refund for r in records)
    pending = [r for r in records if r.refund_status == RefundStatus.PENDING.value]
    return CancellationSummary(
        total_cancelled=len(records),
        total_sale_value=money_sum(r.total_price for r in records),
        total_collected=collected,
        total_refunded=refunded,
        total_fees=money_sum(r.cancellation_fee for r in records),
        pending_refunds=len(pending),
        retained=collected - refunded,
        refunds_paid_out=money_sum(r.net_refund for r in records if r.refund_status in PAID_OUT),
        pending_refund_amount=money_sum(r.net_refund for r in pending),
    )
