"""Client accounts, payments and receipts.

Every function takes the session and the tenant slug explicitly and
filters by tenant; row-level security is a second line of defence on
PostgreSQL, not the only one.

Derived client figures::

    net_price          = total_price - discount
    balance            = net_price - total_paid
    percent_paid       = total_paid / net_price * 100   (0 when net_price is 0)
    commission_balance = commission - commission_received
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import TYPE_CHECKING

from sqlalchemy import or_, select, update

from landdesk.domain.expenses.models import Expense
from landdesk.domain.inventory.service import allocate_plot, release_client_plots
from landdesk.domain.sales.models import Client, ClientStatus, Payment
from landdesk.domain.sales.schemas import (
    OverdueClient,
    PaymentHistory,
    PaymentRegister,
    PaymentRegisterEntry,
    PaymentResponse,
    Receipt,
)
from landdesk.foundation.domain import (
    ZERO,
    ConflictError,
    NotFoundError,
    ReceiptNumber,
    ValidationError,
    money_sum,
    percentage,
    to_money,
)
from landdesk.infra.persistence.numbering import get_ledger_settings, next_sequence

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

    from landdesk.domain.sales.schemas import (
        ClientCreate,
        ClientUpdate,
        PaymentCreate,
        PaymentUpdate,
    )

logger = logging.getLogger(__name__)

INITIAL_PAYMENT_NOTE = "Initial payment at registration"


def net_price(client: Client) -> Decimal:
    return to_money(client.total_price) - to_money(client.discount)


def recompute(client: Client) -> None:
    """Refresh the derived figures and the paid-up status of ``client``.

    A cancelled client keeps its status. A client whose balance reaches
    zero becomes ``completed``; one pushed back into debt (a payment was
    edited or deleted) returns to ``active``.
    """
    net = net_price(client)
    client.total_paid = to_money(client.total_paid)
    client.balance = to_money(net - client.total_paid)
    client.percent_paid = percentage(client.total_paid, net)
    client.commission_balance = to_money(client.commission) - to_money(client.commission_received)
    if client.status == ClientStatus.CANCELLED.value:
        return
    if client.balance <= 0:
        client.status = ClientStatus.COMPLETED.value
    elif client.status == ClientStatus.COMPLETED.value:
        client.status = ClientStatus.ACTIVE.value


# -- Clients ------------------------------------------------------------------


def get_client(session: Session, tenant_id: str, client_id: UUID) -> Client:
    client = session.scalar(
        select(Client).where(Client.id == client_id, Client.tenant_id == tenant_id)
    )
    if client is None:
        raise NotFoundError("Client", client_id)
    return client


def list_clients(
    session: Session,
    tenant_id: str,
    *,
    status: str | None = None,
    project: str | None = None,
    search: str | None = None,
) -> list[Client]:
    """List clients newest first.

    Args:
        status: Exact status to match.
        project: Exact project name to match.
        search: Case-insensitive substring of the name or phone number.
    """
    stmt = select(Client).where(Client.tenant_id == tenant_id)
    if status:
        stmt = stmt.where(Client.status == status)
    if project:
        stmt = stmt.where(Client.project_name == project)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(Client.name.ilike(pattern), Client.phone.ilike(pattern)))
    return list(session.scalars(stmt.order_by(Client.created_at.desc())))


def register_client(
    session: Session,
    tenant_id: str,
    data: ClientCreate,
    *,
    today: date | None = None,
) -> Client:
    """Create a client, optionally selling a plot and taking a first payment.

    The plot sale, the client row and the initial payment commit together.

    Raises:
        ValidationError: If the discount exceeds the price, or the initial
            payment exceeds the net price.
        PlotUnavailableError: If ``plot_id`` is already sold.
    """
    today = today or date.today()
    total_price = data.total_price
    if total_price is None:
        total_price = to_money(data.unit_price * data.number_of_plots)
    net = to_money(total_price) - to_money(data.discount)
    if net < 0:
        raise ValidationError("discount", "exceeds the total price")
    if data.initial_payment > net:
        raise ValidationError("initial_payment", f"exceeds the net price of {net}")

    fields = data.model_dump(exclude={"plot_id", "initial_payment", "total_price"})
    client = Client(tenant_id=tenant_id, total_price=to_money(total_price), **fields)
    if client.sale_date is None:
        client.sale_date = today
    recompute(client)
    session.add(client)
    session.flush()

    if data.plot_id is not None:
        plot = allocate_plot(session, tenant_id, data.plot_id, client.id)
        client.project_name = plot.project.name
        client.plot_number = plot.plot_number

    if data.initial_payment > 0:
        _add_payment(
            session,
            tenant_id,
            client,
            to_money(data.initial_payment),
            payment_date=client.sale_date,
            payment_method=data.initial_payment_method or "cash",
            agent_name=data.sales_agent,
            notes=INITIAL_PAYMENT_NOTE,
        )

    session.commit()
    logger.info(
        "client_registered: client_id=%s plot_id=%s initial_payment=%s",
        client.id,
        data.plot_id,
        data.initial_payment,
    )
    return client


def update_client(session: Session, tenant_id: str, client_id: UUID, data: ClientUpdate) -> Client:
    """Apply changes and recompute derived figures from the current total_paid.

    A new unit price or plot count recomputes ``total_price`` unless the
    request sets it explicitly.
    """
    client = get_client(session, tenant_id, client_id)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(client, field, value)
    if "total_price" not in changes and {"unit_price", "number_of_plots"} & changes.keys():
        client.total_price = to_money(client.unit_price * client.number_of_plots)
    if net_price(client) < 0:
        raise ValidationError("discount", "exceeds the total price")
    recompute(client)
    session.commit()
    return client


def delete_client(session: Session, tenant_id: str, client_id: UUID) -> None:
    """Delete a client and its payments, returning plots and unlinking expenses."""
    client = get_client(session, tenant_id, client_id)
    returned = release_client_plots(session, tenant_id, client.id)
    unlinked = unlink_client_expenses(session, tenant_id, client.id)
    session.delete(client)
    session.commit()
    logger.info(
        "client_deleted: client_id=%s plots_returned=%d expenses_unlinked=%d",
        client_id,
        returned,
        unlinked,
    )


def unlink_client_expenses(session: Session, tenant_id: str, client_id: UUID) -> int:
    """Detach expenses from ``client_id`` without committing."""
    result = session.execute(
        update(Expense)
        .where(Expense.tenant_id == tenant_id, Expense.client_id == client_id)
        .values(client_id=None)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0


# -- Payments -----------------------------------------------------------------


def get_payment(session: Session, tenant_id: str, payment_id: UUID) -> Payment:
    payment = session.scalar(
        select(Payment).where(Payment.id == payment_id, Payment.tenant_id == tenant_id)
    )
    if payment is None:
        raise NotFoundError("Payment", payment_id)
    return payment


def record_payment(
    session: Session,
    tenant_id: str,
    client_id: UUID,
    data: PaymentCreate,
    *,
    today: date | None = None,
) -> Payment:
    """Record a payment and issue its receipt number.

    Raises:
        ConflictError: If the client's sale was cancelled.
        ValidationError: If the amount is not positive or exceeds the balance.
    """
    client = get_client(session, tenant_id, client_id)
    if client.status == ClientStatus.CANCELLED.value:
        raise ConflictError(
            "Cannot record a payment for a cancelled sale", client_id=str(client_id)
        )
    amount = to_money(data.amount)
    if amount <= 0:
        raise ValidationError("amount", "must be greater than zero")
    if amount > client.balance:
        raise ValidationError(
            "amount",
            f"exceeds the outstanding balance of {client.balance}",
            balance=str(client.balance),
        )
    payment = _add_payment(
        session,
        tenant_id,
        client,
        amount,
        payment_date=data.payment_date or today or date.today(),
        payment_method=data.payment_method,
        agent_name=data.agent_name,
        authorized_by=data.authorized_by,
        notes=data.notes,
    )
    if data.next_payment_date is not None:
        client.next_payment_date = data.next_payment_date
    session.commit()
    logger.info(
        "payment_recorded: client_id=%s amount=%s receipt=%s",
        client.id,
        amount,
        payment.receipt_number,
    )
    return payment


def update_payment(
    session: Session, tenant_id: str, payment_id: UUID, data: PaymentUpdate
) -> Payment:
    """Edit a payment, carrying any amount difference through to the client.

    Raises:
        ValidationError: If the new amount would leave a negative balance.
    """
    payment = get_payment(session, tenant_id, payment_id)
    client = payment.client
    changes = data.model_dump(exclude_unset=True)
    new_amount = changes.pop("amount", None)
    if new_amount is not None:
        new_amount = to_money(new_amount)
        difference = new_amount - to_money(payment.amount)
        if client.balance - difference < 0:
            raise ValidationError(
                "amount",
                f"would overpay the client by {difference - client.balance}",
                balance=str(client.balance),
            )
        client.total_paid = to_money(client.total_paid) + difference
        payment.amount = new_amount
        payment.new_balance = to_money(payment.previous_balance) - new_amount
        recompute(client)
    for field, value in changes.items():
        setattr(payment, field, value)
    session.commit()
    logger.info("payment_updated: payment_id=%s amount=%s", payment.id, payment.amount)
    return payment


def delete_payment(session: Session, tenant_id: str, payment_id: UUID) -> None:
    """Delete a payment and restore its amount to the client's balance."""
    payment = get_payment(session, tenant_id, payment_id)
    client = payment.client
    client.total_paid = to_money(client.total_paid) - to_money(payment.amount)
    client.payments.remove(payment)
    recompute(client)
    session.commit()
    logger.info("payment_deleted: payment_id=%s client_id=%s", payment_id, client.id)


def get_client_payment_history(session: Session, tenant_id: str, client_id: UUID) -> PaymentHistory:
    client = get_client(session, tenant_id, client_id)
    payments = session.scalars(
        select(Payment)
        .where(Payment.tenant_id == tenant_id, Payment.client_id == client.id)
        .order_by(Payment.payment_date, Payment.created_at)
    ).all()
    return PaymentHistory(
        client_id=client.id,
        client_name=client.name,
        client_phone=client.phone,
        project_name=client.project_name,
        plot_number=client.plot_number,
        total_price=client.total_price,
        discount=client.discount,
        net_price=net_price(client),
        total_paid=client.total_paid,
        balance=client.balance,
        percent_paid=client.percent_paid,
        payments=[PaymentResponse.model_validate(p) for p in payments],
    )


def list_payments(
    session: Session,
    tenant_id: str,
    *,
    search: str | None = None,
    start: date | None = None,
    end: date | None = None,
    payment_method: str | None = None,
) -> PaymentRegister:
    """Every payment of the tenant, newest first, with register totals.

    Args:
        search: Case-insensitive substring of the receipt number, client
            name or project name.
        start: Earliest payment date, inclusive.
        end: Latest payment date, inclusive.
        payment_method: Exact method to match.
    """
    stmt = (
        select(Payment, Client)
        .join(Payment.client)
        .where(Payment.tenant_id == tenant_id, Client.tenant_id == tenant_id)
    )
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Payment.receipt_number.ilike(pattern),
                Client.name.ilike(pattern),
                Client.project_name.ilike(pattern),
            )
        )
    if start is not None:
        stmt = stmt.where(Payment.payment_date >= start)
    if end is not None:
        stmt = stmt.where(Payment.payment_date <= end)
    if payment_method:
        stmt = stmt.where(Payment.payment_method == payment_method)
    rows = session.execute(
        stmt.order_by(Payment.payment_date.desc(), Payment.receipt_number.desc())
    ).all()

    entries = []
    by_method: dict[str, Decimal] = {}
    for payment, client in rows:
        entry = PaymentRegisterEntry.model_validate(
            {
                **PaymentResponse.model_validate(payment).model_dump(),
                "client_name": client.name,
                "project_name": client.project_name,
                "plot_number": client.plot_number,
            }
        )
        entries.append(entry)
        by_method[entry.payment_method] = by_method.get(entry.payment_method, ZERO) + entry.amount
    return PaymentRegister(
        payments=entries,
        count=len(entries),
        total_amount=money_sum(e.amount for e in entries),
        by_method=dict(sorted(by_method.items())),
    )


def build_receipt(session: Session, tenant_id: str, payment_id: UUID) -> Receipt:
    payment = get_payment(session, tenant_id, payment_id)
    client = payment.client
    return Receipt(
        receipt_number=payment.receipt_number,
        payment_date=payment.payment_date,
        client_name=client.name,
        client_phone=client.phone,
        project_name=client.project_name,
        plot_number=client.plot_number,
        total_price=client.total_price,
        discount=client.discount,
        discounted_price=net_price(client),
        amount=payment.amount,
        payment_method=payment.payment_method,
        previous_balance=payment.previous_balance,
        remaining_balance=payment.new_balance,
        total_paid=client.total_paid,
        agent_name=payment.agent_name,
        authorized_by=payment.authorized_by,
    )


def _add_payment(
    session: Session,
    tenant_id: str,
    client: Client,
    amount: Decimal,
    *,
    payment_date: date,
    payment_method: str,
    agent_name: str | None = None,
    authorized_by: str | None = None,
    notes: str | None = None,
) -> Payment:
    previous_balance = to_money(client.balance)
    payment = Payment(
        tenant_id=tenant_id,
        client_id=client.id,
        amount=amount,
        payment_date=payment_date,
        payment_method=payment_method,
        receipt_number=_next_receipt_number(session, tenant_id, payment_date),
        previous_balance=previous_balance,
        new_balance=previous_balance - amount,
        agent_name=agent_name,
        authorized_by=authorized_by,
        notes=notes,
    )
    client.payments.append(payment)
    client.total_paid = to_money(client.total_paid) + amount
    recompute(client)
    session.flush()
    return payment


def _next_receipt_number(session: Session, tenant_id: str, on: date) -> str:
    prefix = get_ledger_settings().receipt_prefix
    period = ReceiptNumber.period_prefix(prefix, on)
    sequence = next_sequence(session, Payment.receipt_number, Payment.tenant_id, tenant_id, period)
    return str(ReceiptNumber.build(prefix, on, sequence))


# -- Overdue ------------------------------------------------------------------


def monthly_installment(client: Client) -> Decimal | None:
    """``ceil(net_price / installment_months)``, or None without a plan."""
    if not client.installment_months:
        return None
    per_month = (net_price(client) / client.installment_months).to_integral_value(
        rounding=ROUND_CEILING
    )
    return to_money(per_month)


def overdue_clients(
    session: Session, tenant_id: str, *, today: date | None = None
) -> list[OverdueClient]:
    """Clients owing money whose next payment date has passed or who are marked overdue."""
    today = today or date.today()
    stmt = (
        select(Client)
        .where(
            Client.tenant_id == tenant_id,
            Client.balance > ZERO,
            Client.status != ClientStatus.CANCELLED.value,
            or_(Client.next_payment_date < today, Client.status == ClientStatus.OVERDUE.value),
        )
        .order_by(Client.next_payment_date)
    )
    return [
        OverdueClient(
            client_id=client.id,
            name=client.name,
            phone=client.phone,
            project_name=client.project_name,
            plot_number=client.plot_number,
            balance=client.balance,
            next_payment_date=client.next_payment_date,
            days_overdue=_days_overdue(client, today),
            installment_months=client.installment_months,
            monthly_installment=monthly_installment(client),
        )
        for client in session.scalars(stmt)
    ]


def refresh_overdue_statuses(
    session: Session, tenant_id: str, *, today: date | None = None
) -> tuple[int, int]:
    """Mark owing clients past their payment date overdue; restore the rest.

    Returns:
        Number of clients marked overdue and number returned to active.
    """
    today = today or date.today()
    candidates = session.scalars(
        select(Client).where(
            Client.tenant_id == tenant_id,
            Client.status.in_((ClientStatus.ACTIVE.value, ClientStatus.OVERDUE.value)),
            Client.balance > ZERO,
        )
    ).all()
    marked = restored = 0
    for client in candidates:
        due = client.next_payment_date is not None and client.next_payment_date < today
        if due and client.status == ClientStatus.ACTIVE.value:
            client.status = ClientStatus.OVERDUE.value
            marked += 1
        elif not due and client.status == ClientStatus.OVERDUE.value:
            client.status = ClientStatus.ACTIVE.value
            restored += 1
    session.commit()
    logger.info(
        "overdue_statuses_refreshed: tenant_id=%s marked=%d restored=%d",
        tenant_id,
        marked,
        restored,
    )
    return marked, restored


def _days_overdue(client: Client, today: date) -> int:
    if client.next_payment_date is None or client.next_payment_date >= today:
        return 0
    return (today - client.next_payment_date).days
