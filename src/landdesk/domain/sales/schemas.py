"""Request and response models for clients and payments."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003
from decimal import Decimal
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from landdesk.domain.sales.models import ClientStatus
from landdesk.foundation.domain import PartialUpdate

_ZERO = Decimal("0")


# -- Clients ------------------------------------------------------------------


class ClientCreate(BaseModel):
    """A new buyer.

    When ``plot_id`` is given the plot is sold to the client in the same
    transaction and ``project_name`` / ``plot_number`` are taken from it.
    """

    name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    project_name: str = ""
    plot_number: str = ""
    plot_id: UUID | None = None

    unit_price: Decimal = Field(default=_ZERO, ge=0)
    number_of_plots: int = Field(default=1, ge=1)
    total_price: Decimal | None = Field(default=None, ge=0)
    discount: Decimal = Field(default=_ZERO, ge=0)

    sales_agent: str | None = None
    commission: Decimal = Field(default=_ZERO, ge=0)

    payment_period: str | None = None
    installment_months: int | None = Field(default=None, ge=1)
    payment_type: str | None = None
    initial_payment_method: str | None = None
    initial_payment: Decimal = Field(default=_ZERO, ge=0)
    sale_date: date | None = None
    completion_date: date | None = None
    next_payment_date: date | None = None
    notes: str | None = None


class ClientUpdate(PartialUpdate):
    non_nullable = frozenset(
        {
            "name",
            "project_name",
            "plot_number",
            "unit_price",
            "number_of_plots",
            "total_price",
            "discount",
            "commission",
        }
    )

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    project_name: str | None = None
    plot_number: str | None = None
    unit_price: Decimal | None = Field(default=None, ge=0)
    number_of_plots: int | None = Field(default=None, ge=1)
    total_price: Decimal | None = Field(default=None, ge=0)
    discount: Decimal | None = Field(default=None, ge=0)
    sales_agent: str | None = None
    commission: Decimal | None = Field(default=None, ge=0)
    payment_period: str | None = None
    installment_months: int | None = Field(default=None, ge=1)
    payment_type: str | None = None
    sale_date: date | None = None
    completion_date: date | None = None
    next_payment_date: date | None = None
    notes: str | None = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    phone: str | None
    project_name: str
    plot_number: str
    unit_price: Decimal
    number_of_plots: int
    total_price: Decimal
    discount: Decimal
    total_paid: Decimal
    balance: Decimal
    percent_paid: Decimal
    sales_agent: str | None
    commission: Decimal
    commission_received: Decimal
    commission_balance: Decimal
    payment_period: str | None
    installment_months: int | None
    payment_type: str | None
    initial_payment_method: str | None
    sale_date: date | None
    completion_date: date | None
    next_payment_date: date | None
    notes: str | None
    status: ClientStatus
    created_by: str | None
    created_at: datetime
    updated_at: datetime


# -- Payments -----------------------------------------------------------------


class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_date: date | None = None
    payment_method: str = "cash"
    agent_name: str | None = None
    authorized_by: str | None = None
    notes: str | None = None
    next_payment_date: date | None = None


class PaymentUpdate(PartialUpdate):
    non_nullable = frozenset({"amount", "payment_date", "payment_method"})

    amount: Decimal | None = Field(default=None, gt=0)
    payment_date: date | None = None
    payment_method: str | None = None
    agent_name: str | None = None
    authorized_by: str | None = None
    notes: str | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    amount: Decimal
    payment_date: date
    payment_method: str
    receipt_number: str
    previous_balance: Decimal
    new_balance: Decimal
    agent_name: str | None
    authorized_by: str | None
    notes: str | None
    created_by: str | None
    created_at: datetime


class PaymentRegisterEntry(PaymentResponse):
    client_name: str
    project_name: str
    plot_number: str


class PaymentRegister(BaseModel):
    """Tenant-wide payments matching a search, newest first, with totals."""

    payments: list[PaymentRegisterEntry]
    count: int
    total_amount: Decimal
    by_method: dict[str, Decimal]


class PaymentHistory(BaseModel):
    """A client's payments in date order with the figures a statement prints."""

    client_id: UUID
    client_name: str
    client_phone: str | None
    project_name: str
    plot_number: str
    total_price: Decimal
    discount: Decimal
    net_price: Decimal
    total_paid: Decimal
    balance: Decimal
    percent_paid: Decimal
    payments: list[PaymentResponse]


class Receipt(BaseModel):
    """Data printed on a payment receipt."""

    receipt_number: str
    payment_date: date
    client_name: str
    client_phone: str | None
    project_name: str
    plot_number: str
    total_price: Decimal
    discount: Decimal
    discounted_price: Decimal
    amount: Decimal
    payment_method: str
    previous_balance: Decimal
    remaining_balance: Decimal
    total_paid: Decimal
    agent_name: str | None
    authorized_by: str | None


# -- Overdue ------------------------------------------------------------------


class OverdueClient(BaseModel):
    client_id: UUID
    name: str
    phone: str | None
    project_name: str
    plot_number: str
    balance: Decimal
    next_payment_date: date | None
    days_overdue: int
    installment_months: int | None
    monthly_installment: Decimal | None


class OverdueRefreshResult(BaseModel):
    marked_overdue: int
    restored_active: int
