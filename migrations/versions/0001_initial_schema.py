"""Initial schema with tenant isolation

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-01

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from landdesk.infra.persistence.rls_helpers import (
    TENANT_SCOPED_TABLES,
    create_tenant_isolation_policy,
    disable_rls,
    drop_tenant_isolation_policy,
    enable_rls,
)

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.Numeric(14, 2)
ZERO = sa.text("0")


def _scoped(*extra: sa.Column, audited: bool = False) -> list[sa.Column]:
    columns = [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tenant_id", sa.String(63), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]
    if audited:
        columns.append(sa.Column("created_by", sa.String(64)))
    return columns + list(extra)


def _money(name: str, *, nullable: bool = False, default: bool = True) -> sa.Column:
    return sa.Column(
        name, MONEY, nullable=nullable, server_default=ZERO if default and not nullable else None
    )


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("slug", sa.String(63), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("activated_at", sa.DateTime(timezone=True)),
        sa.Column("suspended_at", sa.DateTime(timezone=True)),
        sa.Column("decommissioned_at", sa.DateTime(timezone=True)),
    )
    op.create_table(
        "tenant_users",
        *_scoped(
            sa.Column("user_id", sa.Uuid(), nullable=False, unique=True),
            sa.Column("email", sa.String(255)),
            sa.Column("role", sa.String(20), nullable=False, server_default="staff"),
            sa.Column("is_tenant_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        ),
    )
    op.create_table(
        "company_settings",
        *_scoped(
            sa.Column("company_name", sa.String(255), nullable=False),
            sa.Column("company_tagline", sa.String(255)),
            sa.Column("phone", sa.String(64)),
            sa.Column("email", sa.String(255)),
            sa.Column("email_secondary", sa.String(255)),
            sa.Column("website", sa.String(255)),
            sa.Column("social_handle", sa.String(255)),
            sa.Column("po_box", sa.String(255)),
            sa.Column("address", sa.Text()),
            sa.Column("logo_url", sa.String(1024)),
            sa.Column("receipt_footer_message", sa.Text()),
            sa.Column("receipt_watermark", sa.String(255)),
        ),
        sa.UniqueConstraint("tenant_id", name="uq_company_settings_tenant"),
    )

    # -- Inventory ------------------------------------------------------------
    op.create_table(
        "projects",
        *_scoped(
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("location", sa.String(255), nullable=False, server_default=""),
            sa.Column("capacity", sa.Integer(), nullable=False, server_default=ZERO),
            sa.Column("total_plots", sa.Integer(), nullable=False, server_default=ZERO),
            _money("buying_price"),
            sa.Column("description", sa.Text()),
        ),
        sa.UniqueConstraint("tenant_id", "name", name="uq_projects_tenant_name"),
    )
    op.create_table(
        "plots",
        *_scoped(
            sa.Column(
                "project_id",
                sa.Uuid(),
                sa.ForeignKey("projects.id", ondelete="CASCADE"),
                nullable=False,
                index=True,
            ),
            sa.Column("plot_number", sa.String(64), nullable=False),
            sa.Column("size", sa.String(64), nullable=False, server_default=""),
            _money("price"),
            sa.Column(
                "status", sa.String(20), nullable=False, server_default="available", index=True
            ),
            sa.Column("client_id", sa.Uuid(), index=True),
            sa.Column("sold_at", sa.DateTime(timezone=True)),
            sa.Column("notes", sa.Text()),
        ),
        sa.UniqueConstraint("project_id", "plot_number", name="uq_plots_project_number"),
    )

    # -- Sales ----------------------------------------------------------------
    op.create_table(
        "clients",
        *_scoped(
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("phone", sa.String(32), index=True),
            sa.Column("project_name", sa.String(255), nullable=False, server_default=""),
            sa.Column("plot_number", sa.String(255), nullable=False, server_default=""),
            _money("unit_price"),
            sa.Column("number_of_plots", sa.Integer(), nullable=False, server_default="1"),
            _money("total_price"),
            _money("discount"),
            _money("total_paid"),
            _money("balance"),
            _money("percent_paid"),
            sa.Column("sales_agent", sa.String(255), index=True),
            _money("commission"),
            _money("commission_received"),
            _money("commission_balance"),
            sa.Column("payment_period", sa.String(64)),
            sa.Column("installment_months", sa.Integer()),
            sa.Column("payment_type", sa.String(32)),
            sa.Column("initial_payment_method", sa.String(32)),
            sa.Column("sale_date", sa.Date()),
            sa.Column("completion_date", sa.Date()),
            sa.Column("next_payment_date", sa.Date(), index=True),
            sa.Column("notes", sa.Text()),
            sa.Column("status", sa.String(20), nullable=False, server_default="active", index=True),
            audited=True,
        ),
    )
    op.create_table(
        "payments",
        *_scoped(
            sa.Column(
                "client_id",
                sa.Uuid(),
                sa.ForeignKey("clients.id", ondelete="CASCADE"),
                nullable=False,
                index=True,
            ),
            _money("amount", default=False),
            sa.Column("payment_date", sa.Date(), nullable=False, index=True),
            sa.Column("payment_method", sa.String(32), nullable=False, server_default="cash"),
            sa.Column("receipt_number", sa.String(32), nullable=False),
            _money("previous_balance", default=False),
            _money("new_balance", default=False),
            sa.Column("agent_name", sa.String(255)),
            sa.Column("authorized_by", sa.String(255)),
            sa.Column("notes", sa.Text()),
            audited=True,
        ),
        sa.UniqueConstraint("tenant_id", "receipt_number", name="uq_payments_tenant_receipt"),
    )

    # -- Expenses and cancellations -----------------------------------------
    op.create_table(
        "expenses",
        *_scoped(
            sa.Column("expense_date", sa.Date(), nullable=False, index=True),
            sa.Column("category", sa.String(64), nullable=False, index=True),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            _money("amount", default=False),
            sa.Column("payment_method", sa.String(32), nullable=False, server_default="cash"),
            sa.Column("recipient", sa.String(255)),
            sa.Column("reference_number", sa.String(64), nullable=False),
            sa.Column("agent_name", sa.String(255), index=True),
            sa.Column(
                "client_id",
                sa.Uuid(),
                sa.ForeignKey("clients.id", ondelete="SET NULL"),
                index=True,
            ),
            sa.Column(
                "is_commission_payout", sa.Boolean(), nullable=False, server_default=sa.false()
            ),
            sa.Column("notes", sa.Text()),
            audited=True,
        ),
        sa.UniqueConstraint("tenant_id", "reference_number", name="uq_expenses_tenant_reference"),
    )
    op.create_table(
        "cancelled_sales",
        *_scoped(
            sa.Column("client_id", sa.Uuid(), nullable=False, index=True),
            sa.Column("client_name", sa.String(255), nullable=False),
            sa.Column("client_phone", sa.String(32)),
            sa.Column("project_name", sa.String(255), nullable=False, server_default=""),
            sa.Column("plot_number", sa.String(255), nullable=False, server_default=""),
            sa.Column("original_sale_date", sa.Date()),
            _money("total_price"),
            _money("total_paid"),
            sa.Column("cancellation_date", sa.Date(), nullable=False, index=True),
            sa.Column("cancellation_reason", sa.Text()),
            sa.Column("notes", sa.Text()),
            sa.Column("cancelled_by", sa.String(64)),
            _money("refund_amount"),
            sa.Column("refund_status", sa.String(20), nullable=False, server_default="pending"),
            _money("cancellation_fee"),
            _money("net_refund"),
        ),
    )

    # -- Payroll --------------------------------------------------------------
    op.create_table(
        "employees",
        *_scoped(
            sa.Column("employee_id", sa.String(16), nullable=False),
            sa.Column("full_name", sa.String(255), nullable=False),
            sa.Column("national_id", sa.String(16), nullable=False),
            sa.Column("kra_pin", sa.String(16), nullable=False),
            sa.Column("nssf_number", sa.String(16)),
            sa.Column("sha_number", sa.String(32)),
            sa.Column("job_title", sa.String(255), nullable=False, server_default=""),
            sa.Column(
                "employment_type", sa.String(20), nullable=False, server_default="permanent"
            ),
            _money("basic_salary"),
            _money("housing_allowance"),
            _money("transport_allowance"),
            _money("other_taxable_allowances"),
            _money("non_taxable_allowances"),
            sa.Column(
                "is_active", sa.Boolean(), nullable=False, server_default=sa.true(), index=True
            ),
            sa.Column("hire_date", sa.Date()),
            sa.Column("bank_name", sa.String(255)),
            sa.Column("bank_account", sa.String(64)),
        ),
        sa.UniqueConstraint("tenant_id", "employee_id", name="uq_employees_tenant_number"),
    )
    op.create_table(
        "employee_deductions",
        *_scoped(
            sa.Column(
                "employee_id",
                sa.Uuid(),
                sa.ForeignKey("employees.id", ondelete="CASCADE"),
                nullable=False,
                index=True,
            ),
            sa.Column("deduction_name", sa.String(255), nullable=False),
            sa.Column("deduction_type", sa.String(20), nullable=False),
            _money("amount", default=False),
            sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("start_date", sa.Date()),
            sa.Column("end_date", sa.Date()),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        ),
    )
    op.create_table(
        "statutory_rates",
        *_scoped(
            sa.Column("rate_type", sa.String(32), nullable=False, index=True),
            sa.Column("rate_name", sa.String(255), nullable=False),
            _money("min_amount"),
            _money("max_amount", nullable=True),
            _money("rate_value", default=False),
            sa.Column("effective_from", sa.Date(), nullable=False),
            sa.Column("effective_to", sa.Date()),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        ),
    )
    op.create_table(
        "payroll_records",
        *_scoped(
            sa.Column(
                "employee_id",
                sa.Uuid(),
                sa.ForeignKey("employees.id", ondelete="CASCADE"),
                nullable=False,
                index=True,
            ),
            sa.Column("pay_period_month", sa.Integer(), nullable=False),
            sa.Column("pay_period_year", sa.Integer(), nullable=False, index=True),
            _money("basic_salary", default=False),
            _money("housing_allowance"),
            _money("transport_allowance"),
            _money("other_taxable_allowances"),
            _money("non_taxable_allowances"),
            _money("overtime_pay"),
            _money("bonus"),
            _money("gross_pay", default=False),
            _money("taxable_income", default=False),
            _money("paye", default=False),
            _money("nssf_employee", default=False),
            _money("nssf_employer", default=False),
            _money("sha_deduction", default=False),
            _money("housing_levy_employee", default=False),
            _money("housing_levy_employer", default=False),
            _money("other_deductions"),
            _money("total_deductions", default=False),
            _money("net_pay", default=False),
            _money("personal_relief", default=False),
            _money("insurance_relief"),
            sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("approved_by", sa.String(64)),
            sa.Column("approved_at", sa.DateTime(timezone=True)),
            audited=True,
        ),
        sa.UniqueConstraint(
            "employee_id",
            "pay_period_month",
            "pay_period_year",
            name="uq_payroll_records_employee_period",
        ),
    )

    for table in TENANT_SCOPED_TABLES:
        enable_rls(table, force=True)
        create_tenant_isolation_policy(table)


def downgrade() -> None:
    for table in reversed(TENANT_SCOPED_TABLES):
        drop_tenant_isolation_policy(table)
        disable_rls(table)
    for table in (
        "payroll_records",
        "statutory_rates",
        "employee_deductions",
        "employees",
        "cancelled_sales",
        "expenses",
        "payments",
        "clients",
        "plots",
        "projects",
        "company_settings",
        "tenant_users",
        "tenants",
    ):
        op.drop_table(table)
