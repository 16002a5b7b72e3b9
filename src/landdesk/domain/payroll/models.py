"""Employees, their deductions, statutory rates and monthly payroll records."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from landdesk.foundation.domain import ZERO
from landdesk.infra.persistence.base import AuditedMixin, Base, TenantScopedMixin


class EmploymentType(StrEnum):
    PERMANENT = "permanent"
    CONTRACT = "contract"
    CASUAL = "casual"


class DeductionType(StrEnum):
    SACCO = "sacco"
    LOAN = "loan"
    ADVANCE = "advance"
    INSURANCE = "insurance"
    OTHER = "other"


class Employee(TenantScopedMixin, Base):
    __tablename__ = "employees"
    __table_args__ = (
        UniqueConstraint("tenant_id", "employee_id", name="uq_employees_tenant_number"),
    )

    employee_id: Mapped[str] = mapped_column(String(16), nullable=False)  # EMP-YYNNNN
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(String(16), nullable=False)
    kra_pin: Mapped[str] = mapped_column(String(16), nullable=False)
    nssf_number: Mapped[str | None] = mapped_column(String(16))
    sha_number: Mapped[str | None] = mapped_column(String(32))
    job_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    employment_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EmploymentType.PERMANENT.value
    )
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    housing_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    transport_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    other_taxable_allowances: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    non_taxable_allowances: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    hire_date: Mapped[date | None] = mapped_column(Date)
    bank_name: Mapped[str | None] = mapped_column(String(255))
    bank_account: Mapped[str | None] = mapped_column(String(64))

    deductions: Mapped[list[EmployeeDeduction]] = relationship(
        back_populates="employee", cascade="all, delete-orphan"
    )


class EmployeeDeduction(TenantScopedMixin, Base):
    """A voluntary deduction (SACCO, loan, advance, insurance premium)."""

    __tablename__ = "employee_deductions"

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    deduction_name: Mapped[str] = mapped_column(String(255), nullable=False)
    deduction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    employee: Mapped[Employee] = relationship(back_populates="deductions")


class StatutoryRate(TenantScopedMixin, Base):
    """A published statutory rate kept for reference on payslips and reports."""

    __tablename__ = "statutory_rates"

    rate_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    rate_name: Mapped[str] = mapped_column(String(255), nullable=False)
    min_amount: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    max_amount: Mapped[Decimal | None] = mapped_column()
    rate_value: Mapped[Decimal] = mapped_column(nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class PayrollRecord(TenantScopedMixin, AuditedMixin, Base):
    """One employee's pay for one month. Approval locks it."""

    __tablename__ = "payroll_records"
    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "pay_period_month",
            "pay_period_year",
            name="uq_payroll_records_employee_period",
        ),
    )

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pay_period_month: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_period_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    basic_salary: Mapped[Decimal] = mapped_column(nullable=False)
    housing_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    transport_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    other_taxable_allowances: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    non_taxable_allowances: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    overtime_pay: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    bonus: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    gross_pay: Mapped[Decimal] = mapped_column(nullable=False)
    taxable_income: Mapped[Decimal] = mapped_column(nullable=False)
    paye: Mapped[Decimal] = mapped_column(nullable=False)
    nssf_employee: Mapped[Decimal] = mapped_column(nullable=False)
    nssf_employer: Mapped[Decimal] = mapped_column(nullable=False)
    sha_deduction: Mapped[Decimal] = mapped_column(nullable=False)
    housing_levy_employee: Mapped[Decimal] = mapped_column(nullable=False)
    housing_levy_employer: Mapped[Decimal] = mapped_column(nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    total_deductions: Mapped[Decimal] = mapped_column(nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(nullable=False)
    personal_relief: Mapped[Decimal] = mapped_column(nullable=False)
    insurance_relief: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    approved_by: Mapped[str | None] = mapped_column(String(64))
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    employee: Mapped[Employee] = relationship()
