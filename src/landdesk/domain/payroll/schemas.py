"""Request and response models for payroll."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003
from decimal import Decimal
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator

from landdesk.domain.payroll.models import DeductionType, EmploymentType
from landdesk.domain.payroll.validators import (
    is_valid_kra_pin,
    is_valid_national_id,
    is_valid_nssf_number,
)
from landdesk.foundation.domain import PartialUpdate

_ZERO = Decimal("0")


# -- Employees ----------------------------------------------------------------


class _EmployeeIdentifiers(BaseModel):
    @field_validator("kra_pin", check_fields=False)
    @classmethod
    def validate_kra_pin(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not is_valid_kra_pin(v):
            msg = "KRA PIN must be A or P, nine digits and a letter (e.g. A123456789B)"
            raise ValueError(msg)
        return v.strip().upper()

    @field_validator("national_id", check_fields=False)
    @classmethod
    def validate_national_id(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_national_id(v):
            msg = "National ID must be 7 or 8 digits"
            raise ValueError(msg)
        return v.strip() if v else v

    @field_validator("nssf_number", check_fields=False)
    @classmethod
    def validate_nssf_number(cls, v: str | None) -> str | None:
        if v and not is_valid_nssf_number(v):
            msg = "NSSF number must be 9 or 10 digits"
            raise ValueError(msg)
        return v.strip() if v else None


class EmployeeCreate(_EmployeeIdentifiers):
    full_name: str = Field(..., min_length=1, max_length=255)
    national_id: str
    kra_pin: str
    nssf_number: str | None = None
    sha_number: str | None = None
    job_title: str = ""
    employment_type: EmploymentType = EmploymentType.PERMANENT
    basic_salary: Decimal = Field(..., ge=0)
    housing_allowance: Decimal = Field(default=_ZERO, ge=0)
    transport_allowance: Decimal = Field(default=_ZERO, ge=0)
    other_taxable_allowances: Decimal = Field(default=_ZERO, ge=0)
    non_taxable_allowances: Decimal = Field(default=_ZERO, ge=0)
    hire_date: date | None = None
    bank_name: str | None = None
    bank_account: str | None = None


class EmployeeUpdate(PartialUpdate, _EmployeeIdentifiers):
    non_nullable = frozenset(
        {
            "full_name",
            "national_id",
            "kra_pin",
            "job_title",
            "employment_type",
            "basic_salary",
            "housing_allowance",
            "transport_allowance",
            "other_taxable_allowances",
            "non_taxable_allowances",
            "is_active",
        }
    )

    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    national_id: str | None = None
    kra_pin: str | None = None
    nssf_number: str | None = None
    sha_number: str | None = None
    job_title: str | None = None
    employment_type: EmploymentType | None = None
    basic_salary: Decimal | None = Field(default=None, ge=0)
    housing_allowance: Decimal | None = Field(default=None, ge=0)
    transport_allowance: Decimal | None = Field(default=None, ge=0)
    other_taxable_allowances: Decimal | None = Field(default=None, ge=0)
    non_taxable_allowances: Decimal | None = Field(default=None, ge=0)
    is_active: bool | None = None
    hire_date: date | None = None
    bank_name: str | None = None
    bank_account: str | None = None


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: str
    full_name: str
    national_id: str
    kra_pin: str
    nssf_number: str | None
    sha_number: str | None
    job_title: str
    employment_type: EmploymentType
    basic_salary: Decimal
    housing_allowance: Decimal
    transport_allowance: Decimal
    other_taxable_allowances: Decimal
    non_taxable_allowances: Decimal
    is_active: bool
    hire_date: date | None
    bank_name: str | None
    bank_account: str | None


# -- Deductions and statutory rates ---------------------------------------------


class DeductionCreate(BaseModel):
    deduction_name: str = Field(..., min_length=1, max_length=255)
    deduction_type: DeductionType
    amount: Decimal = Field(..., gt=0)
    is_recurring: bool = True
    start_date: date | None = None
    end_date: date | None = None


class DeductionUpdate(PartialUpdate):
    non_nullable = frozenset(
        {"deduction_name", "deduction_type", "amount", "is_recurring", "is_active"}
    )

    deduction_name: str | None = Field(default=None, min_length=1, max_length=255)
    deduction_type: DeductionType | None = None
    amount: Decimal | None = Field(default=None, gt=0)
    is_recurring: bool | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class DeductionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    deduction_name: str
    deduction_type: DeductionType
    amount: Decimal
    is_recurring: bool
    start_date: date | None
    end_date: date | None
    is_active: bool


class StatutoryRateCreate(BaseModel):
    rate_type: str = Field(..., min_length=1, max_length=32)
    rate_name: str = Field(..., min_length=1, max_length=255)
    min_amount: Decimal = Field(default=_ZERO, ge=0)
    max_amount: Decimal | None = Field(default=None, ge=0)
    rate_value: Decimal
    effective_from: date
    effective_to: date | None = None


class StatutoryRateUpdate(PartialUpdate):
    non_nullable = frozenset(
        {"rate_name", "min_amount", "rate_value", "effective_from", "is_active"}
    )

    rate_name: str | None = Field(default=None, min_length=1, max_length=255)
    min_amount: Decimal | None = Field(default=None, ge=0)
    max_amount: Decimal | None = Field(default=None, ge=0)
    rate_value: Decimal | None = None
    effective_from: date | None = None
    effective_to: date | None = None
    is_active: bool | None = None


class StatutoryRateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    rate_type: str
    rate_name: str
    min_amount: Decimal
    max_amount: Decimal | None
    rate_value: Decimal
    effective_from: date
    effective_to: date | None
    is_active: bool


# -- Payroll runs ---------------------------------------------------------------


class PayAdjustment(BaseModel):
    overtime_pay: Decimal = Field(default=_ZERO, ge=0)
    bonus: Decimal = Field(default=_ZERO, ge=0)


class PayrollRunRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    adjustments: dict[UUID, PayAdjustment] = Field(
        default_factory=dict,
        description="Overtime and bonus per employee (keyed by employee UUID)",
    )


class PayrollRecordUpdate(PartialUpdate):
    non_nullable = frozenset({"overtime_pay", "bonus", "other_deductions"})

    overtime_pay: Decimal | None = Field(default=None, ge=0)
    bonus: Decimal | None = Field(default=None, ge=0)
    other_deductions: Decimal | None = Field(default=None, ge=0)


class PayrollLine(BaseModel):
    """A computed payslip, stored or not."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    pay_period_month: int
    pay_period_year: int
    basic_salary: Decimal
    housing_allowance: Decimal
    transport_allowance: Decimal
    other_taxable_allowances: Decimal
    non_taxable_allowances: Decimal
    overtime_pay: Decimal
    bonus: Decimal
    gross_pay: Decimal
    taxable_income: Decimal
    paye: Decimal
    nssf_employee: Decimal
    nssf_employer: Decimal
    sha_deduction: Decimal
    housing_levy_employee: Decimal
    housing_levy_employer: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    personal_relief: Decimal
    insurance_relief: Decimal


class PayrollRecordResponse(PayrollLine):
    id: UUID
    is_locked: bool
    approved_by: str | None
    approved_at: datetime | None
    created_by: str | None
    created_at: datetime


class PayrollRunResult(BaseModel):
    created: list[PayrollRecordResponse]
    skipped: list[UUID]


class P9Totals(BaseModel):
    gross_pay: Decimal
    taxable_income: Decimal
    paye: Decimal
    personal_relief: Decimal
    insurance_relief: Decimal
    nssf_employee: Decimal


class P9Form(BaseModel):
    """Annual tax deduction card for one employee."""

    employee: EmployeeResponse
    year: int
    monthly_records: list[PayrollRecordResponse]
    totals: P9Totals
