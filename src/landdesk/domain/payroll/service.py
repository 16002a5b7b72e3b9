"""Employees, deductions, statutory rates and monthly payroll runs.

A payroll run stores one record per active employee and period. Records
stay editable (and are recomputed on every edit) until approved; an
approved record is locked and raises :class:`RecordLockedError` on any
further change.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select

from landdesk.domain.payroll.calculator import (
    PayrollInput,
    PayrollResult,
    calculate_payroll,
    insurance_relief_basis,
)
from landdesk.domain.payroll.models import (
    DeductionType,
    Employee,
    EmployeeDeduction,
    PayrollRecord,
    StatutoryRate,
)
from landdesk.domain.payroll.schemas import (
    EmployeeResponse,
    P9Form,
    P9Totals,
    PayAdjustment,
    PayrollLine,
    PayrollRecordResponse,
)
from landdesk.foundation.application.context import get_current_actor
from landdesk.foundation.domain import (
    ZERO,
    ConflictError,
    EmployeeNumber,
    NotFoundError,
    RecordLockedError,
    money_sum,
    to_money,
)
from landdesk.infra.observability.instrumentation import traced_operation
from landdesk.infra.persistence.base import utcnow
from landdesk.infra.persistence.numbering import get_ledger_settings, next_sequence

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

    from landdesk.domain.payroll.schemas import (
        DeductionCreate,
        DeductionUpdate,
        EmployeeCreate,
        EmployeeUpdate,
        PayrollRecordUpdate,
        StatutoryRateCreate,
        StatutoryRateUpdate,
    )

logger = logging.getLogger(__name__)


# -- Employees ----------------------------------------------------------------


def get_employee(session: Session, tenant_id: str, employee_id: UUID) -> Employee:
    employee = session.scalar(
        select(Employee).where(Employee.id == employee_id, Employee.tenant_id == tenant_id)
    )
    if employee is None:
        raise NotFoundError("Employee", employee_id)
    return employee


def list_employees(
    session: Session, tenant_id: str, *, active_only: bool = False
) -> list[Employee]:
    stmt = select(Employee).where(Employee.tenant_id == tenant_id)
    if active_only:
        stmt = stmt.where(Employee.is_active.is_(True))
    return list(session.scalars(stmt.order_by(Employee.employee_id)))


def create_employee(
    session: Session, tenant_id: str, data: EmployeeCreate, *, today: date | None = None
) -> Employee:
    """Create an employee with the next ``EMP-YYNNNN`` number of the hire year."""
    _ensure_unique_kra_pin(session, tenant_id, data.kra_pin)
    on = data.hire_date or today or date.today()
    prefix = get_ledger_settings().employee_prefix
    sequence = next_sequence(
        session,
        Employee.employee_id,
        Employee.tenant_id,
        tenant_id,
        EmployeeNumber.period_prefix(prefix, on),
    )
    employee = Employee(
        tenant_id=tenant_id,
        employee_id=str(EmployeeNumber.build(prefix, on, sequence)),
        **data.model_dump(),
    )
    session.add(employee)
    session.commit()
    logger.info("employee_created: employee_id=%s", employee.employee_id)
    return employee


def update_employee(
    session: Session, tenant_id: str, employee_id: UUID, data: EmployeeUpdate
) -> Employee:
    employee = get_employee(session, tenant_id, employee_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("kra_pin") and changes["kra_pin"] != employee.kra_pin:
        _ensure_unique_kra_pin(session, tenant_id, changes["kra_pin"])
    for field, value in changes.items():
        setattr(employee, field, value)
    session.commit()
    return employee


def deactivate_employee(session: Session, tenant_id: str, employee_id: UUID) -> Employee:
    """Exclude an employee from future runs; their records are kept."""
    employee = get_employee(session, tenant_id, employee_id)
    employee.is_active = False
    session.commit()
    logger.info("employee_deactivated: employee_id=%s", employee.employee_id)
    return employee


def _ensure_unique_kra_pin(session: Session, tenant_id: str, kra_pin: str) -> None:
    taken = session.scalar(
        select(Employee.id).where(Employee.tenant_id == tenant_id, Employee.kra_pin == kra_pin)
    )
    if taken is not None:
        raise ConflictError("An employee with this KRA PIN already exists", kra_pin=kra_pin)


# -- Deductions ---------------------------------------------------------------


def list_deductions(session: Session, tenant_id: str, employee_id: UUID) -> list[EmployeeDeduction]:
    employee = get_employee(session, tenant_id, employee_id)
    return list(
        session.scalars(
            select(EmployeeDeduction)
            .where(EmployeeDeduction.employee_id == employee.id)
            .order_by(EmployeeDeduction.created_at)
        )
    )


def add_deduction(
    session: Session, tenant_id: str, employee_id: UUID, data: DeductionCreate
) -> EmployeeDeduction:
    employee = get_employee(session, tenant_id, employee_id)
    deduction = EmployeeDeduction(tenant_id=tenant_id, **data.model_dump())
    employee.deductions.append(deduction)
    session.commit()
    return deduction


def update_deduction(
    session: Session, tenant_id: str, deduction_id: UUID, data: DeductionUpdate
) -> EmployeeDeduction:
    deduction = _get_deduction(session, tenant_id, deduction_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(deduction, field, value)
    session.commit()
    return deduction


def delete_deduction(session: Session, tenant_id: str, deduction_id: UUID) -> None:
    session.delete(_get_deduction(session, tenant_id, deduction_id))
    session.commit()


def _get_deduction(session: Session, tenant_id: str, deduction_id: UUID) -> EmployeeDeduction:
    deduction = session.scalar(
        select(EmployeeDeduction).where(
            EmployeeDeduction.id == deduction_id,
            EmployeeDeduction.tenant_id == tenant_id,
        )
    )
    if deduction is None:
        raise NotFoundError("EmployeeDeduction", deduction_id)
    return deduction


def deductions_for_period(
    deductions: list[EmployeeDeduction], month: int, year: int
) -> list[EmployeeDeduction]:
    """Active deductions that apply to the pay period.

    Recurring deductions apply while the period overlaps their start and
    end dates. A one-off deduction applies in the month it starts, or in
    every period when it has no start date.
    """
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    applicable = []
    for d in deductions:
        if not d.is_active:
            continue
        if d.is_recurring:
            if d.start_date is not None and d.start_date > last:
                continue
            if d.end_date is not None and d.end_date < first:
                continue
        elif d.start_date is not None and not first <= d.start_date <= last:
            continue
        applicable.append(d)
    return applicable


# -- Statutory rates ----------------------------------------------------------


def list_statutory_rates(
    session: Session, tenant_id: str, *, rate_type: str | None = None
) -> list[StatutoryRate]:
    stmt = select(StatutoryRate).where(StatutoryRate.tenant_id == tenant_id)
    if rate_type:
        stmt = stmt.where(StatutoryRate.rate_type == rate_type)
    return list(session.scalars(stmt.order_by(StatutoryRate.rate_type, StatutoryRate.min_amount)))


def create_statutory_rate(
    session: Session, tenant_id: str, data: StatutoryRateCreate
) -> StatutoryRate:
    rate = StatutoryRate(tenant_id=tenant_id, **data.model_dump())
    session.add(rate)
    session.commit()
    return rate


def update_statutory_rate(
    session: Session, tenant_id: str, rate_id: UUID, data: StatutoryRateUpdate
) -> StatutoryRate:
    rate = _get_rate(session, tenant_id, rate_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(rate, field, value)
    session.commit()
    return rate


def delete_statutory_rate(session: Session, tenant_id: str, rate_id: UUID) -> None:
    session.delete(_get_rate(session, tenant_id, rate_id))
    session.commit()


def _get_rate(session: Session, tenant_id: str, rate_id: UUID) -> StatutoryRate:
    rate = session.scalar(
        select(StatutoryRate).where(
            StatutoryRate.id == rate_id, StatutoryRate.tenant_id == tenant_id
        )
    )
    if rate is None:
        raise NotFoundError("StatutoryRate", rate_id)
    return rate


# -- Payroll runs -------------------------------------------------------------


def compute_line(
    employee: Employee,
    month: int,
    year: int,
    adjustment: PayAdjustment | None = None,
) -> tuple[PayrollInput, PayrollResult]:
    """Compute an employee's pay for the period from salary and deductions."""
    adjustment = adjustment or PayAdjustment()
    applicable = deductions_for_period(list(employee.deductions), month, year)
    premiums = money_sum(
        d.amount for d in applicable if d.deduction_type == DeductionType.INSURANCE.value
    )
    data = PayrollInput(
        basic_salary=to_money(employee.basic_salary),
        housing_allowance=to_money(employee.housing_allowance),
        transport_allowance=to_money(employee.transport_allowance),
        other_taxable_allowances=to_money(employee.other_taxable_allowances),
        non_taxable_allowances=to_money(employee.non_taxable_allowances),
        overtime_pay=to_money(adjustment.overtime_pay),
        bonus=to_money(adjustment.bonus),
        other_deductions=money_sum(d.amount for d in applicable),
        insurance_relief=insurance_relief_basis(premiums),
    )
    return data, calculate_payroll(data)


def preview_payroll(
    session: Session,
    tenant_id: str,
    month: int,
    year: int,
    adjustments: dict[UUID, PayAdjustment] | None = None,
) -> list[PayrollLine]:
    """Compute the run for every active employee without storing anything."""
    adjustments = adjustments or {}
    lines = []
    for employee in list_employees(session, tenant_id, active_only=True):
        data, result = compute_line(employee, month, year, adjustments.get(employee.id))
        lines.append(_line(employee.id, month, year, data, result))
    return lines


@traced_operation("payroll.run_payroll")
def run_payroll(
    session: Session,
    tenant_id: str,
    month: int,
    year: int,
    adjustments: dict[UUID, PayAdjustment] | None = None,
) -> tuple[list[PayrollRecord], list[UUID]]:
    """Store one record per active employee for the period.

    Employees who already have a record for the period are skipped.

    Returns:
        The created records and the ids of the skipped employees.
    """
    adjustments = adjustments or {}
    existing = set(
        session.scalars(
            select(PayrollRecord.employee_id).where(
                PayrollRecord.tenant_id == tenant_id,
                PayrollRecord.pay_period_month == month,
                PayrollRecord.pay_period_year == year,
            )
        )
    )
    created: list[PayrollRecord] = []
    skipped: list[UUID] = []
    for employee in list_employees(session, tenant_id, active_only=True):
        if employee.id in existing:
            skipped.append(employee.id)
            continue
        data, result = compute_line(employee, month, year, adjustments.get(employee.id))
        record = PayrollRecord(
            tenant_id=tenant_id,
            **_line(employee.id, month, year, data, result).model_dump(),
        )
        session.add(record)
        created.append(record)
    session.commit()
    logger.info(
        "payroll_run: tenant_id=%s period=%02d/%d created=%d skipped=%d",
        tenant_id,
        month,
        year,
        len(created),
        len(skipped),
    )
    return created, skipped


def get_record(session: Session, tenant_id: str, record_id: UUID) -> PayrollRecord:
    record = session.scalar(
        select(PayrollRecord).where(
            PayrollRecord.id == record_id, PayrollRecord.tenant_id == tenant_id
        )
    )
    if record is None:
        raise NotFoundError("PayrollRecord", record_id)
    return record


def list_records(
    session: Session,
    tenant_id: str,
    *,
    month: int | None = None,
    year: int | None = None,
    employee_id: UUID | None = None,
) -> list[PayrollRecord]:
    stmt = select(PayrollRecord).where(PayrollRecord.tenant_id == tenant_id)
    if month is not None:
        stmt = stmt.where(PayrollRecord.pay_period_month == month)
    if year is not None:
        stmt = stmt.where(PayrollRecord.pay_period_year == year)
    if employee_id is not None:
        stmt = stmt.where(PayrollRecord.employee_id == employee_id)
    return list(
        session.scalars(
            stmt.order_by(PayrollRecord.pay_period_year, PayrollRecord.pay_period_month)
        )
    )


def update_record(
    session: Session, tenant_id: str, record_id: UUID, data: PayrollRecordUpdate
) -> PayrollRecord:
    """Change overtime, bonus or other deductions and recompute the record.

    Raises:
        RecordLockedError: If the record has been approved.
    """
    record = _unlocked(session, tenant_id, record_id)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(record, field, to_money(value))
    result = calculate_payroll(
        PayrollInput(
            basic_salary=record.basic_salary,
            housing_allowance=record.housing_allowance,
            transport_allowance=record.transport_allowance,
            other_taxable_allowances=record.other_taxable_allowances,
            non_taxable_allowances=record.non_taxable_allowances,
            overtime_pay=record.overtime_pay,
            bonus=record.bonus,
            other_deductions=record.other_deductions,
            insurance_relief=record.insurance_relief,
        )
    )
    _apply_result(record, result)
    session.commit()
    return record


def approve_record(
    session: Session, tenant_id: str, record_id: UUID, approved_by: str | None = None
) -> PayrollRecord:
    """Lock a record. Raises RecordLockedError if it is already approved."""
    record = _unlocked(session, tenant_id, record_id)
    record.is_locked = True
    record.approved_by = approved_by or get_current_actor()
    record.approved_at = utcnow()
    session.commit()
    logger.info("payroll_record_approved: record_id=%s by=%s", record.id, record.approved_by)
    return record


def delete_record(session: Session, tenant_id: str, record_id: UUID) -> None:
    session.delete(_unlocked(session, tenant_id, record_id))
    session.commit()


def _unlocked(session: Session, tenant_id: str, record_id: UUID) -> PayrollRecord:
    record = get_record(session, tenant_id, record_id)
    if record.is_locked:
        raise RecordLockedError("PayrollRecord", record.id)
    return record


def p9_form(session: Session, tenant_id: str, employee_id: UUID, year: int) -> P9Form:
    """Monthly records of ``year`` and their annual totals."""
    employee = get_employee(session, tenant_id, employee_id)
    records = list_records(session, tenant_id, year=year, employee_id=employee.id)
    return P9Form(
        employee=EmployeeResponse.model_validate(employee),
        year=year,
        monthly_records=[PayrollRecordResponse.model_validate(r) for r in records],
        totals=P9Totals(
            gross_pay=money_sum(r.gross_pay for r in records),
            taxable_income=money_sum(r.taxable_income for r in records),
            paye=money_sum(r.paye for r in records),
            personal_relief=money_sum(r.personal_relief for r in records),
            insurance_relief=money_sum(r.insurance_relief for r in records),
            nssf_employee=money_sum(r.nssf_employee for r in records),
        ),
    )


def _line(
    employee_id: UUID, month: int, year: int, data: PayrollInput, result: PayrollResult
) -> PayrollLine:
    return PayrollLine(
        employee_id=employee_id,
        pay_period_month=month,
        pay_period_year=year,
        basic_salary=data.basic_salary,
        housing_allowance=data.housing_allowance,
        transport_allowance=data.transport_allowance,
        other_taxable_allowances=data.other_taxable_allowances,
        non_taxable_allowances=data.non_taxable_allowances,
        overtime_pay=data.overtime_pay,
        bonus=data.bonus,
        gross_pay=result.gross_pay,
        taxable_income=result.taxable_income,
        paye=result.paye,
        nssf_employee=result.nssf_employee,
        nssf_employer=result.nssf_employer,
        sha_deduction=result.sha_deduction,
        housing_levy_employee=result.housing_levy_employee,
        housing_levy_employer=result.housing_levy_employer,
        other_deductions=result.other_deductions,
        total_deductions=result.total_deductions,
        net_pay=result.net_pay,
        personal_relief=result.personal_relief,
        insurance_relief=result.insurance_relief,
    )


def _apply_result(record: PayrollRecord, result: PayrollResult) -> None:
    for field in (
        "gross_pay",
        "taxable_income",
        "paye",
        "nssf_employee",
        "nssf_employer",
        "sha_deduction",
        "housing_levy_employee",
        "housing_levy_employer",
        "other_deductions",
        "total_deductions",
        "net_pay",
        "personal_relief",
        "insurance_relief",
    ):
        setattr(record, field, getattr(result, field))
