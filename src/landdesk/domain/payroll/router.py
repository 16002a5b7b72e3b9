"""Payroll REST API: employees, deductions, statutory rates and runs."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, status

from landdesk.domain.payroll import service
from landdesk.domain.payroll.schemas import (
    DeductionCreate,
    DeductionResponse,
    DeductionUpdate,
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    P9Form,
    PayrollLine,
    PayrollRecordResponse,
    PayrollRecordUpdate,
    PayrollRunRequest,
    PayrollRunResult,
    StatutoryRateCreate,
    StatutoryRateResponse,
    StatutoryRateUpdate,
)
from landdesk.infra.auth.dependencies import AdminOnly
from landdesk.infra.fastapi.dependencies import TenantId  # noqa: TC001
from landdesk.infra.persistence.database import DbSession  # noqa: TC001

router = APIRouter(prefix="/api/v1/payroll", tags=["payroll"], dependencies=[AdminOnly])

Month = Annotated[int | None, Query(ge=1, le=12)]


# -- Employees ----------------------------------------------------------------


@router.get("/employees")
def list_employees(
    session: DbSession, tenant_id: TenantId, active_only: bool = False
) -> list[EmployeeResponse]:
    employees = service.list_employees(session, tenant_id, active_only=active_only)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.post("/employees", status_code=status.HTTP_201_CREATED)
def create_employee(
    body: EmployeeCreate, session: DbSession, tenant_id: TenantId
) -> EmployeeResponse:
    return EmployeeResponse.model_validate(service.create_employee(session, tenant_id, body))


@router.get("/employees/{employee_id}")
def get_employee(employee_id: UUID, session: DbSession, tenant_id: TenantId) -> EmployeeResponse:
    return EmployeeResponse.model_validate(service.get_employee(session, tenant_id, employee_id))


@router.patch("/employees/{employee_id}")
def update_employee(
    employee_id: UUID, body: EmployeeUpdate, session: DbSession, tenant_id: TenantId
) -> EmployeeResponse:
    employee = service.update_employee(session, tenant_id, employee_id, body)
    return EmployeeResponse.model_validate(employee)


@router.post("/employees/{employee_id}/deactivate")
def deactivate_employee(
    employee_id: UUID, session: DbSession, tenant_id: TenantId
) -> EmployeeResponse:
    employee = service.deactivate_employee(session, tenant_id, employee_id)
    return EmployeeResponse.model_validate(employee)


@router.get("/employees/{employee_id}/p9")
def p9_form(
    employee_id: UUID,
    session: DbSession,
    tenant_id: TenantId,
    year: Annotated[int, Query(ge=2000, le=2100)],
) -> P9Form:
    return service.p9_form(session, tenant_id, employee_id, year)


# -- Deductions ---------------------------------------------------------------


@router.get("/employees/{employee_id}/deductions")
def list_deductions(
    employee_id: UUID, session: DbSession, tenant_id: TenantId
) -> list[DeductionResponse]:
    deductions = service.list_deductions(session, tenant_id, employee_id)
    return [DeductionResponse.model_validate(d) for d in deductions]


@router.post("/employees/{employee_id}/deductions", status_code=status.HTTP_201_CREATED)
def add_deduction(
    employee_id: UUID, body: DeductionCreate, session: DbSession, tenant_id: TenantId
) -> DeductionResponse:
    deduction = service.add_deduction(session, tenant_id, employee_id, body)
    return DeductionResponse.model_validate(deduction)


@router.patch("/deductions/{deduction_id}")
def update_deduction(
    deduction_id: UUID, body: DeductionUpdate, session: DbSession, tenant_id: TenantId
) -> DeductionResponse:
    deduction = service.update_deduction(session, tenant_id, deduction_id, body)
    return DeductionResponse.model_validate(deduction)


@router.delete("/deductions/{deduction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deduction(deduction_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_deduction(session, tenant_id, deduction_id)


# -- Statutory rates ----------------------------------------------------------


@router.get("/statutory-rates")
def list_statutory_rates(
    session: DbSession, tenant_id: TenantId, rate_type: str | None = None
) -> list[StatutoryRateResponse]:
    rates = service.list_statutory_rates(session, tenant_id, rate_type=rate_type)
    return [StatutoryRateResponse.model_validate(r) for r in rates]


@router.post("/statutory-rates", status_code=status.HTTP_201_CREATED)
def create_statutory_rate(
    body: StatutoryRateCreate, session: DbSession, tenant_id: TenantId
) -> StatutoryRateResponse:
    rate = service.create_statutory_rate(session, tenant_id, body)
    return StatutoryRateResponse.model_validate(rate)


@router.patch("/statutory-rates/{rate_id}")
def update_statutory_rate(
    rate_id: UUID, body: StatutoryRateUpdate, session: DbSession, tenant_id: TenantId
) -> StatutoryRateResponse:
    rate = service.update_statutory_rate(session, tenant_id, rate_id, body)
    return StatutoryRateResponse.model_validate(rate)


@router.delete("/statutory-rates/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_statutory_rate(rate_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_statutory_rate(session, tenant_id, rate_id)


# -- Runs and records ---------------------------------------------------------


@router.post("/preview")
def preview_payroll(
    body: PayrollRunRequest, session: DbSession, tenant_id: TenantId
) -> list[PayrollLine]:
    """Compute the period's payslips without saving them."""
    return service.preview_payroll(session, tenant_id, body.month, body.year, body.adjustments)


@router.post("/run", status_code=status.HTTP_201_CREATED)
def run_payroll(
    body: PayrollRunRequest, session: DbSession, tenant_id: TenantId
) -> PayrollRunResult:
    created, skipped = service.run_payroll(
        session, tenant_id, body.month, body.year, body.adjustments
    )
    return PayrollRunResult(
        created=[PayrollRecordResponse.model_validate(r) for r in created],
        skipped=skipped,
    )


@router.get("/records")
def list_records(
    session: DbSession,
    tenant_id: TenantId,
    month: Month = None,
    year: int | None = None,
    employee_id: UUID | None = None,
) -> list[PayrollRecordResponse]:
    records = service.list_records(
        session, tenant_id, month=month, year=year, employee_id=employee_id
    )
    return [PayrollRecordResponse.model_validate(r) for r in records]


@router.get("/records/{record_id}")
def get_record(record_id: UUID, session: DbSession, tenant_id: TenantId) -> PayrollRecordResponse:
    return PayrollRecordResponse.model_validate(service.get_record(session, tenant_id, record_id))


@router.patch("/records/{record_id}")
def update_record(
    record_id: UUID, body: PayrollRecordUpdate, session: DbSession, tenant_id: TenantId
) -> PayrollRecordResponse:
    record = service.update_record(session, tenant_id, record_id, body)
    return PayrollRecordResponse.model_validate(record)


@router.post("/records/{record_id}/approve")
def approve_record(
    record_id: UUID, session: DbSession, tenant_id: TenantId
) -> PayrollRecordResponse:
    record = service.approve_record(session, tenant_id, record_id)
    return PayrollRecordResponse.model_validate(record)


@router.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record(record_id: UUID, session: DbSession, tenant_id: TenantId) -> None:
    service.delete_record(session, tenant_id, record_id)
