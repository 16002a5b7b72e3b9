"""Unit tests for landdesk.domain.payroll.service."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from landdesk.domain.payroll import service
from landdesk.domain.payroll.models import DeductionType, EmployeeDeduction
from landdesk.domain.payroll.schemas import (
    DeductionCreate,
    DeductionUpdate,
    EmployeeCreate,
    EmployeeUpdate,
    PayAdjustment,
    PayrollRecordUpdate,
    StatutoryRateCreate,
)
from landdesk.foundation.domain import ConflictError, NotFoundError, RecordLockedError


@pytest.fixture()
def make_employee(session, tenant_id):
    pins = iter(f"A{n:09d}K" for n in range(100000001, 100000100))

    def _make(name: str = "Grace Njeri", salary: str = "50000", **fields):
        fields.setdefault("kra_pin", next(pins))
        fields.setdefault("hire_date", date(2026, 1, 15))
        data = EmployeeCreate(
            full_name=name,
            national_id="12345678",
            basic_salary=Decimal(salary),
            **fields,
        )
        return service.create_employee(session, tenant_id, data)

    return _make


def _deduction(
    deduction_type: DeductionType = DeductionType.SACCO,
    amount: str = "2000",
    *,
    is_recurring: bool = True,
    start: date | None = None,
    end: date | None = None,
    is_active: bool = True,
) -> EmployeeDeduction:
    return EmployeeDeduction(
        deduction_name=deduction_type.value,
        deduction_type=deduction_type.value,
        amount=Decimal(amount),
        is_recurring=is_recurring,
        start_date=start,
        end_date=end,
        is_active=is_active,
    )


class TestEmployees:
    @pytest.mark.unit
    def test_numbers_restart_per_hire_year(self, make_employee) -> None:
        assert make_employee("Grace Njeri").employee_id == "EMP-260001"
        assert make_employee("Peter Kariuki").employee_id == "EMP-260002"
        mercy = make_employee("Mercy Chebet", hire_date=date(2025, 7, 1))
        assert mercy.employee_id == "EMP-250001"

    @pytest.mark.unit
    def test_duplicate_kra_pin_conflicts(self, make_employee) -> None:
        make_employee(kra_pin="A000000001Z")
        with pytest.raises(ConflictError):
            make_employee("Peter Kariuki", kra_pin="A000000001Z")

    @pytest.mark.unit
    def test_update_to_taken_kra_pin_conflicts(self, session, tenant_id, make_employee) -> None:
        make_employee(kra_pin="A000000001Z")
        other = make_employee("Peter Kariuki")
        with pytest.raises(ConflictError):
            service.update_employee(
                session, tenant_id, other.id, EmployeeUpdate(kra_pin="A000000001Z")
            )

    @pytest.mark.unit
    def test_deactivated_employee_is_hidden_from_active_list(
        self, session, tenant_id, make_employee
    ) -> None:
        grace = make_employee()
        make_employee("Peter Kariuki")
        service.deactivate_employee(session, tenant_id, grace.id)
        active = service.list_employees(session, tenant_id, active_only=True)
        assert [e.full_name for e in active] == ["Peter Kariuki"]
        assert len(service.list_employees(session, tenant_id)) == 2

    @pytest.mark.unit
    def test_employee_of_other_tenant_is_not_found(
        self, session, other_tenant_id, make_employee
    ) -> None:
        employee = make_employee()
        with pytest.raises(NotFoundError):
            service.get_employee(session, other_tenant_id, employee.id)


class TestDeductionsForPeriod:
    @pytest.mark.unit
    def test_recurring_within_dates(self) -> None:
        loan = _deduction(start=date(2026, 2, 1), end=date(2026, 4, 30))
        assert service.deductions_for_period([loan], 1, 2026) == []
        assert service.deductions_for_period([loan], 3, 2026) == [loan]
        assert service.deductions_for_period([loan], 5, 2026) == []

    @pytest.mark.unit
    def test_recurring_without_dates_always_applies(self) -> None:
        sacco = _deduction()
        assert service.deductions_for_period([sacco], 12, 2030) == [sacco]

    @pytest.mark.unit
    def test_one_off_applies_in_its_month(self) -> None:
        advance = _deduction(DeductionType.ADVANCE, is_recurring=False, start=date(2026, 3, 20))
        assert service.deductions_for_period([advance], 3, 2026) == [advance]
        assert service.deductions_for_period([advance], 4, 2026) == []

    @pytest.mark.unit
    def test_inactive_never_applies(self) -> None:
        assert service.deductions_for_period([_deduction(is_active=False)], 3, 2026) == []


class TestPayrollRun:
    @pytest.mark.unit
    def test_run_creates_one_record_per_active_employee(
        self, session, tenant_id, make_employee
    ) -> None:
        grace = make_employee()
        leaver = make_employee("Peter Kariuki")
        service.deactivate_employee(session, tenant_id, leaver.id)

        created, skipped = service.run_payroll(session, tenant_id, 3, 2026)
        assert skipped == []
        [record] = created
        assert record.employee_id == grace.id
        assert record.net_pay == Decimal("39204.65")
        assert record.is_locked is False

    @pytest.mark.unit
    def test_rerun_skips_existing_records(self, session, tenant_id, make_employee) -> None:
        grace = make_employee()
        service.run_payroll(session, tenant_id, 3, 2026)
        make_employee("Peter Kariuki")

        created, skipped = service.run_payroll(session, tenant_id, 3, 2026)
        assert [r.pay_period_month for r in created] == [3]
        assert skipped == [grace.id]
        assert len(service.list_records(session, tenant_id, month=3, year=2026)) == 2

    @pytest.mark.unit
    def test_deductions_and_insurance_relief(self, session, tenant_id, make_employee) -> None:
        grace = make_employee()
        deductions = ((DeductionType.SACCO, "2000"), (DeductionType.INSURANCE, "1000"))
        for deduction_type, amount in deductions:
            service.add_deduction(
                session,
                tenant_id,
                grace.id,
                DeductionCreate(
                    deduction_name=deduction_type.value,
                    deduction_type=deduction_type,
                    amount=Decimal(amount),
                ),
            )
        [record], _ = service.run_payroll(session, tenant_id, 3, 2026)
        assert record.other_deductions == Decimal("3000.00")
        assert record.insurance_relief == Decimal("150.00")
        assert record.paye == Decimal("6360.35")

    @pytest.mark.unit
    def test_adjustments_apply_to_named_employee(self, session, tenant_id, make_employee) -> None:
        grace = make_employee()
        peter = make_employee("Peter Kariuki")
        lines = service.preview_payroll(
            session,
            tenant_id,
            3,
            2026,
            {grace.id: PayAdjustment(overtime_pay=Decimal("5000"))},
        )
        gross = {line.employee_id: line.gross_pay for line in lines}
        assert gross == {grace.id: Decimal("55000.00"), peter.id: Decimal("50000.00")}
        assert service.list_records(session, tenant_id) == []


class TestPayrollRecords:
    @pytest.fixture()
    def record(self, session, tenant_id, make_employee):
        make_employee()
        [record], _ = service.run_payroll(session, tenant_id, 3, 2026)
        return record

    @pytest.mark.unit
    def test_update_recomputes(self, session, tenant_id, record) -> None:
        updated = service.update_record(
            session, tenant_id, record.id, PayrollRecordUpdate(bonus=Decimal("10000"))
        )
        assert updated.bonus == Decimal("10000.00")
        assert updated.gross_pay == Decimal("60000.00")
        assert updated.housing_levy_employee == Decimal("900.00")

    @pytest.mark.unit
    def test_approve_locks_record(self, session, tenant_id, record) -> None:
        approved = service.approve_record(session, tenant_id, record.id, approved_by="hr-lead")
        assert approved.is_locked is True
        assert approved.approved_by == "hr-lead"
        assert approved.approved_at is not None

        with pytest.raises(RecordLockedError):
            service.update_record(
                session, tenant_id, record.id, PayrollRecordUpdate(bonus=Decimal("1"))
            )
        with pytest.raises(RecordLockedError):
            service.approve_record(session, tenant_id, record.id)
        with pytest.raises(RecordLockedError):
            service.delete_record(session, tenant_id, record.id)

    @pytest.mark.unit
    def test_delete_unlocked_record(self, session, tenant_id, record) -> None:
        service.delete_record(session, tenant_id, record.id)
        with pytest.raises(NotFoundError):
            service.get_record(session, tenant_id, record.id)

    @pytest.mark.unit
    def test_unknown_record_is_not_found(self, session, tenant_id) -> None:
        with pytest.raises(NotFoundError):
            service.approve_record(session, tenant_id, uuid4())


class TestP9Form:
    @pytest.mark.unit
    def test_annual_totals(self, session, tenant_id, make_employee) -> None:
        grace = make_employee()
        for month in (1, 2):
            service.run_payroll(session, tenant_id, month, 2026)
        service.run_payroll(session, tenant_id, 12, 2025)

        form = service.p9_form(session, tenant_id, grace.id, 2026)
        assert form.employee.employee_id == grace.employee_id
        assert [r.pay_period_month for r in form.monthly_records] == [1, 2]
        assert form.totals.gross_pay == Decimal("100000.00")
        assert form.totals.paye == Decimal("13020.70")
        assert form.totals.nssf_employee == Decimal("4320.00")
        assert form.totals.personal_relief == Decimal("4800.00")


class TestStatutoryRates:
    @pytest.mark.unit
    def test_create_and_filter_by_type(self, session, tenant_id) -> None:
        for rate_type, name in (("paye", "Band 1"), ("nssf", "Tier I")):
            service.create_statutory_rate(
                session,
                tenant_id,
                StatutoryRateCreate(
                    rate_type=rate_type,
                    rate_name=name,
                    rate_value=Decimal("10"),
                    effective_from=date(2024, 7, 1),
                ),
            )
        rates = service.list_statutory_rates(session, tenant_id, rate_type="nssf")
        assert [r.rate_name for r in rates] == ["Tier I"]


class TestDeductionAccess:
    @pytest.mark.unit
    def test_deduction_of_other_tenant_is_not_found(
        self, session, tenant_id, other_tenant_id, make_employee
    ) -> None:
        grace = make_employee()
        deduction = service.add_deduction(
            session,
            tenant_id,
            grace.id,
            DeductionCreate(
                deduction_name="Helb loan",
                deduction_type=DeductionType.LOAN,
                amount=Decimal("1500"),
            ),
        )
        with pytest.raises(NotFoundError):
            service.update_deduction(
                session, other_tenant_id, deduction.id, DeductionUpdate(is_active=False)
            )
