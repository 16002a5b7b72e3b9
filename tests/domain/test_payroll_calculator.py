"""Unit tests for the statutory payroll calculator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from landdesk.domain.payroll.calculator import (
    MAX_INSURANCE_RELIEF,
    PERSONAL_RELIEF,
    PayrollInput,
    calculate_housing_levy,
    calculate_nssf,
    calculate_paye_before_relief,
    calculate_payroll,
    calculate_sha,
    insurance_relief_basis,
)


class TestPayeBands:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("taxable", "expected"),
        [
            ("0", "0"),
            ("-500", "0"),
            ("24000", "2400.00"),
            ("32333", "4483.25"),
            ("47090", "8910.35"),
            ("1000000", "312283.35"),
        ],
    )
    def test_bands(self, taxable: str, expected: str) -> None:
        assert calculate_paye_before_relief(Decimal(taxable)) == Decimal(expected)


class TestNssf:
    @pytest.mark.unit
    def test_below_tier_i_limit(self) -> None:
        nssf = calculate_nssf(Decimal("5000"))
        assert nssf.tier_i == Decimal("300.00")
        assert nssf.tier_ii == Decimal("0.00")

    @pytest.mark.unit
    def test_both_tiers(self) -> None:
        nssf = calculate_nssf(Decimal("20000"))
        assert nssf.tier_i == Decimal("420.00")
        assert nssf.tier_ii == Decimal("780.00")
        assert nssf.total == Decimal("1200.00")

    @pytest.mark.unit
    def test_capped_at_upper_limit(self) -> None:
        assert calculate_nssf(Decimal("250000")).total == Decimal("2160.00")


class TestLevies:
    @pytest.mark.unit
    def test_sha_and_housing_levy(self) -> None:
        assert calculate_sha(Decimal("50000")) == Decimal("1375.00")
        assert calculate_housing_levy(Decimal("50000")) == Decimal("750.00")

    @pytest.mark.unit
    def test_rounding_is_half_up(self) -> None:
        # 2.75% of 1234.50 is 33.94875
        assert calculate_sha(Decimal("1234.50")) == Decimal("33.95")

    @pytest.mark.unit
    def test_insurance_relief_basis(self) -> None:
        assert insurance_relief_basis(Decimal("4000")) == Decimal("600.00")


class TestCalculatePayroll:
    @pytest.mark.unit
    def test_basic_salary_of_fifty_thousand(self) -> None:
        result = calculate_payroll(PayrollInput(basic_salary=Decimal("50000")))
        assert result.gross_pay == Decimal("50000.00")
        assert result.nssf_employee == Decimal("2160.00")
        assert result.nssf_employer == result.nssf_employee
        assert result.housing_levy_employee == Decimal("750.00")
        assert result.housing_levy_employer == result.housing_levy_employee
        assert result.taxable_income == Decimal("47090.00")
        assert result.paye == Decimal("6510.35")
        assert result.sha_deduction == Decimal("1375.00")
        assert result.personal_relief == PERSONAL_RELIEF
        assert result.total_deductions == Decimal("10795.35")
        assert result.net_pay == Decimal("39204.65")

    @pytest.mark.unit
    def test_relief_exceeding_tax_gives_zero_paye(self) -> None:
        result = calculate_payroll(PayrollInput(basic_salary=Decimal("20000")))
        assert result.taxable_income == Decimal("18500.00")
        assert result.paye == Decimal("0.00")
        assert result.net_pay == Decimal("17950.00")

    @pytest.mark.unit
    def test_non_taxable_allowance_is_paid_but_not_taxed(self) -> None:
        result = calculate_payroll(
            PayrollInput(basic_salary=Decimal("50000"), non_taxable_allowances=Decimal("10000"))
        )
        assert result.gross_pay == Decimal("60000.00")
        assert result.nssf_employee == Decimal("2160.00")
        assert result.housing_levy_employee == Decimal("900.00")
        assert result.taxable_income == Decimal("46940.00")
        assert result.sha_deduction == Decimal("1650.00")

    @pytest.mark.unit
    def test_insurance_relief_is_capped(self) -> None:
        result = calculate_payroll(
            PayrollInput(basic_salary=Decimal("50000"), insurance_relief=Decimal("8000"))
        )
        assert result.insurance_relief == MAX_INSURANCE_RELIEF
        assert result.paye == Decimal("1510.35")

    @pytest.mark.unit
    def test_other_deductions_reduce_net_only(self) -> None:
        result = calculate_payroll(
            PayrollInput(basic_salary=Decimal("50000"), other_deductions=Decimal("5000"))
        )
        assert result.paye == Decimal("6510.35")
        assert result.net_pay == Decimal("34204.65")

    @pytest.mark.unit
    def test_net_pay_never_negative(self) -> None:
        result = calculate_payroll(
            PayrollInput(basic_salary=Decimal("10000"), other_deductions=Decimal("50000"))
        )
        assert result.net_pay == Decimal("0")

    @pytest.mark.unit
    def test_every_component_adds_to_gross(self) -> None:
        result = calculate_payroll(
            PayrollInput(
                basic_salary=Decimal("40000"),
                housing_allowance=Decimal("5000"),
                transport_allowance=Decimal("3000"),
                other_taxable_allowances=Decimal("1000"),
                overtime_pay=Decimal("2500"),
                bonus=Decimal("1500"),
            )
        )
        assert result.gross_pay == Decimal("53000.00")
