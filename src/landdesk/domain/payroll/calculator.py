"""Kenyan statutory payroll calculator.

Pure functions over ``Decimal``; no database access. Monthly figures:

- NSSF: 6% of pensionable earnings capped at KES 36,000 (Tier I on the
  first 7,000, Tier II on 7,000-36,000). The employer matches.
- Affordable Housing Levy: 1.5% of gross. The employer matches.
- SHA: 2.75% of gross.
- PAYE: graduated bands on taxable income, less personal relief (2,400)
  and insurance relief (capped at 5,000).

Every output is rounded half-up to the cent.

Example:
    >>> from decimal import Decimal
    >>> result = calculate_payroll(PayrollInput(basic_salary=Decimal("50000")))
    >>> result.net_pay
    Decimal('39204.65')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from landdesk.foundation.domain.money import ZERO, to_money

#: (upper bound of band, rate); None means no upper bound.
PAYE_BANDS: tuple[tuple[Decimal | None, Decimal], ...] = (
    (Decimal("24000"), Decimal("0.10")),
    (Decimal("32333"), Decimal("0.25")),
    (Decimal("500000"), Decimal("0.30")),
    (Decimal("800000"), Decimal("0.325")),
    (None, Decimal("0.35")),
)
PERSONAL_RELIEF = Decimal("2400.00")
MAX_INSURANCE_RELIEF = Decimal("5000.00")

NSSF_RATE = Decimal("0.06")
NSSF_TIER_I_LIMIT = Decimal("7000")
NSSF_TIER_II_LIMIT = Decimal("36000")

SHA_RATE = Decimal("0.0275")
HOUSING_LEVY_RATE = Decimal("0.015")

#: Share of insurance premiums that qualifies for relief.
INSURANCE_RELIEF_RATE = Decimal("0.15")


@dataclass(frozen=True, slots=True)
class PayrollInput:
    basic_salary: Decimal
    housing_allowance: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    other_taxable_allowances: Decimal = ZERO
    non_taxable_allowances: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    bonus: Decimal = ZERO
    other_deductions: Decimal = ZERO
    insurance_relief: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class NSSFContribution:
    tier_i: Decimal
    tier_ii: Decimal

    @property
    def total(self) -> Decimal:
        return self.tier_i + self.tier_ii


@dataclass(frozen=True, slots=True)
class PayrollResult:
    gross_pay: Decimal
    taxable_income: Decimal
    paye: Decimal
    nssf_employee: Decimal
    nssf_employer: Decimal
    sha_deduction: Decimal
    housing_levy_employee: Decimal
    housing_levy_employer: Decimal
    personal_relief: Decimal
    insurance_relief: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal


def calculate_paye_before_relief(taxable_income: Decimal) -> Decimal:
    """Apply the monthly PAYE bands to ``taxable_income``."""
    if taxable_income <= 0:
        return ZERO
    tax = ZERO
    lower = ZERO
    for upper, rate in PAYE_BANDS:
        if taxable_income <= lower:
            break
        top = taxable_income if upper is None else min(taxable_income, upper)
        tax += (top - lower) * rate
        if upper is None:
            break
        lower = upper
    return to_money(tax)


def calculate_nssf(pensionable: Decimal) -> NSSFContribution:
    capped = min(max(pensionable, ZERO), NSSF_TIER_II_LIMIT)
    tier_i = min(capped, NSSF_TIER_I_LIMIT) * NSSF_RATE
    tier_ii = max(ZERO, capped - NSSF_TIER_I_LIMIT) * NSSF_RATE
    return NSSFContribution(tier_i=to_money(tier_i), tier_ii=to_money(tier_ii))


def calculate_sha(gross_pay: Decimal) -> Decimal:
    return to_money(gross_pay * SHA_RATE)


def calculate_housing_levy(gross_pay: Decimal) -> Decimal:
    return to_money(gross_pay * HOUSING_LEVY_RATE)


def insurance_relief_basis(insurance_premiums: Decimal) -> Decimal:
    """Relief claimable on ``insurance_premiums`` before the monthly cap."""
    return to_money(insurance_premiums * INSURANCE_RELIEF_RATE)


def calculate_payroll(data: PayrollInput) -> PayrollResult:
    gross = to_money(
        data.basic_salary
        + data.housing_allowance
        + data.transport_allowance
        + data.other_taxable_allowances
        + data.non_taxable_allowances
        + data.overtime_pay
        + data.bonus
    )
    taxable_gross = gross - to_money(data.non_taxable_allowances)

    nssf = calculate_nssf(taxable_gross).total
    levy = calculate_housing_levy(gross)
    taxable_income = to_money(taxable_gross - nssf - levy)

    insurance_relief = min(to_money(data.insurance_relief), MAX_INSURANCE_RELIEF)
    paye = max(
        ZERO,
        calculate_paye_before_relief(taxable_income) - PERSONAL_RELIEF - insurance_relief,
    )
    sha = calculate_sha(gross)
    other = to_money(data.other_deductions)

    total_deductions = to_money(paye + nssf + sha + levy + other)
    return PayrollResult(
        gross_pay=gross,
        taxable_income=taxable_income,
        paye=to_money(paye),
        nssf_employee=nssf,
        nssf_employer=nssf,
        sha_deduction=sha,
        housing_levy_employee=levy,
        housing_levy_employer=levy,
        personal_relief=PERSONAL_RELIEF,
        insurance_relief=insurance_relief,
        other_deductions=other,
        total_deductions=total_deductions,
        net_pay=max(ZERO, to_money(gross - total_deductions)),
    )
