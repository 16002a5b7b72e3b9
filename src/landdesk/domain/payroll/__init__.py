"""landdesk Domain Payroll -- employees, statutory deductions and payslips."""

from landdesk.domain.payroll.models import (
    DeductionType,
    Employee,
    EmployeeDeduction,
    EmploymentType,
    PayrollRecord,
    StatutoryRate,
)

__all__ = [
    "DeductionType",
    "Employee",
    "EmployeeDeduction",
    "EmploymentType",
    "PayrollRecord",
    "StatutoryRate",
]
