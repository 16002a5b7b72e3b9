"""Per-tenant sequential document numbers.

Receipts, expense vouchers and staff numbers share one scheme: a prefix
and a period stamp followed by a sequence that restarts every period.
The next sequence is one past the highest issued for the same tenant and
period. A unique constraint on ``(tenant_id, <column>)`` rejects the
loser of two concurrent allocations.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import select

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute, Session


class LedgerSettings(BaseSettings):
    """Document number prefixes.

    Environment variables (``LEDGER_`` prefix):
    - LEDGER_RECEIPT_PREFIX: Payment receipts (default: LIP)
    - LEDGER_EXPENSE_PREFIX: Expense vouchers (default: EXP)
    - LEDGER_EMPLOYEE_PREFIX: Staff numbers (default: EMP)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    receipt_prefix: str = Field(default="LIP", description="Receipt number prefix")
    expense_prefix: str = Field(default="EXP", description="Expense reference prefix")
    employee_prefix: str = Field(default="EMP", description="Employee number prefix")

    @field_validator("receipt_prefix", "expense_prefix", "employee_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        v = v.strip().upper()
        if not (2 <= len(v) <= 6 and v.isalpha()):
            msg = f"Prefix must be 2-6 letters, got {v!r}"
            raise ValueError(msg)
        return v


@lru_cache(maxsize=1)
def get_ledger_settings() -> LedgerSettings:
    return LedgerSettings()


def next_sequence(
    session: Session,
    column: InstrumentedAttribute[Any],
    tenant_column: InstrumentedAttribute[Any],
    tenant_id: str,
    period_prefix: str,
) -> int:
    """Return the next sequence for numbers starting with ``period_prefix``.

    Args:
        session: Open session; the lookup joins its transaction.
        column: String column holding the numbers (e.g. ``Payment.receipt_number``).
        tenant_column: The model's ``tenant_id`` column.
        tenant_id: Tenant whose numbers are counted.
        period_prefix: Everything before the sequence, e.g. ``LIP-202610-``.
    """
    stmt = select(column).where(
        tenant_column == tenant_id,
        column.startswith(period_prefix, autoescape=True),
    )
    highest = 0
    for value in session.scalars(stmt):
        suffix = value[len(period_prefix) :]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1
