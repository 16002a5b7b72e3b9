"""Tests for per-tenant document numbering."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from landdesk.domain.expenses.models import Expense
from landdesk.infra.persistence.numbering import LedgerSettings, next_sequence


def _expense(tenant_id: str, reference: str) -> Expense:
    return Expense(
        tenant_id=tenant_id,
        category="Rent",
        amount=Decimal("1000.00"),
        expense_date=date(2026, 10, 19),
        reference_number=reference,
    )


@pytest.mark.unit
class TestNextSequence:
    def _next(self, session, tenant_id: str, prefix: str = "EXP-20261019-") -> int:
        return next_sequence(
            session, Expense.reference_number, Expense.tenant_id, tenant_id, prefix
        )

    def test_first_in_period(self, session, tenant_id) -> None:
        assert self._next(session, tenant_id) == 1

    def test_one_past_highest(self, session, tenant_id) -> None:
        session.add_all(
            [
                _expense(tenant_id, "EXP-20261019-0001"),
                _expense(tenant_id, "EXP-20261019-0009"),
                _expense(tenant_id, "EXP-20261018-0042"),
            ]
        )
        session.flush()
        assert self._next(session, tenant_id) == 10

    def test_ignores_manual_and_foreign_references(
        self, session, tenant_id, other_tenant_id
    ) -> None:
        session.add_all(
            [
                _expense(tenant_id, "EXP-20261019-MANUAL"),
                _expense(other_tenant_id, "EXP-20261019-0005"),
            ]
        )
        session.flush()
        assert self._next(session, tenant_id) == 1


@pytest.mark.unit
class TestLedgerSettings:
    def test_defaults(self) -> None:
        settings = LedgerSettings()
        assert settings.receipt_prefix == "LIP"
        assert settings.expense_prefix == "EXP"
        assert settings.employee_prefix == "EMP"

    def test_prefix_uppercased(self, monkeypatch) -> None:
        monkeypatch.setenv("LEDGER_RECEIPT_PREFIX", " rct ")
        assert LedgerSettings().receipt_prefix == "RCT"

    def test_bad_prefix_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("LEDGER_RECEIPT_PREFIX", "R1")
        with pytest.raises(ValidationError):
            LedgerSettings()
