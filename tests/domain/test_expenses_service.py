"""Unit tests for landdesk.domain.expenses.service."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from landdesk.domain.expenses import service
from landdesk.domain.expenses.models import ExpenseCategory
from landdesk.domain.expenses.schemas import ExpenseCreate, ExpenseUpdate
from landdesk.domain.sales import service as sales
from landdesk.foundation.domain import NotFoundError


def _payout(client_id, amount: str = "20000", **fields) -> ExpenseCreate:
    return ExpenseCreate(
        category=ExpenseCategory.COMMISSION_PAYOUT,
        amount=Decimal(amount),
        expense_date=date(2026, 4, 10),
        client_id=client_id,
        **fields,
    )


class TestExpenseLedger:
    @pytest.mark.unit
    def test_reference_numbers_restart_per_day(self, session, tenant_id) -> None:
        def create(on: date) -> str:
            data = ExpenseCreate(
                category=ExpenseCategory.RENT, amount=Decimal("35000"), expense_date=on
            )
            return service.create_expense(session, tenant_id, data).reference_number

        assert create(date(2026, 4, 1)) == "EXP-20260401-0001"
        assert create(date(2026, 4, 1)) == "EXP-20260401-0002"
        assert create(date(2026, 4, 2)) == "EXP-20260402-0001"

    @pytest.mark.unit
    def test_numbering_is_per_tenant(self, session, tenant_id, other_tenant_id) -> None:
        data = ExpenseCreate(
            category=ExpenseCategory.UTILITIES,
            amount=Decimal("4200"),
            expense_date=date(2026, 4, 1),
        )
        service.create_expense(session, tenant_id, data)
        other = service.create_expense(session, other_tenant_id, data)
        assert other.reference_number == "EXP-20260401-0001"

    @pytest.mark.unit
    def test_explicit_reference_is_kept(self, session, tenant_id) -> None:
        data = ExpenseCreate(
            category=ExpenseCategory.LEGAL_FEES,
            amount=Decimal("15000"),
            reference_number="INV-778",
        )
        assert service.create_expense(session, tenant_id, data).reference_number == "INV-778"

    @pytest.mark.unit
    def test_list_filters_by_category_and_dates(self, session, tenant_id) -> None:
        for category, on in (
            (ExpenseCategory.RENT, date(2026, 3, 31)),
            (ExpenseCategory.RENT, date(2026, 4, 15)),
            (ExpenseCategory.MARKETING, date(2026, 4, 16)),
        ):
            service.create_expense(
                session,
                tenant_id,
                ExpenseCreate(category=category, amount=Decimal("1000"), expense_date=on),
            )

        april = service.list_expenses(
            session, tenant_id, start=date(2026, 4, 1), end=date(2026, 4, 30)
        )
        assert [e.expense_date for e in april] == [date(2026, 4, 16), date(2026, 4, 15)]
        rent = service.list_expenses(session, tenant_id, category=ExpenseCategory.RENT.value)
        assert len(rent) == 2

    @pytest.mark.unit
    def test_other_tenant_cannot_see_expense(self, session, tenant_id, other_tenant_id) -> None:
        expense = service.create_expense(
            session,
            tenant_id,
            ExpenseCreate(category=ExpenseCategory.OTHER, amount=Decimal("500")),
        )
        with pytest.raises(NotFoundError):
            service.get_expense(session, other_tenant_id, expense.id)


class TestCommissionPayouts:
    @pytest.mark.unit
    def test_payout_moves_client_commission(self, session, tenant_id, make_client) -> None:
        client = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        expense = service.create_expense(session, tenant_id, _payout(client.id))
        assert expense.is_commission_payout is True
        assert expense.agent_name == "Mwangi"
        assert client.commission_received == Decimal("20000")
        assert client.commission_balance == Decimal("30000")

    @pytest.mark.unit
    def test_editing_payout_reverses_previous_amount(
        self, session, tenant_id, make_client
    ) -> None:
        client = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        expense = service.create_expense(session, tenant_id, _payout(client.id))
        service.update_expense(
            session, tenant_id, expense.id, ExpenseUpdate(amount=Decimal("35000"))
        )
        assert client.commission_received == Decimal("35000")

    @pytest.mark.unit
    def test_moving_payout_to_another_client(self, session, tenant_id, make_client) -> None:
        first = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        second = make_client(name="Brian Otieno", sales_agent="Mwangi", commission=Decimal("40000"))
        expense = service.create_expense(session, tenant_id, _payout(first.id))
        service.update_expense(session, tenant_id, expense.id, ExpenseUpdate(client_id=second.id))
        assert first.commission_received == Decimal("0")
        assert second.commission_received == Decimal("20000")

    @pytest.mark.unit
    def test_deleting_payout_restores_balance(self, session, tenant_id, make_client) -> None:
        client = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        expense = service.create_expense(session, tenant_id, _payout(client.id))
        service.delete_expense(session, tenant_id, expense.id)
        assert client.commission_received == Decimal("0")
        assert client.commission_balance == Decimal("50000")

    @pytest.mark.unit
    def test_payout_for_unknown_client_is_not_found(self, session, tenant_id) -> None:
        with pytest.raises(NotFoundError):
            service.create_expense(session, tenant_id, _payout(uuid4()))

    @pytest.mark.unit
    def test_plain_expense_linked_to_client_leaves_commission(
        self, session, tenant_id, make_client
    ) -> None:
        client = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        service.create_expense(
            session,
            tenant_id,
            ExpenseCreate(
                category=ExpenseCategory.TRANSPORT,
                amount=Decimal("3000"),
                client_id=client.id,
            ),
        )
        assert client.commission_received == Decimal("0")


class TestCommissionReport:
    @pytest.mark.unit
    def test_earned_paid_and_pending_per_agent(self, session, tenant_id, make_client) -> None:
        first = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        make_client(name="Brian Otieno", sales_agent="Mwangi", commission=Decimal("30000"))
        make_client(name="Grace Njeri", sales_agent="Achieng", commission=Decimal("25000"))
        service.create_expense(session, tenant_id, _payout(first.id, "20000"))
        service.create_expense(
            session, tenant_id, _payout(None, "5000", agent_name="Kiprop")
        )

        report = service.commission_report(session, tenant_id)
        by_agent = {a.agent_name: a for a in report.agents}
        assert list(by_agent) == ["Achieng", "Kiprop", "Mwangi"]
        assert by_agent["Mwangi"].client_count == 2
        assert by_agent["Mwangi"].earned == Decimal("80000")
        assert by_agent["Mwangi"].paid == Decimal("20000")
        assert by_agent["Mwangi"].pending == Decimal("60000")
        assert by_agent["Kiprop"].pending == Decimal("-5000")
        assert report.total_earned == Decimal("105000")
        assert report.total_paid == Decimal("25000")

    @pytest.mark.unit
    def test_deleted_client_keeps_payout_in_report(
        self, session, tenant_id, make_client
    ) -> None:
        client = make_client(sales_agent="Mwangi", commission=Decimal("50000"))
        expense = service.create_expense(session, tenant_id, _payout(client.id))
        sales.delete_client(session, tenant_id, client.id)

        assert expense.client_id is None
        report = service.commission_report(session, tenant_id)
        assert report.total_earned == Decimal("0")
        assert report.total_paid == Decimal("20000")
