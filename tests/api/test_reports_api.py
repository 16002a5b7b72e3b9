"""Integration tests for accounting reports, company settings and backup export."""

from __future__ import annotations

from decimal import Decimal

import pytest


@pytest.fixture()
def books(client, tenant_headers, create_client) -> None:
    create_client(initial_payment="100000")
    resp = client.post(
        "/api/v1/expenses",
        json={"category": "Rent", "amount": "30000", "expense_date": "2026-03-05"},
        headers=tenant_headers,
    )
    assert resp.status_code == 201, resp.text


@pytest.mark.integration
class TestAccountingEndpoints:
    def test_profit_and_loss(self, client, tenant_headers, books) -> None:
        resp = client.get("/api/v1/accounting/profit-and-loss", headers=tenant_headers)
        assert resp.status_code == 200
        report = resp.json()
        assert Decimal(report["income"]["total"]) == Decimal("100000")
        assert Decimal(report["operating_expenses"]) == Decimal("30000")
        assert Decimal(report["net_profit"]) == Decimal("70000")
        assert Decimal(report["profit_margin"]) == Decimal("70.00")
        assert Decimal(report["receivables"]) == Decimal("400000")
        assert [m["month"] for m in report["monthly"]] == ["2026-03"]

    def test_period_outside_activity_is_empty(self, client, tenant_headers, books) -> None:
        resp = client.get(
            "/api/v1/accounting/profit-and-loss?from=2026-05-01&to=2026-05-31",
            headers=tenant_headers,
        )
        report = resp.json()
        assert Decimal(report["income"]["total"]) == Decimal("0")
        assert Decimal(report["profit_margin"]) == Decimal("0")

    def test_reversed_period_is_rejected(self, client, tenant_headers) -> None:
        resp = client.get(
            "/api/v1/accounting/profit-and-loss?from=2026-05-01&to=2026-04-01",
            headers=tenant_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["context"]["field"] == "from"

    def test_client_summary(self, client, tenant_headers, books) -> None:
        summary = client.get("/api/v1/accounting/client-summary", headers=tenant_headers).json()
        assert summary["total_clients"] == 1
        assert summary["active"] == 1
        assert Decimal(summary["collection_rate"]) == Decimal("20.00")

    def test_general_ledger(self, client, tenant_headers, books) -> None:
        resp = client.get("/api/v1/accounting/general-ledger", headers=tenant_headers)
        assert resp.status_code == 200
        ledger = resp.json()
        assert [(e["type"], e["category"]) for e in ledger["entries"]] == [
            ("debit", "Rent"),
            ("credit", "Revenue"),
        ]
        assert Decimal(ledger["entries"][0]["balance"]) == Decimal("70000")
        assert Decimal(ledger["net_balance"]) == Decimal("70000")
        assert ledger["entry_count"] == 2

    def test_general_ledger_search(self, client, tenant_headers, books) -> None:
        ledger = client.get(
            "/api/v1/accounting/general-ledger?search=wanjiru", headers=tenant_headers
        ).json()
        assert [e["category"] for e in ledger["entries"]] == ["Revenue"]
        assert Decimal(ledger["total_debits"]) == Decimal("30000")

    def test_cancellation_audit_flags_unbooked_refund(
        self, client, tenant_headers, create_client
    ) -> None:
        buyer = create_client(initial_payment="100000")
        resp = client.post(
            f"/api/v1/clients/{buyer['id']}/cancel",
            json={"refund_amount": "60000", "cancellation_date": "2026-04-01"},
            headers=tenant_headers,
        )
        assert resp.status_code == 201, resp.text

        audit = client.get("/api/v1/accounting/cancellation-audit", headers=tenant_headers).json()
        assert audit["pending_count"] == 1
        assert Decimal(audit["refund_expenses"]) == Decimal("0")
        assert Decimal(audit["refund_variance"]) == Decimal("-60000")
        assert [e["category"] for e in audit["entries"]] == [
            "Revenue Loss",
            "Cash Outflow",
            "Retained",
        ]

    @pytest.mark.parametrize("report", ["general-ledger", "cancellation-audit"])
    def test_reversed_period_is_rejected_everywhere(self, client, tenant_headers, report) -> None:
        resp = client.get(
            f"/api/v1/accounting/{report}?from=2026-05-01&to=2026-04-01",
            headers=tenant_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["context"]["field"] == "from"


@pytest.mark.integration
class TestCompanySettingsEndpoints:
    def test_defaults_then_update(self, client, tenant_headers) -> None:
        defaults = client.get("/api/v1/company-settings", headers=tenant_headers).json()
        assert defaults["company_name"] == "My Company"

        resp = client.put(
            "/api/v1/company-settings",
            json={"company_name": "Acme Realty", "phone": "0722 000 111"},
            headers=tenant_headers,
        )
        assert resp.status_code == 200
        body = client.get("/api/v1/company-settings", headers=tenant_headers).json()
        assert body["company_name"] == "Acme Realty"
        assert body["phone"] == "0722 000 111"

    def test_staff_can_read_but_not_write(self, client, tenant_headers, as_staff) -> None:
        assert client.get("/api/v1/company-settings", headers=tenant_headers).status_code == 200
        resp = client.put(
            "/api/v1/company-settings", json={"company_name": "X"}, headers=tenant_headers
        )
        assert resp.status_code == 403


@pytest.mark.integration
class TestBackupExportEndpoint:
    def test_export_is_an_attachment(self, client, tenant_headers, books) -> None:
        resp = client.get("/api/v1/backup/export", headers=tenant_headers)
        assert resp.status_code == 200
        disposition = resp.headers["Content-Disposition"]
        assert disposition.startswith('attachment; filename="acme-realty_backup_')
        document = resp.json()
        assert document["metadata"]["tenant_id"] == "acme-realty"
        assert len(document["clients"]) == 1
        assert len(document["expenses"]) == 1

    def test_staff_cannot_export(self, client, tenant_headers, as_staff) -> None:
        assert client.get("/api/v1/backup/export", headers=tenant_headers).status_code == 403
