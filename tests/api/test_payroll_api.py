"""Integration tests for the payroll endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest

PERIOD = {"month": 4, "year": 2026}


@pytest.fixture()
def employee(client, tenant_headers) -> dict:
    resp = client.post(
        "/api/v1/payroll/employees",
        json={
            "full_name": "Grace Njeri",
            "national_id": "12345678",
            "kra_pin": "a123456789k",
            "basic_salary": "50000",
            "hire_date": "2026-01-15",
        },
        headers=tenant_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.integration
class TestEmployeeEndpoints:
    def test_create_assigns_number_and_normalizes_pin(self, employee) -> None:
        assert employee["employee_id"] == "EMP-260001"
        assert employee["kra_pin"] == "A123456789K"

    def test_invalid_kra_pin_fails_validation(self, client, tenant_headers) -> None:
        resp = client.post(
            "/api/v1/payroll/employees",
            json={
                "full_name": "Peter Mutua",
                "national_id": "12345678",
                "kra_pin": "123",
                "basic_salary": "40000",
            },
            headers=tenant_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["error_code"] == "REQUEST_VALIDATION_ERROR"

    def test_staff_cannot_reach_payroll(self, client, tenant_headers, as_staff) -> None:
        resp = client.get("/api/v1/payroll/employees", headers=tenant_headers)
        assert resp.status_code == 403


@pytest.mark.integration
class TestPayrollRun:
    def test_preview_does_not_store(self, client, tenant_headers, employee) -> None:
        resp = client.post("/api/v1/payroll/preview", json=PERIOD, headers=tenant_headers)
        assert resp.status_code == 200
        [line] = resp.json()
        assert Decimal(line["net_pay"]) == Decimal("39204.65")
        assert client.get("/api/v1/payroll/records", headers=tenant_headers).json() == []

    def test_run_twice_skips_existing(self, client, tenant_headers, employee) -> None:
        first = client.post("/api/v1/payroll/run", json=PERIOD, headers=tenant_headers)
        assert first.status_code == 201
        [record] = first.json()["created"]
        assert Decimal(record["gross_pay"]) == Decimal("50000")
        assert Decimal(record["net_pay"]) == Decimal("39204.65")
        assert record["is_locked"] is False

        second = client.post("/api/v1/payroll/run", json=PERIOD, headers=tenant_headers).json()
        assert second["created"] == []
        assert second["skipped"] == [employee["id"]]

    def test_approved_record_is_locked(self, client, tenant_headers, employee) -> None:
        run = client.post("/api/v1/payroll/run", json=PERIOD, headers=tenant_headers).json()
        record_id = run["created"][0]["id"]

        approved = client.post(
            f"/api/v1/payroll/records/{record_id}/approve", headers=tenant_headers
        )
        assert approved.status_code == 200
        assert approved.json()["is_locked"] is True

        resp = client.patch(
            f"/api/v1/payroll/records/{record_id}", json={"bonus": "5000"}, headers=tenant_headers
        )
        assert resp.status_code == 409
        body = resp.json()
        assert body["type"] == "/errors/record-locked"
        assert body["error_code"] == "RECORD_LOCKED"

        resp = client.delete(f"/api/v1/payroll/records/{record_id}", headers=tenant_headers)
        assert resp.status_code == 409

    def test_update_recomputes(self, client, tenant_headers, employee) -> None:
        run = client.post("/api/v1/payroll/run", json=PERIOD, headers=tenant_headers).json()
        record_id = run["created"][0]["id"]
        resp = client.patch(
            f"/api/v1/payroll/records/{record_id}",
            json={"other_deductions": "2000"},
            headers=tenant_headers,
        )
        assert resp.status_code == 200
        assert Decimal(resp.json()["net_pay"]) == Decimal("37204.65")
