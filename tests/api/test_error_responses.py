"""Integration tests for RFC 7807 problem responses across the API."""

from __future__ import annotations

import pytest

PROBLEM_JSON = "application/problem+json"
MISSING = "00000000-0000-0000-0000-0000000000ff"


@pytest.mark.integration
class TestProblemDetails:
    def test_not_found(self, client, tenant_headers) -> None:
        resp = client.get(f"/api/v1/clients/{MISSING}", headers=tenant_headers)
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith(PROBLEM_JSON)
        body = resp.json()
        assert body["type"] == "/errors/not-found"
        assert body["title"] == "Resource Not Found"
        assert body["status"] == 404
        assert body["error_code"] == "RESOURCE_NOT_FOUND"
        assert body["instance"] == f"/api/v1/clients/{MISSING}"

    def test_request_validation_lists_errors(self, client, tenant_headers) -> None:
        resp = client.post("/api/v1/clients", json={"phone": "0712"}, headers=tenant_headers)
        assert resp.status_code == 422
        assert resp.headers["content-type"].startswith(PROBLEM_JSON)
        body = resp.json()
        assert body["type"] == "/errors/request-validation-error"
        assert any(error["loc"][-1] == "name" for error in body["context"]["errors"])

    def test_malformed_uuid_is_request_validation(self, client, tenant_headers) -> None:
        resp = client.get("/api/v1/clients/not-a-uuid", headers=tenant_headers)
        assert resp.status_code == 422
        assert resp.json()["error_code"] == "REQUEST_VALIDATION_ERROR"

    def test_missing_tenant(self, client) -> None:
        resp = client.get("/api/v1/clients")
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith(PROBLEM_JSON)
        assert resp.json()["error_code"] == "TENANT_REQUIRED"

    def test_forbidden_names_required_roles(self, client, tenant_headers, as_staff) -> None:
        resp = client.get("/api/v1/payroll/employees", headers=tenant_headers)
        assert resp.status_code == 403
        body = resp.json()
        assert body["type"] == "/errors/forbidden"
        assert body["error_code"] == "AUTHORIZATION_ERROR"
        assert body["context"]["required_roles"] == ["admin"]


@pytest.mark.integration
class TestTenantIsolation:
    def test_other_tenant_cannot_see_client(
        self, client, tenant_headers, other_tenant_id, create_client
    ) -> None:
        buyer = create_client()
        other_headers = {**tenant_headers, "X-Tenant-ID": other_tenant_id}

        resp = client.get(f"/api/v1/clients/{buyer['id']}", headers=other_headers)
        assert resp.status_code == 404
        assert client.get("/api/v1/clients", headers=other_headers).json() == []
