"""Integration tests for request and correlation id propagation."""

from __future__ import annotations

from uuid import UUID

import pytest


@pytest.mark.integration
class TestRequestIdPropagation:
    def test_generates_request_id(self, client, tenant_headers) -> None:
        resp = client.get("/api/v1/projects", headers=tenant_headers)
        UUID(resp.headers["X-Request-ID"])

    def test_propagates_provided_request_id(self, client, tenant_headers) -> None:
        provided = "12345678-1234-5678-1234-567812345678"
        headers = {**tenant_headers, "X-Request-ID": provided}
        resp = client.get("/api/v1/projects", headers=headers)
        assert resp.headers["X-Request-ID"] == provided

    def test_replaces_invalid_request_id(self, client, tenant_headers) -> None:
        headers = {**tenant_headers, "X-Request-ID": "not-a-uuid"}
        resp = client.get("/api/v1/projects", headers=headers)
        assert resp.headers["X-Request-ID"] != "not-a-uuid"
        UUID(resp.headers["X-Request-ID"])


@pytest.mark.integration
class TestCorrelationIdPropagation:
    def test_generates_correlation_id(self, client, tenant_headers) -> None:
        resp = client.get("/api/v1/projects", headers=tenant_headers)
        UUID(resp.headers["X-Correlation-ID"])

    def test_propagates_provided_correlation_id(self, client, tenant_headers) -> None:
        headers = {**tenant_headers, "X-Correlation-ID": "custom-corr-123"}
        resp = client.get("/api/v1/projects", headers=headers)
        assert resp.headers["X-Correlation-ID"] == "custom-corr-123"

    def test_error_responses_carry_ids(self, client) -> None:
        resp = client.get("/api/v1/projects", headers={"X-Correlation-ID": "corr-400"})
        assert resp.status_code == 400
        assert resp.headers["X-Correlation-ID"] == "corr-400"
        assert "X-Request-ID" in resp.headers


@pytest.mark.integration
class TestCreatedByAudit:
    def test_acting_user_is_recorded(self, client, tenant_headers, create_client) -> None:
        buyer = create_client()
        assert buyer["created_by"] == tenant_headers["X-User-ID"]
