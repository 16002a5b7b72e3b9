"""Helpers for API tests: create records through the HTTP surface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi.testclient import TestClient


@pytest.fixture()
def create_project(client: TestClient, tenant_headers: dict[str, str]) -> Callable[..., dict]:
    def _create(name: str = "Kitengela Gardens", **fields: Any) -> dict:
        resp = client.post(
            "/api/v1/projects",
            json={"name": name, "location": "Kitengela", "capacity": 10, **fields},
            headers=tenant_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


@pytest.fixture()
def create_plot(client: TestClient, tenant_headers: dict[str, str]) -> Callable[..., dict]:
    def _create(project: dict, number: str = "A1", price: str = "500000") -> dict:
        resp = client.post(
            f"/api/v1/projects/{project['id']}/plots",
            json={"plot_number": number, "size": "50x100", "price": price},
            headers=tenant_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


@pytest.fixture()
def create_client(client: TestClient, tenant_headers: dict[str, str]) -> Callable[..., dict]:
    def _create(name: str = "Wanjiru Kamau", **fields: Any) -> dict:
        body = {
            "name": name,
            "phone": "0712345678",
            "total_price": "500000",
            "sale_date": "2026-03-02",
            **fields,
        }
        resp = client.post("/api/v1/clients", json=body, headers=tenant_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
