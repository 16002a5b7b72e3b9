"""Unit tests for landdesk.infra.observability.middleware."""

from __future__ import annotations

from typing import Any

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from landdesk.infra.observability.middleware import TraceContextMiddleware


async def _log_context(request: Request) -> JSONResponse:
    return JSONResponse(structlog.contextvars.get_contextvars())


def _inner() -> TraceContextMiddleware:
    return TraceContextMiddleware(Starlette(routes=[Route("/ctx", _log_context)]))


@pytest.fixture()
def exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture()
def traced(exporter: InMemorySpanExporter) -> TestClient:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    tracer = provider.get_tracer("tests")
    middleware = _inner()

    async def app(scope: dict[str, Any], receive: Any, send: Any) -> None:
        with tracer.start_as_current_span("request"):
            await middleware(scope, receive, send)

    return TestClient(app)


@pytest.mark.unit
class TestTraceContextMiddleware:
    def test_trace_id_is_logged_and_returned(self, traced, exporter) -> None:
        resp = traced.get("/ctx")
        [span] = exporter.get_finished_spans()
        trace_id = format(span.context.trace_id, "032x")
        assert resp.headers["X-Trace-ID"] == trace_id
        assert resp.json()["trace_id"] == trace_id
        assert resp.json()["span_id"] == format(span.context.span_id, "016x")

    def test_span_is_tagged_with_tenant(self, traced, exporter) -> None:
        traced.get("/ctx", headers={"X-Tenant-ID": "acme-realty"})
        [span] = exporter.get_finished_spans()
        assert span.attributes["landdesk.tenant_id"] == "acme-realty"

    def test_context_is_cleared_after_the_request(self, traced) -> None:
        traced.get("/ctx")
        assert "trace_id" not in structlog.contextvars.get_contextvars()

    def test_passthrough_without_tracing(self) -> None:
        resp = TestClient(_inner()).get("/ctx")
        assert resp.status_code == 200
        assert "X-Trace-ID" not in resp.headers
        assert "trace_id" not in resp.json()
