"""OpenTelemetry tracing configuration.

Tracing is off unless ``OTEL_EXPORTER_TYPE`` is ``otlp`` or ``console``.
The OTLP exporter ships in the ``otlp`` extra.

Usage:
    from landdesk.infra.observability.tracing import configure_tracing, shutdown_tracing

    configure_tracing(app)
    ...
    shutdown_tracing()
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from fastapi import FastAPI

_tracer_provider: TracerProvider | None = None

_EXPORTER_TYPES = frozenset({"otlp", "console", "none"})


class TracingSettings(BaseSettings):
    """OpenTelemetry configuration from the standard ``OTEL_*`` variables.

    Attributes:
        service_name: ``OTEL_SERVICE_NAME`` (default: landdesk-api).
        service_version: ``OTEL_SERVICE_VERSION``.
        exporter_type: ``OTEL_EXPORTER_TYPE``: otlp, console or none.
        otlp_endpoint: ``OTEL_EXPORTER_OTLP_ENDPOINT``.
        otlp_headers: ``OTEL_EXPORTER_OTLP_HEADERS`` as ``k1=v1,k2=v2``.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    service_name: str = Field(default="landdesk-api", alias="OTEL_SERVICE_NAME")
    service_version: str = Field(default="unknown", alias="OTEL_SERVICE_VERSION")
    exporter_type: str = Field(default="none", alias="OTEL_EXPORTER_TYPE")
    otlp_endpoint: str = Field(default="http://localhost:4317", alias="OTEL_EXPORTER_OTLP_ENDPOINT")
    otlp_headers: str = Field(default="", alias="OTEL_EXPORTER_OTLP_HEADERS")

    @field_validator("exporter_type", mode="before")
    @classmethod
    def normalize_exporter_type(cls, v: Any) -> str:
        return v.lower() if isinstance(v, str) else str(v)

    @field_validator("exporter_type")
    @classmethod
    def validate_exporter_type(cls, v: str) -> str:
        if v not in _EXPORTER_TYPES:
            msg = f"exporter_type must be one of {sorted(_EXPORTER_TYPES)}"
            raise ValueError(msg)
        return v

    @property
    def is_enabled(self) -> bool:
        return self.exporter_type != "none"

    @property
    def otlp_headers_dict(self) -> dict[str, str]:
        """Parse ``OTEL_EXPORTER_OTLP_HEADERS``.

        Example:
            >>> TracingSettings(otlp_headers="key1=val1,key2=a=b").otlp_headers_dict
            {'key1': 'val1', 'key2': 'a=b'}
        """
        result: dict[str, str] = {}
        for pair in self.otlp_headers.split(","):
            if "=" in pair:
                key, value = pair.split("=", 1)
                result[key.strip()] = value.strip()
        return result


@lru_cache(maxsize=1)
def get_tracing_settings() -> TracingSettings:
    """Get cached TracingSettings instance."""
    return TracingSettings()


def _create_exporter(settings: TracingSettings) -> SpanExporter:
    if settings.exporter_type == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # type: ignore[import-not-found]
            OTLPSpanExporter,
        )

        return OTLPSpanExporter(  # type: ignore[no-any-return]
            endpoint=settings.otlp_endpoint,
            headers=settings.otlp_headers_dict or None,
        )
    if settings.exporter_type == "console":
        return ConsoleSpanExporter()
    msg = f"Unknown exporter type: {settings.exporter_type}"
    raise ValueError(msg)


def configure_tracing(app: FastAPI, settings: TracingSettings | None = None) -> None:
    """Install a TracerProvider and instrument the FastAPI app.

    Returns immediately when the exporter type is ``none``.

    Args:
        app: FastAPI application instance for instrumentation.
        settings: Optional TracingSettings. Loaded from environment if None.
    """
    global _tracer_provider

    if settings is None:
        settings = get_tracing_settings()
    if not settings.is_enabled:
        return

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": settings.service_version,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(_create_exporter(settings)))
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    from opentelemetry.instrumentation.fastapi import (  # type: ignore[import-not-found]
        FastAPIInstrumentor,
    )

    FastAPIInstrumentor.instrument_app(app)


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down. Idempotent."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None
