"""Settings for the landdesk API process.

``APP_`` variables shape the FastAPI app and choose which entry points to
skip; ``CORS_`` variables admit the back-office frontend. List values may
be given as comma-separated strings, e.g.
``APP_EXCLUDE_ENTRY_POINTS=taskiq,observability`` for a deployment without
Redis or a collector.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from landdesk import __version__


def _split_csv(v: Any) -> Any:
    if isinstance(v, str):
        return [part.strip() for part in v.split(",") if part.strip()]
    return v


CsvList = Annotated[list[str], NoDecode]
CsvSet = Annotated[frozenset[str], NoDecode]


class CORSSettings(BaseSettings):
    """Which browser origins may call the API.

    The frontend downloads backups, so ``Content-Disposition`` is exposed
    alongside the request and correlation ids.
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    allow_origins: CsvList = Field(default=["*"])
    allow_methods: CsvList = Field(default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"])
    allow_headers: CsvList = Field(default=["*"])
    allow_credentials: bool = False
    expose_headers: CsvList = Field(
        default=["X-Request-ID", "X-Correlation-ID", "Content-Disposition"]
    )

    @field_validator(
        "allow_origins", "allow_methods", "allow_headers", "expose_headers", mode="before"
    )
    @classmethod
    def _parse_lists(cls, v: Any) -> Any:
        return _split_csv(v)

    @model_validator(mode="after")
    def _credentials_need_explicit_origins(self) -> CORSSettings:
        if self.allow_credentials and "*" in self.allow_origins:
            msg = "CORS_ALLOW_CREDENTIALS requires explicit CORS_ALLOW_ORIGINS, not '*'"
            raise ValueError(msg)
        return self


class AppSettings(BaseSettings):
    """FastAPI app settings (``APP_`` prefix).

    ``APP_DOCS_ENABLED=false`` hides the interactive docs and the OpenAPI
    schema together.
    """

    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    title: str = "landdesk"
    version: str = __version__
    description: str = "Land and plot sales back office: clients, plots, payroll, accounts"
    docs_enabled: bool = True
    debug: bool = False
    cors: CORSSettings = Field(default_factory=CORSSettings)

    exclude_groups: CsvSet = Field(default=frozenset())
    exclude_entry_points: CsvSet = Field(default=frozenset())

    @field_validator("exclude_groups", "exclude_entry_points", mode="before")
    @classmethod
    def _parse_names(cls, v: Any) -> Any:
        return _split_csv(v)

    @property
    def docs_url(self) -> str | None:
        return "/docs" if self.docs_enabled else None

    @property
    def redoc_url(self) -> str | None:
        return "/redoc" if self.docs_enabled else None

    @property
    def openapi_url(self) -> str | None:
        return "/openapi.json" if self.docs_enabled else None
