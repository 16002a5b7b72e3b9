"""Shared fixtures: in-memory database, principals and the API test client."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Model modules register their tables on Base.metadata when imported.
import landdesk.domain.cancellations.models
import landdesk.domain.company.models
import landdesk.domain.expenses.models
import landdesk.domain.inventory.models
import landdesk.domain.payroll.models
import landdesk.domain.sales.models
import landdesk.domain.tenancy.models  # noqa: F401
from landdesk.domain.tenancy.dependencies import get_tenant_application
from landdesk.domain.tenancy.tenant_app import TenantApplication
from landdesk.foundation.domain import Principal, Role
from landdesk.infra.auth.dependencies import get_current_principal
from landdesk.infra.fastapi.app_factory import create_app
from landdesk.infra.persistence.base import Base
from landdesk.infra.persistence.database import get_db_session

if TYPE_CHECKING:
    from collections.abc import Iterator

    from fastapi import FastAPI
    from sqlalchemy import Engine
    from sqlalchemy.orm import Session

TENANT = "acme-realty"
OTHER_TENANT = "summit-homes"
USER_ID = UUID("00000000-0000-0000-0000-000000000001")

# Entry-point names excluded in tests (no PostgreSQL, Redis or signing secret).
TEST_EXCLUDE_NAMES = frozenset(
    {
        "jwt_auth",
        "persistence",
        "observability",
        "taskiq",
        "tenant_app",
        "tenant_state",
    }
)


def make_principal(*roles: str, tenant_id: str = TENANT) -> Principal:
    return Principal(
        subject=str(USER_ID),
        tenant_id=tenant_id,
        user_id=USER_ID,
        roles=tuple(roles),
        email="user@example.com",
    )


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with factory() as session:
        yield session


@pytest.fixture()
def principal() -> dict[str, Principal]:
    """Mutable holder for the principal the API sees; admin by default."""
    return {"current": make_principal(Role.ADMIN)}


@pytest.fixture()
def tenant_app() -> Iterator[TenantApplication]:
    app = TenantApplication()
    yield app
    app.close()


@pytest.fixture()
def app(
    session: Session,
    principal: dict[str, Principal],
    tenant_app: TenantApplication,
) -> FastAPI:
    app = create_app(exclude_names=TEST_EXCLUDE_NAMES)
    app.dependency_overrides[get_db_session] = lambda: session
    app.dependency_overrides[get_current_principal] = lambda: principal["current"]
    app.dependency_overrides[get_tenant_application] = lambda: tenant_app
    return app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def tenant_headers() -> dict[str, str]:
    """Headers that provide tenant context for requests."""
    return {"X-Tenant-ID": TENANT, "X-User-ID": str(USER_ID)}


@pytest.fixture()
def as_staff(principal: dict[str, Principal]) -> Principal:
    principal["current"] = make_principal(Role.STAFF)
    return principal["current"]


@pytest.fixture()
def as_operator(principal: dict[str, Principal]) -> Principal:
    principal["current"] = make_principal(Role.SUPER_ADMIN, tenant_id="")
    return principal["current"]


@pytest.fixture()
def tenant_id() -> str:
    return TENANT


@pytest.fixture()
def other_tenant_id() -> str:
    return OTHER_TENANT
