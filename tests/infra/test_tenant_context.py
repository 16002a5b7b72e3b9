"""Unit tests for landdesk.infra.persistence.tenant_context."""

from __future__ import annotations

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from landdesk.foundation.application.context import (
    clear_request_context,
    set_request_context,
)
from landdesk.infra.persistence.tenant_context import (
    _set_tenant_context_on_begin,
    bind_tenant,
    register_tenant_context_handler,
)


def _postgres_connection() -> MagicMock:
    connection = MagicMock()
    connection.dialect.name = "postgresql"
    return connection


class TestSetTenantContextOnBegin:
    @pytest.mark.unit
    def test_sets_tenant_when_context_available(self) -> None:
        token = set_request_context(
            tenant_id="acme-realty", user_id=uuid4(), correlation_id="corr-123"
        )
        try:
            connection = _postgres_connection()
            _set_tenant_context_on_begin(MagicMock(spec=Session), MagicMock(), connection)
            connection.execute.assert_called_once()
            args = connection.execute.call_args[0]
            assert "set_config" in str(args[0])
            assert args[1] == {"tenant": "acme-realty"}
        finally:
            clear_request_context(token)

    @pytest.mark.unit
    def test_skips_when_no_request_context(self) -> None:
        connection = _postgres_connection()
        _set_tenant_context_on_begin(MagicMock(spec=Session), MagicMock(), connection)
        connection.execute.assert_not_called()

    @pytest.mark.unit
    def test_skips_when_tenant_id_empty(self) -> None:
        token = set_request_context(tenant_id="", user_id=uuid4(), correlation_id="corr-123")
        try:
            connection = _postgres_connection()
            _set_tenant_context_on_begin(MagicMock(spec=Session), MagicMock(), connection)
            connection.execute.assert_not_called()
        finally:
            clear_request_context(token)

    @pytest.mark.unit
    def test_skips_other_dialects(self) -> None:
        token = set_request_context(
            tenant_id="acme-realty", user_id=uuid4(), correlation_id="corr-123"
        )
        try:
            connection = MagicMock()
            connection.dialect.name = "sqlite"
            _set_tenant_context_on_begin(MagicMock(spec=Session), MagicMock(), connection)
            connection.execute.assert_not_called()
        finally:
            clear_request_context(token)


class TestRegisterTenantContextHandler:
    @pytest.mark.unit
    def test_registers_event_listener(self) -> None:
        with patch("landdesk.infra.persistence.tenant_context.event") as mock_event:
            mock_event.contains.return_value = False
            register_tenant_context_handler()
            mock_event.listen.assert_called_once_with(
                Session, "after_begin", _set_tenant_context_on_begin
            )

    @pytest.mark.unit
    def test_skips_registered_listener(self) -> None:
        with patch("landdesk.infra.persistence.tenant_context.event") as mock_event:
            mock_event.contains.return_value = True
            register_tenant_context_handler()
            mock_event.listen.assert_not_called()


class TestBindTenant:
    @pytest.mark.unit
    def test_binds_on_postgres(self) -> None:
        session = MagicMock(spec=Session)
        session.get_bind.return_value.dialect.name = "postgresql"
        bind_tenant(session, "summit-homes")
        args = session.execute.call_args[0]
        assert args[1] == {"tenant": "summit-homes"}

    @pytest.mark.unit
    def test_noop_on_sqlite(self, session) -> None:
        bind_tenant(session, "summit-homes")
