"""Unit tests for the startup schema check in landdesk.infra.persistence.lifespan."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from landdesk.infra.persistence.lifespan import missing_tables


@pytest.mark.unit
class TestMissingTables:
    def test_migrated_database_has_nothing_missing(self, engine) -> None:
        assert missing_tables(engine) == []

    def test_empty_database_reports_every_table(self) -> None:
        empty = create_engine("sqlite+pysqlite://", poolclass=StaticPool)
        try:
            missing = missing_tables(empty)
        finally:
            empty.dispose()
        assert "clients" in missing
        assert "payments" in missing
        assert missing == sorted(missing)
