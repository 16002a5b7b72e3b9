"""Tests for tenant backups: export, files on disk and the scheduled job."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker

from landdesk.domain.backup import service
from landdesk.domain.backup.service import BACKUP_TABLES, BackupType
from landdesk.domain.backup.settings import BackupSettings
from landdesk.domain.backup.tasks import backup_all_tenants
from landdesk.domain.expenses import service as expenses
from landdesk.domain.expenses.models import ExpenseCategory
from landdesk.domain.expenses.schemas import ExpenseCreate


class TestExportBackup:
    @pytest.mark.unit
    def test_document_layout(self, session, tenant_id, make_client) -> None:
        make_client(initial_payment="100000")
        document = service.export_backup(session, tenant_id)

        metadata = document["metadata"]
        assert metadata["version"] == service.BACKUP_VERSION
        assert metadata["type"] == "manual"
        assert metadata["tenant_id"] == tenant_id
        assert metadata["tables"] == list(BACKUP_TABLES)
        assert set(document) == {"metadata", *BACKUP_TABLES}
        assert len(document["clients"]) == 1
        assert len(document["payments"]) == 1
        assert document["projects"] == []

    @pytest.mark.unit
    def test_rows_are_json_ready(self, session, tenant_id, make_client) -> None:
        make_client(initial_payment="100000")
        document = service.export_backup(session, tenant_id)

        [payment] = document["payments"]
        assert Decimal(payment["amount"]) == Decimal("100000")
        assert payment["payment_date"] == "2026-03-02"
        assert payment["receipt_number"] == "LIP-202603-0001"
        json.dumps(document)

    @pytest.mark.unit
    def test_only_own_tenant_rows(self, session, tenant_id, other_tenant_id) -> None:
        expenses.create_expense(
            session,
            other_tenant_id,
            ExpenseCreate(category=ExpenseCategory.RENT, amount=Decimal("30000")),
        )
        document = service.export_backup(session, tenant_id, backup_type=BackupType.SCHEDULED)
        assert document["expenses"] == []
        assert document["metadata"]["type"] == "scheduled"


class TestBackupFiles:
    @pytest.mark.unit
    def test_filename(self) -> None:
        created = datetime(2026, 10, 19, 2, 30, 5, tzinfo=UTC)
        assert service.backup_filename("acme-realty", created) == (
            "acme-realty_backup_20261019T023005Z.json"
        )

    @pytest.mark.unit
    def test_write_backup(self, tmp_path) -> None:
        document = {"metadata": {"tenant_id": "acme-realty"}, "clients": []}
        path = service.write_backup(tmp_path / "nested", document)
        assert path.parent == tmp_path / "nested"
        assert path.name.startswith("acme-realty_backup_")
        assert json.loads(path.read_text(encoding="utf-8")) == document

    @pytest.mark.unit
    def test_prune_keeps_newest_of_tenant(self, tmp_path) -> None:
        for stamp in ("20261001T000000Z", "20261002T000000Z", "20261003T000000Z"):
            (tmp_path / f"acme-realty_backup_{stamp}.json").write_text("{}")
        other = tmp_path / "summit-homes_backup_20260101T000000Z.json"
        other.write_text("{}")

        removed = service.prune_backups(tmp_path, "acme-realty", keep=2)

        assert [p.name for p in removed] == ["acme-realty_backup_20261001T000000Z.json"]
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "acme-realty_backup_20261002T000000Z.json",
            "acme-realty_backup_20261003T000000Z.json",
            "summit-homes_backup_20260101T000000Z.json",
        ]


@pytest.mark.integration
class TestScheduledBackup:
    def test_writes_one_file_per_active_tenant(self, engine, tmp_path) -> None:
        factory = sessionmaker(bind=engine, expire_on_commit=False)
        tenants = [SimpleNamespace(slug="acme-realty"), SimpleNamespace(slug="summit-homes")]
        settings = BackupSettings(directory=tmp_path, retention=3)

        with patch("landdesk.domain.backup.tasks.TenantRepository") as repository:
            repository.return_value.list_all.return_value = tenants
            written = backup_all_tenants(factory, settings)

        repository.return_value.list_all.assert_called_once_with("ACTIVE")
        assert set(written) == {"acme-realty", "summit-homes"}
        document = json.loads(written["acme-realty"].read_text(encoding="utf-8"))
        assert document["metadata"]["type"] == "scheduled"

    def test_failing_tenant_is_skipped(self, engine, tmp_path) -> None:
        factory = sessionmaker(bind=engine, expire_on_commit=False)
        tenants = [SimpleNamespace(slug="acme-realty"), SimpleNamespace(slug="summit-homes")]
        settings = BackupSettings(directory=tmp_path, retention=3)
        real_export = service.export_backup

        def export(session, tenant_id, **kwargs):
            if tenant_id == "acme-realty":
                raise RuntimeError("disk full")
            return real_export(session, tenant_id, **kwargs)

        with (
            patch("landdesk.domain.backup.tasks.TenantRepository") as repository,
            patch("landdesk.domain.backup.tasks.export_backup", side_effect=export),
        ):
            repository.return_value.list_all.return_value = tenants
            written = backup_all_tenants(factory, settings)

        assert list(written) == ["summit-homes"]
