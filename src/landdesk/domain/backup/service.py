"""Tenant data export.

A backup is a single JSON document::

    {
        "metadata": {"created_at": ..., "version": "1.0", "type": "manual",
                     "tenant_id": ..., "tables": [...]},
        "clients": [...],
        "payments": [...],
        ...
    }

Rows are exported column by column. Decimals become strings and dates
ISO 8601, so amounts survive the round trip exactly.
"""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from sqlalchemy import select

from landdesk.domain.cancellations.models import CancelledSale
from landdesk.domain.company.models import CompanySettings
from landdesk.domain.expenses.models import Expense
from landdesk.domain.inventory.models import Plot, Project
from landdesk.domain.payroll.models import (
    Employee,
    EmployeeDeduction,
    PayrollRecord,
    StatutoryRate,
)
from landdesk.domain.sales.models import Client, Payment
from landdesk.infra.observability.instrumentation import traced_operation
from landdesk.infra.persistence.base import utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from pathlib import Path

    from sqlalchemy.orm import Session

    from landdesk.infra.persistence.base import Base

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"

_ROW_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])

#: Exported tables, in export order.
BACKUP_TABLES: dict[str, type[Base]] = {
    "clients": Client,
    "payments": Payment,
    "projects": Project,
    "plots": Plot,
    "expenses": Expense,
    "cancelled_sales": CancelledSale,
    "employees": Employee,
    "payroll_records": PayrollRecord,
    "employee_deductions": EmployeeDeduction,
    "statutory_rates": StatutoryRate,
    "company_settings": CompanySettings,
}


class BackupType(StrEnum):
    MANUAL = "manual"
    SCHEDULED = "scheduled"


@traced_operation("backup.export_backup")
def export_backup(
    session: Session,
    tenant_id: str,
    *,
    backup_type: BackupType = BackupType.MANUAL,
) -> dict[str, Any]:
    """Export every tenant-scoped row of ``tenant_id`` as a JSON-ready dict."""
    document: dict[str, Any] = {
        "metadata": {
            "created_at": utcnow().isoformat(),
            "version": BACKUP_VERSION,
            "type": backup_type.value,
            "tenant_id": tenant_id,
            "tables": list(BACKUP_TABLES),
        }
    }
    for name, model in BACKUP_TABLES.items():
        rows = session.scalars(
            select(model).where(model.tenant_id == tenant_id).order_by(model.created_at)
        )
        document[name] = [_ROW_ADAPTER.dump_python(row.to_dict(), mode="json") for row in rows]
    logger.info(
        "backup_exported: tenant_id=%s type=%s rows=%d",
        tenant_id,
        backup_type.value,
        sum(len(document[name]) for name in BACKUP_TABLES),
    )
    return document


def backup_filename(tenant_id: str, created_at: datetime) -> str:
    """``<tenant>_backup_<UTC timestamp>.json``; names sort oldest first."""
    return f"{tenant_id}_backup_{created_at.strftime('%Y%m%dT%H%M%SZ')}.json"


def write_backup(directory: Path, document: dict[str, Any]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    tenant_id = document["metadata"]["tenant_id"]
    path = directory / backup_filename(tenant_id, utcnow())
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def prune_backups(directory: Path, tenant_id: str, keep: int) -> list[Path]:
    """Delete all but the newest ``keep`` backup files of ``tenant_id``.

    Returns:
        The deleted paths.
    """
    files = sorted(directory.glob(f"{tenant_id}_backup_*.json"), reverse=True)
    stale = files[keep:]
    for path in stale:
        path.unlink()
    return stale
