"""Tests for the scheduled overdue refresh and the task registrations."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from landdesk.domain.backup.tasks import backup_all_tenants_task
from landdesk.domain.sales.models import Client, ClientStatus
from landdesk.domain.sales.tasks import refresh_all_tenants, refresh_overdue_statuses_task

_REPOSITORY = "landdesk.domain.sales.tasks.TenantRepository"


def _tenants(*slugs: str) -> list[SimpleNamespace]:
    return [SimpleNamespace(slug=slug) for slug in slugs]


@pytest.mark.integration
class TestRefreshAllTenants:
    def test_marks_overdue_per_tenant(self, engine, tenant_id, make_client, today) -> None:
        make_client(name="Late payer", next_payment_date=date(2026, 9, 1))
        make_client(name="On time", next_payment_date=date(2026, 11, 1))
        factory = sessionmaker(bind=engine, expire_on_commit=False)

        with patch(_REPOSITORY) as repository:
            repository.return_value.list_all.return_value = _tenants(tenant_id)
            results = refresh_all_tenants(factory, today=today)

        assert results == {tenant_id: (1, 0)}
        with factory() as session:
            statuses = {c.name: c.status for c in session.scalars(select(Client))}
        assert statuses == {
            "Late payer": ClientStatus.OVERDUE.value,
            "On time": ClientStatus.ACTIVE.value,
        }

    def test_failing_tenant_does_not_stop_others(self, engine, tenant_id) -> None:
        factory = sessionmaker(bind=engine, expire_on_commit=False)

        def refresh(session, slug, *, today):
            if slug == "broken-tenant":
                raise RuntimeError("lock timeout")
            return (0, 0)

        with (
            patch(_REPOSITORY) as repository,
            patch("landdesk.domain.sales.tasks.refresh_overdue_statuses", side_effect=refresh),
        ):
            repository.return_value.list_all.return_value = _tenants("broken-tenant", tenant_id)
            results = refresh_all_tenants(factory, today=date(2026, 10, 19))

        assert results == {tenant_id: (0, 0)}


@pytest.mark.unit
class TestTaskRegistration:
    def test_task_names(self) -> None:
        assert refresh_overdue_statuses_task.task_name == "sales.refresh_overdue_statuses"
        assert backup_all_tenants_task.task_name == "backup.backup_all_tenants"

    def test_tasks_carry_cron_schedules(self) -> None:
        for task in (refresh_overdue_statuses_task, backup_all_tenants_task):
            [schedule] = task.labels["schedule"]
            assert "cron" in schedule
