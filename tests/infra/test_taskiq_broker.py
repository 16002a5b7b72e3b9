"""Unit tests for landdesk.infra.taskiq.broker."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from taskiq import AsyncBroker, TaskiqScheduler
from taskiq.cli.utils import import_object
from taskiq_redis import RedisStreamBroker

from landdesk.infra.taskiq.broker import get_broker, get_result_backend, get_scheduler
from landdesk.infra.taskiq.lifespan import load_task_modules
from landdesk.infra.taskiq.settings import get_taskiq_settings


@pytest.mark.unit
class TestCliTargets:
    def test_worker_target_is_a_broker(self) -> None:
        target = import_object("landdesk.infra.taskiq.broker:broker")
        assert isinstance(target, AsyncBroker)

    def test_scheduler_target_is_a_scheduler(self) -> None:
        target = import_object("landdesk.infra.taskiq.broker:scheduler")
        assert isinstance(target, TaskiqScheduler)
        assert target.broker is import_object("landdesk.infra.taskiq.broker:broker")

    def test_task_modules_register_on_the_worker_broker(self) -> None:
        import_object("landdesk.domain.sales.tasks:refresh_overdue_statuses_task")
        import_object("landdesk.domain.backup.tasks:backup_all_tenants_task")
        target = import_object("landdesk.infra.taskiq.broker:broker")

        assert target.find_task("sales.refresh_overdue_statuses") is not None
        assert target.find_task("backup.backup_all_tenants") is not None


@pytest.mark.unit
class TestFactories:
    @pytest.fixture(autouse=True)
    def _fresh(self):
        for factory in (get_taskiq_settings, get_result_backend, get_broker, get_scheduler):
            factory.cache_clear()
        yield
        for factory in (get_taskiq_settings, get_result_backend, get_broker, get_scheduler):
            factory.cache_clear()

    def test_broker_uses_configured_redis(self) -> None:
        with patch.dict("os.environ", {"TASKIQ_REDIS_URL": "redis://queue:6379/3"}):
            assert isinstance(get_broker(), RedisStreamBroker)
            assert get_taskiq_settings().redis_url == "redis://queue:6379/3"

    def test_broker_is_cached(self) -> None:
        assert get_broker() is get_broker()

    def test_scheduler_shares_the_broker(self) -> None:
        assert get_scheduler().broker is get_broker()


@pytest.mark.unit
class TestApiLifespan:
    def test_scheduled_jobs_are_loaded_before_startup(self) -> None:
        tasks = load_task_modules()
        assert "sales.refresh_overdue_statuses" in tasks
        assert "backup.backup_all_tenants" in tasks
        assert tasks == sorted(tasks)
