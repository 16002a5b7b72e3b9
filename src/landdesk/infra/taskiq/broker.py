"""TaskIQ broker and scheduler configured with Redis Stream.

Usage:
    # Start worker with the modules that declare tasks
    # taskiq worker landdesk.infra.taskiq.broker:broker \
    #     landdesk.domain.sales.tasks landdesk.domain.backup.tasks

    # Start scheduler (single instance only)
    # taskiq scheduler landdesk.infra.taskiq.broker:scheduler \
    #     landdesk.domain.sales.tasks landdesk.domain.backup.tasks
"""

from __future__ import annotations

from functools import lru_cache

from taskiq import TaskiqScheduler
from taskiq.schedule_sources import LabelScheduleSource
from taskiq_redis import (
    ListRedisScheduleSource,
    RedisAsyncResultBackend,
    RedisStreamBroker,
)

from landdesk.infra.taskiq.settings import get_taskiq_settings


@lru_cache(maxsize=1)
def get_result_backend() -> RedisAsyncResultBackend[str]:
    """Get or create the TaskIQ result backend."""
    settings = get_taskiq_settings()
    return RedisAsyncResultBackend(
        redis_url=settings.redis_url,
        result_ex_time=settings.result_ttl,
    )


@lru_cache(maxsize=1)
def get_broker() -> RedisStreamBroker:
    """Get or create the TaskIQ broker with its result backend."""
    settings = get_taskiq_settings()
    return RedisStreamBroker(url=settings.redis_url).with_result_backend(get_result_backend())


@lru_cache(maxsize=1)
def get_scheduler() -> TaskiqScheduler:
    """Get or create the TaskIQ scheduler.

    Label schedules come from ``@broker.task(schedule=[...])``. Schedules
    added at runtime are kept in Redis. Only one scheduler may run per
    deployment or jobs fire twice.
    """
    settings = get_taskiq_settings()
    _broker = get_broker()
    return TaskiqScheduler(
        broker=_broker,
        sources=[
            LabelScheduleSource(_broker),
            ListRedisScheduleSource(settings.redis_url),
        ],
    )


# The taskiq CLI imports these targets and checks their types, so they are
# real instances. Building them opens no connection; Redis is first touched
# on ``startup()``.
broker: RedisStreamBroker = get_broker()
scheduler: TaskiqScheduler = get_scheduler()
