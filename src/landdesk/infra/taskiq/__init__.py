"""landdesk Infra TaskIQ -- scheduled job broker."""

from landdesk.infra.taskiq.broker import (
    broker,
    get_broker,
    get_result_backend,
    get_scheduler,
    scheduler,
)
from landdesk.infra.taskiq.lifespan import lifespan_contribution
from landdesk.infra.taskiq.settings import TaskIQSettings, get_taskiq_settings

__all__ = [
    "TaskIQSettings",
    "broker",
    "get_broker",
    "get_result_backend",
    "get_scheduler",
    "get_taskiq_settings",
    "lifespan_contribution",
    "scheduler",
]
