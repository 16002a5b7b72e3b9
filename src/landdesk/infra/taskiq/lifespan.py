"""Connect the API process to the task broker.

The scheduled jobs (overdue refresh, nightly backups) are registered when
their modules are imported, so the hook imports them before starting the
broker; a handler can then enqueue any of them with ``.kiq()``. Workers and
the scheduler are separate processes started with the taskiq CLI.
"""

from __future__ import annotations

import importlib
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from landdesk.foundation.application import LifespanContribution
from landdesk.foundation.application.contributions import LIFESPAN_PRIORITY_TASKIQ
from landdesk.infra.taskiq.broker import broker

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

#: Modules declaring ``@broker.task`` jobs; the CLI commands list the same.
TASK_MODULES = ("landdesk.domain.sales.tasks", "landdesk.domain.backup.tasks")


def load_task_modules() -> list[str]:
    """Import every task module and return the registered task names, sorted."""
    for module in TASK_MODULES:
        importlib.import_module(module)
    return sorted(broker.get_all_tasks())


@asynccontextmanager
async def _taskiq_lifespan(app: Any) -> AsyncIterator[None]:
    tasks = load_task_modules()
    await broker.startup()
    logger.info("task_broker_started: tasks=%s", ",".join(tasks))
    try:
        yield
    finally:
        await broker.shutdown()
        logger.info("task_broker_stopped")


lifespan_contribution = LifespanContribution(
    hook=_taskiq_lifespan,
    priority=LIFESPAN_PRIORITY_TASKIQ,
)
