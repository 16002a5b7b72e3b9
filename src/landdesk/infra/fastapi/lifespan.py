"""Lifespan composition for the app factory."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from landdesk.foundation.application import LifespanContribution

logger = logging.getLogger(__name__)


def compose_lifespan(
    hooks: list[LifespanContribution],
) -> object:
    """Combine lifespan hooks into one FastAPI ``lifespan`` factory.

    Hooks are entered in ascending priority and exited in reverse, so the
    database is still available while the tenancy application shuts down.

    Args:
        hooks: LifespanContribution instances, in any order.

    Returns:
        An async context manager factory for ``FastAPI(lifespan=...)``.
    """
    sorted_hooks = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contribution in sorted_hooks:
                logger.info(
                    "lifespan_hook_entering: priority=%d hook=%r",
                    contribution.priority,
                    contribution.hook,
                )
                await stack.enter_async_context(contribution.hook(app))
            yield

    return lifespan
