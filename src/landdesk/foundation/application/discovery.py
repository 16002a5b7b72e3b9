"""Entry-point based discovery of routers, middleware, handlers and hooks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiscoveredContribution:
    """A loaded entry point.

    Attributes:
        name: Entry point name (e.g. ``"sales"``).
        group: Entry point group (e.g. ``"landdesk.routers"``).
        value: The loaded object.
    """

    name: str
    group: str
    value: Any


def discover(
    group: str,
    *,
    exclude_names: frozenset[str] = frozenset(),
) -> list[DiscoveredContribution]:
    """Load every entry point registered under ``group``.

    Entry points that fail to import are logged and skipped so a broken
    optional package cannot take the whole service down.

    Args:
        group: Entry point group name.
        exclude_names: Entry point names to skip.

    Returns:
        Successfully loaded contributions, in installation order.
    """
    contributions: list[DiscoveredContribution] = []

    for ep in entry_points(group=group):
        if ep.name in exclude_names:
            logger.debug("Skipping excluded entry point %s:%s", group, ep.name)
            continue
        try:
            loaded = ep.load()
        except Exception:
            logger.exception("Failed to load entry point %s:%s", group, ep.name)
            continue
        contributions.append(DiscoveredContribution(name=ep.name, group=group, value=loaded))
        logger.debug("Loaded entry point %s:%s", group, ep.name)

    logger.info("Discovered %d contributions in group %r", len(contributions), group)
    return contributions
