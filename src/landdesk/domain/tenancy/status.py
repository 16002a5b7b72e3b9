"""Tenant status lookup backing :class:`TenantStateMiddleware`.

Statuses come from the ``tenants`` directory and are cached per process
for a short TTL. The middleware fails open, so a lookup error returns
None rather than blocking every request while the database is down.
"""

from __future__ import annotations

import logging
from threading import Lock

from cachetools import TTLCache  # type: ignore[import-untyped]
from sqlalchemy.exc import SQLAlchemyError

from landdesk.domain.tenancy.repository import TenantRepository
from landdesk.foundation.application.contributions import MiddlewareContribution
from landdesk.infra.fastapi.middleware.tenant_state import TenantStateMiddleware
from landdesk.infra.persistence.database import get_sync_session_factory

logger = logging.getLogger(__name__)


class TenantStatusChecker:
    """Callable mapping a tenant slug to its status, with a TTL cache.

    Args:
        ttl: Seconds a looked-up status stays cached.
        maxsize: Maximum cached tenants.
    """

    def __init__(self, ttl: int = 30, maxsize: int = 10_000) -> None:
        self._cache: TTLCache[str, str | None] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = Lock()

    def __call__(self, slug: str) -> str | None:
        with self._lock:
            if slug in self._cache:
                cached: str | None = self._cache[slug]
                return cached
        try:
            with get_sync_session_factory()() as session:
                status = TenantRepository(session).get_status(slug)
        except SQLAlchemyError:
            logger.warning("tenant_status_lookup_failed: slug=%s", slug, exc_info=True)
            return None
        with self._lock:
            self._cache[slug] = status
        return status

    def invalidate(self, slug: str | None = None) -> None:
        """Drop one cached status, or all of them."""
        with self._lock:
            if slug is None:
                self._cache.clear()
            else:
                self._cache.pop(slug, None)


status_checker = TenantStatusChecker()

contribution = MiddlewareContribution(
    middleware_class=TenantStateMiddleware,
    priority=250,
    kwargs={"tenant_status_checker": status_checker},
)
