"""Aggregated health check endpoint.

Reports the database and the task-queue Redis separately. Returns 503 when
either is unreachable so load balancers drain the instance.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from redis import asyncio as aioredis
from sqlalchemy import text

from landdesk.infra.persistence.database import get_database_manager
from landdesk.infra.taskiq.settings import get_taskiq_settings

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


async def _check_database() -> dict[str, str]:
    """Check database connectivity via SELECT 1."""
    try:
        engine = get_database_manager().get_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("health_check: database unhealthy: %s", exc)
        return {"status": "error", "detail": type(exc).__name__}
    return {"status": "ok"}


async def _check_redis() -> dict[str, str]:
    """Check the task broker's Redis via PING."""
    client = aioredis.from_url(get_taskiq_settings().redis_url)
    try:
        await client.ping()
    except Exception as exc:
        logger.warning("health_check: redis unhealthy: %s", exc)
        return {"status": "error", "detail": type(exc).__name__}
    finally:
        await client.aclose()
    return {"status": "ok"}


@router.get("/healthz")
async def healthz() -> Any:
    """Return per-subsystem status; 200 when all are ok, 503 otherwise."""
    checks: dict[str, dict[str, str]] = {
        "database": await _check_database(),
        "redis": await _check_redis(),
    }

    all_ok = all(c["status"] == "ok" for c in checks.values())
    return JSONResponse(
        content={"status": "ok" if all_ok else "degraded", "checks": checks},
        status_code=200 if all_ok else 503,
    )
