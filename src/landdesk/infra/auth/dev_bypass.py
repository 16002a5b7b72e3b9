"""Development mode authentication bypass resolution.

When active, JWTAuthMiddleware injects :data:`DEV_BYPASS_CLAIMS` for
requests without an Authorization header. ``ENVIRONMENT=production``
always disables the bypass.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

# Synthetic claims; deliberately not production-like.
DEV_BYPASS_CLAIMS: dict[str, object] = {
    "sub": "00000000-0000-0000-0000-000000000000",
    "tenant_id": "dev-tenant",
    "roles": ["admin"],
    "email": "dev-bypass@localhost",
}


def resolve_dev_bypass(requested: bool) -> bool:
    """Return whether the development bypass should be active.

    Args:
        requested: Whether bypass was requested via AUTH_DEV_BYPASS=true.

    Returns:
        True only when requested and not running in production.
    """
    if not requested:
        return False

    env = os.environ.get("ENVIRONMENT", "development")
    if env == "production":
        logger.error(
            "auth_dev_bypass_blocked",
            extra={"environment": env},
        )
        return False

    logger.warning(
        "auth_dev_bypass_active",
        extra={
            "environment": env,
            "detail": "Authentication bypass is enabled. Do not use in production.",
        },
    )
    return True
