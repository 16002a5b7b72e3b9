"""FastAPI dependencies for tenant-scoped endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from landdesk.foundation.application.context import request_context
from landdesk.foundation.domain.exceptions import TenantRequiredError


def get_tenant_id() -> str:
    """Return the tenant slug of the current request.

    Raises:
        TenantRequiredError: If no tenant could be resolved from the token
            or the ``X-Tenant-ID`` header.
    """
    ctx = request_context.get()
    if ctx is None or not ctx.tenant_id:
        raise TenantRequiredError()
    return ctx.tenant_id


TenantId = Annotated[str, Depends(get_tenant_id)]
