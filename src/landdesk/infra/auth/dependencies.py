"""FastAPI dependency functions for authentication and authorization.

Usage:
    from landdesk.infra.auth.dependencies import AdminOnly, CurrentPrincipal

    @router.delete("/{client_id}", dependencies=[AdminOnly])
    def delete_client(...):
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends

from landdesk.foundation.application.context import (
    get_current_principal as _get_principal_from_context,
)
from landdesk.foundation.domain.exceptions import AuthorizationError
from landdesk.foundation.domain.principal import Principal, Role

if TYPE_CHECKING:
    from collections.abc import Callable


def get_current_principal() -> Principal:
    """Return the principal set by JWTAuthMiddleware.

    Raises:
        NoRequestContextError: If called outside an authenticated request.
    """
    return _get_principal_from_context()


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def require_role(*roles: str) -> Callable[..., Principal]:
    """Return a dependency that passes when the principal holds any of ``roles``.

    ``super_admin`` is accepted wherever ``admin`` is.

    Raises:
        AuthorizationError: From the dependency, when no role matches.
    """
    accepted = set(roles)
    if Role.ADMIN in accepted:
        accepted.add(Role.SUPER_ADMIN)

    def _check_role(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not principal.has_any_role(*accepted):
            raise AuthorizationError(
                f"Requires one of roles: {', '.join(sorted(roles))}",
                context={
                    "required_roles": sorted(roles),
                    "principal_id": principal.subject,
                },
            )
        return principal

    return _check_role


AdminOnly = Depends(require_role(Role.ADMIN))
StaffOrAdmin = Depends(require_role(Role.ADMIN, Role.STAFF))
SuperAdminOnly = Depends(require_role(Role.SUPER_ADMIN))
