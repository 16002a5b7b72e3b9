"""landdesk Infra Auth -- JWT middleware, dev bypass and role dependencies."""

from landdesk.infra.auth.dependencies import (
    AdminOnly,
    CurrentPrincipal,
    StaffOrAdmin,
    SuperAdminOnly,
    get_current_principal,
    require_role,
)
from landdesk.infra.auth.dev_bypass import DEV_BYPASS_CLAIMS, resolve_dev_bypass
from landdesk.infra.auth.middleware import JWTAuthMiddleware, extract_principal
from landdesk.infra.auth.settings import AuthSettings, get_auth_settings

__all__ = [
    "DEV_BYPASS_CLAIMS",
    "AdminOnly",
    "AuthSettings",
    "CurrentPrincipal",
    "JWTAuthMiddleware",
    "StaffOrAdmin",
    "SuperAdminOnly",
    "extract_principal",
    "get_auth_settings",
    "get_current_principal",
    "require_role",
    "resolve_dev_bypass",
]
