"""JWT authentication middleware for HS256 access tokens.

Validates the Bearer token on every request except excluded paths and
stores the resulting :class:`Principal` in the principal ContextVar.

Design decisions:
- BaseHTTPMiddleware: the cost is negligible next to token validation.
- Auth failures return a JSONResponse directly because exceptions raised
  in ``dispatch`` do not reach the app's exception handlers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

import jwt as pyjwt
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from landdesk.foundation.application.context import (
    clear_principal_context,
    set_principal_context,
)
from landdesk.foundation.application.contributions import MiddlewareContribution
from landdesk.foundation.domain.principal import Principal, Role
from landdesk.infra.auth.dev_bypass import DEV_BYPASS_CLAIMS, resolve_dev_bypass
from landdesk.infra.auth.settings import get_auth_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response

    from landdesk.infra.auth.settings import AuthSettings

logger = logging.getLogger(__name__)

_DEFAULT_EXCLUDED_PREFIXES = (
    "/healthz",
    "/docs",
    "/openapi.json",
    "/redoc",
)

_PROBLEM_MEDIA_TYPE = "application/problem+json"

_TITLES = {401: "Unauthorized", 403: "Forbidden", 503: "Service Unavailable"}


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """Bearer token validation with a shared HMAC secret.

    Error flow (all 401s carry ``WWW-Authenticate: Bearer``):
    - Missing header -> missing_token
    - Not a Bearer header or empty token -> invalid_format
    - Expired -> token_expired
    - Bad signature -> invalid_signature
    - Bad iss/aud or unusable claims -> invalid_claims
    - Anything else -> invalid_token
    - No secret configured -> 503 service_unavailable
    """

    def __init__(
        self,
        app: Any,
        settings: AuthSettings | None = None,
        excluded_prefixes: tuple[str, ...] | None = None,
    ) -> None:
        super().__init__(app)
        self._settings = settings or get_auth_settings()
        self._dev_bypass = resolve_dev_bypass(self._settings.dev_bypass)
        self._excluded_prefixes = (
            excluded_prefixes if excluded_prefixes is not None else _DEFAULT_EXCLUDED_PREFIXES
        )

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or any(
            path.startswith(prefix) for prefix in self._excluded_prefixes
        ):
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if self._dev_bypass and not auth_header:
            return await self._continue_as(request, call_next, dict(DEV_BYPASS_CLAIMS))

        if not auth_header:
            return self._auth_error(request, 401, "missing_token", "Authorization header is required")
        if not auth_header.startswith("Bearer "):
            return self._auth_error(
                request, 401, "invalid_format", "Authorization header must use Bearer scheme"
            )
        token = auth_header[len("Bearer ") :]
        if not token:
            return self._auth_error(request, 401, "invalid_format", "Bearer token is empty")

        if not self._settings.is_configured:
            return self._auth_error(
                request, 503, "service_unavailable", "Authentication service not configured"
            )

        try:
            claims = self._decode(token)
        except pyjwt.ExpiredSignatureError:
            return self._auth_error(request, 401, "token_expired", "Token has expired")
        except pyjwt.InvalidIssuerError:
            return self._auth_error(request, 401, "invalid_claims", "Invalid issuer claim")
        except pyjwt.InvalidAudienceError:
            return self._auth_error(request, 401, "invalid_claims", "Invalid audience claim")
        except pyjwt.MissingRequiredClaimError as exc:
            return self._auth_error(request, 401, "invalid_claims", f"Missing required claim: {exc}")
        except pyjwt.InvalidSignatureError:
            return self._auth_error(
                request, 401, "invalid_signature", "Token signature verification failed"
            )
        except pyjwt.DecodeError:
            return self._auth_error(request, 401, "invalid_token", "Token is malformed")
        except pyjwt.InvalidTokenError:
            return self._auth_error(request, 401, "invalid_token", "Token validation failed")

        return await self._continue_as(request, call_next, claims)

    def _decode(self, token: str) -> dict[str, Any]:
        s = self._settings
        required = ["exp", "sub", "aud"]
        if s.issuer:
            required.append("iss")
        return pyjwt.decode(
            token,
            s.jwt_secret,
            algorithms=[s.algorithm],
            audience=s.audience,
            issuer=s.issuer or None,
            options={"require": required},
        )

    async def _continue_as(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
        claims: dict[str, Any],
    ) -> Response:
        try:
            principal = extract_principal(claims)
        except ValueError as exc:
            return self._auth_error(request, 401, "invalid_claims", str(exc))

        request.state.jwt_claims = claims
        token = set_principal_context(principal)
        try:
            return await call_next(request)
        finally:
            clear_principal_context(token)

    def _auth_error(
        self,
        request: Request,
        status_code: int,
        error_code: str,
        message: str,
    ) -> JSONResponse:
        """Build an RFC 7807 response; 401s also get an RFC 6750 challenge."""
        logger.info(
            "auth_validation_failed",
            extra={
                "error_code": error_code,
                "path": request.url.path,
                "method": request.method,
            },
        )

        headers: dict[str, str] = {}
        if status_code == 401:
            headers["WWW-Authenticate"] = (
                f'Bearer realm="API", error="{error_code}", error_description="{message}"'
            )

        return JSONResponse(
            status_code=status_code,
            content={
                "type": f"/errors/{error_code.replace('_', '-')}",
                "title": _TITLES.get(status_code, "Error"),
                "status": status_code,
                "detail": message,
                "error_code": error_code.upper(),
                "instance": str(request.url.path),
            },
            media_type=_PROBLEM_MEDIA_TYPE,
            headers=headers,
        )


def _claim(claims: dict[str, Any], name: str) -> Any:
    """Read a claim from the top level, falling back to ``app_metadata``."""
    value = claims.get(name)
    if value:
        return value
    app_metadata = claims.get("app_metadata")
    if isinstance(app_metadata, dict):
        return app_metadata.get(name)
    return None


def extract_principal(claims: dict[str, Any]) -> Principal:
    """Map validated JWT claims to a Principal.

    ``roles`` and ``tenant_id`` are read from the top level or from
    ``app_metadata``. A single ``role`` string is accepted too. Only
    ``super_admin`` tokens may omit the tenant.

    Raises:
        ValueError: If required claims are missing or malformed.
    """
    sub = claims.get("sub")
    if not sub:
        raise ValueError("JWT missing required claim: sub")
    try:
        user_id = UUID(str(sub))
    except ValueError:
        raise ValueError(f"JWT 'sub' claim is not a valid UUID: {sub}") from None

    roles = _claim(claims, "roles") or _claim(claims, "role") or []
    if isinstance(roles, str):
        roles = [roles]
    roles = tuple(str(r) for r in roles)

    tenant_id = str(_claim(claims, "tenant_id") or "")
    if not tenant_id and Role.SUPER_ADMIN not in roles:
        raise ValueError("JWT missing required claim: tenant_id")

    email = claims.get("email")
    return Principal(
        subject=str(sub),
        tenant_id=tenant_id,
        user_id=user_id,
        roles=roles,
        email=str(email) if email is not None else None,
    )


contribution = MiddlewareContribution(
    middleware_class=JWTAuthMiddleware,
    priority=150,  # Security band (100-199)
)
