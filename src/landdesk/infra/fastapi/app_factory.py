"""FastAPI application factory with entry-point auto-discovery.

:func:`create_app` discovers and wires the routers, middleware, error
handlers and lifespan hooks that landdesk modules declare in
``pyproject.toml``. Tests use ``exclude_names`` to drop contributions that
need Postgres, Redis or a signing secret.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from landdesk.foundation.application import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    discover,
)
from landdesk.infra.fastapi.lifespan import compose_lifespan
from landdesk.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

logger = logging.getLogger(__name__)

GROUP_ROUTERS = "landdesk.routers"
GROUP_MIDDLEWARE = "landdesk.middleware"
GROUP_ERROR_HANDLERS = "landdesk.error_handlers"
GROUP_LIFESPAN = "landdesk.lifespan"


def create_app(
    settings: AppSettings | None = None,
    *,
    extra_routers: list[APIRouter] | None = None,
    extra_middleware: list[MiddlewareContribution] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    extra_error_handlers: list[ErrorHandlerContribution] | None = None,
    exclude_groups: frozenset[str] | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create the landdesk API with auto-discovered contributions.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        extra_routers: Additional routers to include beyond discovered ones.
        extra_middleware: Additional middleware beyond discovered ones.
        extra_lifespan_hooks: Additional lifespan hooks beyond discovered ones.
        extra_error_handlers: Additional error handlers beyond discovered ones.
        exclude_groups: Entry point groups to skip entirely.
        exclude_names: Specific entry point names to skip across all groups.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings()
    groups_off = exclude_groups if exclude_groups is not None else settings.exclude_groups
    names_off = exclude_names if exclude_names is not None else settings.exclude_entry_points

    lifespan_hooks = _collect_lifespan_hooks(extra_lifespan_hooks, groups_off, names_off)

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        debug=settings.debug,
        lifespan=compose_lifespan(lifespan_hooks),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )

    _register_middleware(app, extra_middleware, groups_off, names_off)
    _register_error_handlers(app, extra_error_handlers, groups_off, names_off)
    _include_routers(app, extra_routers, groups_off, names_off)
    return app


# -- Helpers ------------------------------------------------------------------


def _collect_lifespan_hooks(
    extra: list[LifespanContribution] | None,
    groups_off: frozenset[str],
    names_off: frozenset[str],
) -> list[LifespanContribution]:
    hooks: list[LifespanContribution] = list(extra or [])
    if GROUP_LIFESPAN in groups_off:
        return hooks
    for contrib in discover(GROUP_LIFESPAN, exclude_names=names_off):
        value = contrib.value
        if isinstance(value, LifespanContribution):
            hooks.append(value)
        else:
            # Bare async context manager factory; default priority.
            hooks.append(LifespanContribution(hook=value))
    return hooks


def _register_middleware(
    app: FastAPI,
    extra: list[MiddlewareContribution] | None,
    groups_off: frozenset[str],
    names_off: frozenset[str],
) -> None:
    contribs: list[MiddlewareContribution] = list(extra or [])
    if GROUP_MIDDLEWARE not in groups_off:
        for contrib in discover(GROUP_MIDDLEWARE, exclude_names=names_off):
            if isinstance(contrib.value, MiddlewareContribution):
                contribs.append(contrib.value)
            else:
                logger.warning(
                    "Middleware entry point %r did not return a MiddlewareContribution",
                    contrib.name,
                )

    # Starlette wraps in LIFO order: add the innermost first.
    contribs.sort(key=lambda m: m.priority)
    for mw in reversed(contribs):
        app.add_middleware(mw.middleware_class, **mw.kwargs)
        logger.info(
            "Registered middleware %s (priority=%d)",
            mw.middleware_class.__name__,
            mw.priority,
        )


def _register_error_handlers(
    app: FastAPI,
    extra: list[ErrorHandlerContribution] | None,
    groups_off: frozenset[str],
    names_off: frozenset[str],
) -> None:
    contribs: list[ErrorHandlerContribution] = list(extra or [])
    if GROUP_ERROR_HANDLERS not in groups_off:
        for contrib in discover(GROUP_ERROR_HANDLERS, exclude_names=names_off):
            value = contrib.value
            if isinstance(value, ErrorHandlerContribution):
                contribs.append(value)
            elif callable(value):
                value(app)
            else:
                logger.warning(
                    "Error handler entry point %r is not an ErrorHandlerContribution or callable",
                    contrib.name,
                )

    for eh in contribs:
        app.add_exception_handler(eh.exception_class, eh.handler)
        logger.info("Registered error handler for %s", eh.exception_class.__name__)


def _include_routers(
    app: FastAPI,
    extra: list[APIRouter] | None,
    groups_off: frozenset[str],
    names_off: frozenset[str],
) -> None:
    routers: list[APIRouter] = list(extra or [])
    if GROUP_ROUTERS not in groups_off:
        routers.extend(c.value for c in discover(GROUP_ROUTERS, exclude_names=names_off))

    for router in routers:
        app.include_router(router)
        logger.info("Included router: prefix=%r", router.prefix)
