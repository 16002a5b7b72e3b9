"""Contribution types for the auto-discovery system.

Packages expose these objects through entry points and the app factory
wires them in. They are framework-agnostic so that domain packages can
declare contributions without importing FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MIDDLEWARE_PRIORITY_MIN = 0
MIDDLEWARE_PRIORITY_MAX = 499

LIFESPAN_PRIORITY_OBSERVABILITY = 50
LIFESPAN_PRIORITY_PERSISTENCE = 75
LIFESPAN_PRIORITY_TENANCY = 100
LIFESPAN_PRIORITY_TASKIQ = 150


@dataclass(frozen=True, slots=True)
class MiddlewareContribution:
    """Describes a middleware to be registered by the app factory.

    Attributes:
        middleware_class: The ASGI middleware class.
        priority: Lower numbers run first (outermost). Bands: 0-99 outermost,
            100-199 security, 200-299 context, 300-399 policy.
        kwargs: Keyword arguments forwarded to ``add_middleware()``.
    """

    middleware_class: type[Any]
    priority: int = 400
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not MIDDLEWARE_PRIORITY_MIN <= self.priority <= MIDDLEWARE_PRIORITY_MAX:
            msg = (
                f"Middleware priority must be between {MIDDLEWARE_PRIORITY_MIN} "
                f"and {MIDDLEWARE_PRIORITY_MAX}, got {self.priority}"
            )
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ErrorHandlerContribution:
    """An exception class and its async ``(Request, Exception) -> Response`` handler."""

    exception_class: type[BaseException]
    handler: Any


@dataclass(frozen=True, slots=True)
class LifespanContribution:
    """A lifespan hook: an async context manager factory ``(app) -> AsyncContextManager``.

    Lower priorities start first and shut down last.
    """

    hook: Any
    priority: int = 500
