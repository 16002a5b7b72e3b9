"""landdesk Foundation Application -- request context and contribution types."""

from landdesk.foundation.application.context import (
    ANONYMOUS_USER_ID,
    NoRequestContextError,
    RequestContext,
    clear_principal_context,
    clear_request_context,
    get_current_actor,
    get_current_context,
    get_current_correlation_id,
    get_current_principal,
    get_current_tenant_id,
    get_current_user_id,
    get_optional_principal,
    set_principal_context,
    set_request_context,
)
from landdesk.foundation.application.contributions import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
)
from landdesk.foundation.application.discovery import (
    DiscoveredContribution,
    discover,
)

__all__ = [
    "ANONYMOUS_USER_ID",
    "DiscoveredContribution",
    "ErrorHandlerContribution",
    "LifespanContribution",
    "MiddlewareContribution",
    "NoRequestContextError",
    "RequestContext",
    "clear_principal_context",
    "clear_request_context",
    "discover",
    "get_current_actor",
    "get_current_context",
    "get_current_correlation_id",
    "get_current_principal",
    "get_current_tenant_id",
    "get_current_user_id",
    "get_optional_principal",
    "set_principal_context",
    "set_request_context",
]
