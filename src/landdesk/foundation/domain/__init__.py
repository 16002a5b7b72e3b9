"""landdesk Foundation Domain -- pure Python domain primitives.

Exceptions, the authenticated principal, tenant value objects, document
reference numbers, money helpers, the PATCH body base and the event-sourced
aggregate base.
"""

from landdesk.foundation.domain.aggregates import BaseAggregate
from landdesk.foundation.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InvalidStateTransitionError,
    NotFoundError,
    PlotUnavailableError,
    RecordLockedError,
    TenantRequiredError,
    ValidationError,
)
from landdesk.foundation.domain.money import ZERO, money_sum, percentage, to_money
from landdesk.foundation.domain.partial_update import PartialUpdate
from landdesk.foundation.domain.principal import Principal, Role
from landdesk.foundation.domain.references import (
    EmployeeNumber,
    ExpenseReference,
    ReceiptNumber,
)
from landdesk.foundation.domain.tenant_value_objects import (
    BrandColor,
    SuspensionCategory,
    TenantDomain,
    TenantName,
    TenantSlug,
    TenantStatus,
)

__all__ = [
    "ZERO",
    "AuthenticationError",
    "AuthorizationError",
    "BaseAggregate",
    "BrandColor",
    "ConflictError",
    "DomainError",
    "EmployeeNumber",
    "ExpenseReference",
    "InvalidStateTransitionError",
    "NotFoundError",
    "PartialUpdate",
    "PlotUnavailableError",
    "Principal",
    "ReceiptNumber",
    "RecordLockedError",
    "Role",
    "SuspensionCategory",
    "TenantDomain",
    "TenantName",
    "TenantRequiredError",
    "TenantSlug",
    "TenantStatus",
    "ValidationError",
    "money_sum",
    "percentage",
    "to_money",
]
