"""Base aggregate class for event-sourced domain objects.

Only the tenant lifecycle is event sourced; the ledgers (clients, plots,
payroll) are plain relational tables. ``BaseAggregate`` keeps the
multi-tenancy contract in one place for any aggregate added later.

Example:
    >>> from eventsourcing.domain import event
    >>>
    >>> class Ledger(BaseAggregate):
    ...     @event("Opened")
    ...     def __init__(self, *, name: str, tenant_id: str):
    ...         self.name = name
    ...         self.tenant_id = tenant_id
"""

from __future__ import annotations

from eventsourcing.domain import Aggregate


class BaseAggregate(Aggregate):
    """Base class for event-sourced aggregates.

    Subclasses decorate ``__init__`` with ``@event(...)`` and must set
    ``self.tenant_id`` there. State changes happen only inside ``@event``
    decorated methods; public ``request_*`` commands validate first and then
    delegate to a private mutator.

    Attributes:
        tenant_id: Tenant slug that owns the aggregate (immutable).
    """

    tenant_id: str
