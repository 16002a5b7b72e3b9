"""Tenant aggregate with lifecycle state machine.

Each real-estate company using the back office is a tenant. The aggregate
is event sourced so that every lifecycle change keeps who did it and why;
the relational ``tenants`` directory is kept in step by the service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eventsourcing.domain import event

from landdesk.foundation.domain.aggregates import BaseAggregate
from landdesk.foundation.domain.exceptions import InvalidStateTransitionError
from landdesk.foundation.domain.tenant_value_objects import (
    BrandColor,
    TenantDomain,
    TenantName,
    TenantSlug,
    TenantStatus,
)

if TYPE_CHECKING:
    from typing import Any

PROFILE_FIELDS: frozenset[str] = frozenset(
    {"domain", "primary_color", "contact_email", "contact_phone", "logo_url"}
)


class Tenant(BaseAggregate):
    """Event-sourced Tenant aggregate.

    State machine::

        PROVISIONING --activate--> ACTIVE <--reactivate-- SUSPENDED
                                     |  ---suspend--->      |
                                     |                      |
                                     +--decommission--> DECOMMISSIONED

    Commands are idempotent when the tenant is already in the target state.

    Attributes:
        tenant_id: Slug; equal to ``slug`` and stored on every business row.
        name: Company display name.
        slug: Validated tenant slug.
        status: Current lifecycle state (TenantStatus value).
        profile: Branding and contact details (domain, primary_color, ...).
        suspension_reason: Reason for the most recent suspension.
        suspension_category: SuspensionCategory value, if given.
        decommission_reason: Reason for decommissioning.
    """

    @event("Provisioned")
    def __init__(
        self,
        *,
        tenant_id: str,
        name: str,
        slug: str,
        profile: dict[str, Any] | None = None,
    ) -> None:
        """Create a tenant in PROVISIONING state.

        Raises:
            ValueError: If slug or name fails validation, or if
                tenant_id does not match slug.
        """
        validated_slug = TenantSlug(slug)
        validated_name = TenantName(name)
        if tenant_id != validated_slug.value:
            msg = (
                f"tenant_id must match slug: "
                f"got tenant_id='{tenant_id}', slug='{validated_slug.value}'"
            )
            raise ValueError(msg)

        self.tenant_id: str = validated_slug.value
        self.name: str = validated_name.value
        self.slug: str = validated_slug.value
        self.status: str = TenantStatus.PROVISIONING.value
        self.profile: dict[str, Any] = _validated_profile(profile or {})
        self.suspension_reason: str | None = None
        self.suspension_category: str | None = None
        self.decommission_reason: str | None = None

    # -- Commands -------------------------------------------------------------

    def request_activate(self, initiated_by: str, correlation_id: str | None = None) -> None:
        """PROVISIONING -> ACTIVE."""
        if self.status == TenantStatus.ACTIVE.value:
            return
        self._require(TenantStatus.PROVISIONING, action="activate")
        self._apply_activate(initiated_by=initiated_by, correlation_id=correlation_id or "")

    def request_suspend(
        self,
        initiated_by: str,
        reason: str | None = None,
        category: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        """ACTIVE -> SUSPENDED.

        Args:
            initiated_by: Operator performing the action.
            reason: Free-text reason shown to the tenant's admins.
            category: Optional SuspensionCategory value.
            correlation_id: Optional request tracing ID.
        """
        if self.status == TenantStatus.SUSPENDED.value:
            return
        self._require(TenantStatus.ACTIVE, action="suspend")
        self._apply_suspend(
            reason=reason or "",
            category=category or "",
            initiated_by=initiated_by,
            correlation_id=correlation_id or "",
        )

    def request_reactivate(self, initiated_by: str, correlation_id: str | None = None) -> None:
        """SUSPENDED -> ACTIVE."""
        if self.status == TenantStatus.ACTIVE.value:
            return
        self._require(TenantStatus.SUSPENDED, action="reactivate")
        self._apply_reactivate(initiated_by=initiated_by, correlation_id=correlation_id or "")

    def request_decommission(
        self,
        initiated_by: str,
        reason: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        """ACTIVE | SUSPENDED -> DECOMMISSIONED (terminal)."""
        if self.status == TenantStatus.DECOMMISSIONED.value:
            return
        self._require(TenantStatus.ACTIVE, TenantStatus.SUSPENDED, action="decommission")
        self._apply_decommission(
            reason=reason or "",
            initiated_by=initiated_by,
            correlation_id=correlation_id or "",
        )

    def request_update_profile(self, profile: dict[str, Any], updated_by: str) -> None:
        """Merge branding and contact details. Only while ACTIVE.

        Raises:
            InvalidStateTransitionError: If the tenant is not ACTIVE.
            ValueError: On an unknown key, bad domain or bad color.
        """
        self._require(TenantStatus.ACTIVE, action="update profile of")
        self._apply_profile_updated(profile=_validated_profile(profile), updated_by=updated_by)

    def _require(self, *allowed: TenantStatus, action: str) -> None:
        if self.status not in {s.value for s in allowed}:
            expected = " or ".join(s.value for s in allowed)
            raise InvalidStateTransitionError(
                f"Cannot {action} tenant {self.slug}: "
                f"current state is {self.status}, expected {expected}",
                tenant_id=self.slug,
                current_status=self.status,
            )

    # -- Event mutators -------------------------------------------------------

    @event("Activated")
    def _apply_activate(self, initiated_by: str, correlation_id: str) -> None:
        self.status = TenantStatus.ACTIVE.value

    @event("Suspended")
    def _apply_suspend(
        self,
        reason: str,
        category: str,
        initiated_by: str,
        correlation_id: str,
    ) -> None:
        self.status = TenantStatus.SUSPENDED.value
        self.suspension_reason = reason or None
        self.suspension_category = category or None

    @event("Reactivated")
    def _apply_reactivate(self, initiated_by: str, correlation_id: str) -> None:
        self.status = TenantStatus.ACTIVE.value
        self.suspension_reason = None
        self.suspension_category = None

    @event("Decommissioned")
    def _apply_decommission(self, reason: str, initiated_by: str, correlation_id: str) -> None:
        self.status = TenantStatus.DECOMMISSIONED.value
        self.decommission_reason = reason or None

    @event("ProfileUpdated")
    def _apply_profile_updated(self, profile: dict[str, Any], updated_by: str) -> None:
        self.profile.update(profile)


def _validated_profile(profile: dict[str, Any]) -> dict[str, Any]:
    unknown = set(profile) - PROFILE_FIELDS
    if unknown:
        msg = f"Unknown profile fields: {sorted(unknown)}"
        raise ValueError(msg)
    cleaned = dict(profile)
    if cleaned.get("domain"):
        cleaned["domain"] = TenantDomain(cleaned["domain"]).value
    if cleaned.get("primary_color"):
        cleaned["primary_color"] = BrandColor(cleaned["primary_color"]).value
    return cleaned
