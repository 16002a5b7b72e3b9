"""Value objects for the Tenant aggregate.

Immutable, validated primitives. Validation happens at construction time
and raises ``ValueError`` so the aggregate can reject bad input before any
event is recorded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum


class TenantStatus(StrEnum):
    """Tenant lifecycle states.

        PROVISIONING -> ACTIVE <-> SUSPENDED -> DECOMMISSIONED
    """

    PROVISIONING = "PROVISIONING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    DECOMMISSIONED = "DECOMMISSIONED"


class SuspensionCategory(StrEnum):
    """Well-known reasons for suspending a tenant account."""

    ADMIN_ACTION = "admin_action"
    BILLING_HOLD = "billing_hold"
    SECURITY_REVIEW = "security_review"
    OTHER = "other"


_SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")
_DOMAIN_PATTERN = re.compile(r"^(?=.{3,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$")
_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True, slots=True)
class TenantSlug:
    """Validated tenant slug.

    Lowercase alphanumerics and hyphens, 2-63 chars, starting and ending
    with an alphanumeric character. The slug doubles as the ``tenant_id``
    stored on every business row.
    """

    value: str

    def __post_init__(self) -> None:
        if len(self.value) < 2:
            msg = f"Tenant slug too short: '{self.value}' (min 2 chars)"
            raise ValueError(msg)
        if len(self.value) > 63:
            msg = f"Tenant slug too long: '{self.value}' (max 63 chars)"
            raise ValueError(msg)
        if not _SLUG_PATTERN.match(self.value):
            msg = (
                f"Invalid tenant slug '{self.value}': must be lowercase "
                "alphanumeric with hyphens, starting and ending with alphanumeric"
            )
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class TenantName:
    """Validated company display name (1-255 chars after stripping)."""

    value: str

    def __post_init__(self) -> None:
        stripped = self.value.strip()
        if not stripped:
            msg = "Tenant name cannot be empty"
            raise ValueError(msg)
        if len(stripped) > 255:
            msg = f"Tenant name too long: {len(stripped)} chars (max 255)"
            raise ValueError(msg)
        object.__setattr__(self, "value", stripped)


@dataclass(frozen=True, slots=True)
class TenantDomain:
    """Custom hostname a tenant is served from (e.g. ``portal.acme.co.ke``)."""

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip().lower()
        if not _DOMAIN_PATTERN.match(normalized):
            msg = f"Invalid tenant domain: '{self.value}'"
            raise ValueError(msg)
        object.__setattr__(self, "value", normalized)


@dataclass(frozen=True, slots=True)
class BrandColor:
    """Hex brand color in ``#rrggbb`` form."""

    value: str

    def __post_init__(self) -> None:
        if not _COLOR_PATTERN.match(self.value):
            msg = f"Invalid brand color '{self.value}': expected #rrggbb"
            raise ValueError(msg)
        object.__setattr__(self, "value", self.value.lower())
