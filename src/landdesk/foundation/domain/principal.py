"""Principal value object representing an authenticated identity.

Pure domain object with no external dependencies. Built from validated JWT
claims by the auth middleware.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class Role(StrEnum):
    """Roles recognised by the back office.

    ``admin`` and ``staff`` are tenant roles. ``super_admin`` operates the
    platform itself and may act on any tenant.
    """

    ADMIN = "admin"
    STAFF = "staff"
    SUPER_ADMIN = "super_admin"


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated user performing a request.

    Attributes:
        subject: JWT 'sub' claim.
        tenant_id: Tenant slug the user belongs to. Empty for platform operators.
        user_id: UUID parsed from 'sub'.
        roles: Role strings granted to the user.
        email: Email claim, if present.
    """

    subject: str
    tenant_id: str
    user_id: UUID
    roles: tuple[str, ...] = ()
    email: str | None = None

    def has_any_role(self, *roles: str) -> bool:
        """Return True when the principal holds at least one of ``roles``."""
        return any(role in self.roles for role in roles)
