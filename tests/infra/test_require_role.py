"""Unit tests for the role dependencies."""

from __future__ import annotations

from uuid import uuid4

import pytest

from landdesk.foundation.domain import AuthorizationError, Principal, Role
from landdesk.infra.auth.dependencies import require_role


def _principal(*roles: str) -> Principal:
    return Principal(subject="user", tenant_id="acme-realty", user_id=uuid4(), roles=roles)


@pytest.mark.unit
class TestRequireRole:
    def test_matching_role_passes(self) -> None:
        principal = _principal(Role.STAFF)
        assert require_role(Role.ADMIN, Role.STAFF)(principal) is principal

    def test_super_admin_passes_admin_checks(self) -> None:
        principal = _principal(Role.SUPER_ADMIN)
        assert require_role(Role.ADMIN)(principal) is principal

    def test_admin_does_not_pass_operator_checks(self) -> None:
        with pytest.raises(AuthorizationError):
            require_role(Role.SUPER_ADMIN)(_principal(Role.ADMIN))

    def test_missing_role_lists_requirements(self) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            require_role(Role.ADMIN)(_principal(Role.STAFF))
        assert exc_info.value.context["required_roles"] == ["admin"]
        assert exc_info.value.context["principal_id"] == "user"
