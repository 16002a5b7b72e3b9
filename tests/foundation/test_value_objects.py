"""Unit tests for tenant value objects and the principal."""

from __future__ import annotations

from uuid import uuid4

import pytest

from landdesk.foundation.domain import Principal, Role
from landdesk.foundation.domain.tenant_value_objects import (
    BrandColor,
    TenantDomain,
    TenantName,
    TenantSlug,
)


@pytest.mark.unit
class TestTenantSlug:
    @pytest.mark.parametrize("slug", ["acme-realty", "a1", "summit-homes-2"])
    def test_valid(self, slug: str) -> None:
        assert TenantSlug(slug).value == slug

    @pytest.mark.parametrize("slug", ["a", "Acme", "-acme", "acme-", "acme_realty", "x" * 64])
    def test_invalid(self, slug: str) -> None:
        with pytest.raises(ValueError, match="slug"):
            TenantSlug(slug)


@pytest.mark.unit
class TestTenantName:
    def test_strips(self) -> None:
        assert TenantName("  Acme Realty ").value == "Acme Realty"

    def test_blank_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            TenantName("   ")


@pytest.mark.unit
class TestBranding:
    def test_domain_lowercased(self) -> None:
        assert TenantDomain("Portal.Acme.co.ke").value == "portal.acme.co.ke"

    def test_color_lowercased(self) -> None:
        assert BrandColor("#1A73E8").value == "#1a73e8"

    def test_color_needs_six_hex_digits(self) -> None:
        with pytest.raises(ValueError, match="brand color"):
            BrandColor("#fff")


@pytest.mark.unit
class TestPrincipal:
    def test_has_any_role(self) -> None:
        principal = Principal(
            subject="sub", tenant_id="acme-realty", user_id=uuid4(), roles=(Role.STAFF,)
        )
        assert principal.has_any_role(Role.ADMIN, Role.STAFF)
        assert not principal.has_any_role(Role.ADMIN)
