"""Tests for TenantService against the in-memory event store and SQLite."""

from __future__ import annotations

from uuid import uuid4

import pytest

from landdesk.domain.tenancy.repository import TenantRepository
from landdesk.domain.tenancy.service import TenantService
from landdesk.foundation.domain import (
    ConflictError,
    InvalidStateTransitionError,
    NotFoundError,
    TenantStatus,
    ValidationError,
)


@pytest.fixture()
def tenants(tenant_app, session) -> TenantService:
    return TenantService(tenant_app, session)


@pytest.mark.unit
class TestProvisioning:
    def test_provision_activates_and_writes_directory(self, tenants, session) -> None:
        tenant = tenants.provision("acme-realty", "Acme Realty")
        record = TenantRepository(session).get("acme-realty")
        assert tenant.status == TenantStatus.ACTIVE.value
        assert record is not None
        assert record.id == tenant.id
        assert record.status == TenantStatus.ACTIVE.value
        assert record.activated_at is not None

    def test_provision_without_activation(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty", activate=False)
        assert tenants.get_status("acme-realty") == TenantStatus.PROVISIONING.value

    def test_taken_slug_conflicts(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        with pytest.raises(ConflictError):
            tenants.provision("acme-realty", "Another Acme")

    def test_unknown_slug_is_not_found(self, tenants) -> None:
        with pytest.raises(NotFoundError):
            tenants.get("nobody")


@pytest.mark.unit
class TestLifecycle:
    def test_suspend_then_reactivate(self, tenants, session) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        tenants.suspend("acme-realty", "operator", reason="Unpaid invoice")
        record = TenantRepository(session).get("acme-realty")
        assert record.status == TenantStatus.SUSPENDED.value
        assert record.suspended_at is not None

        tenant = tenants.reactivate("acme-realty", "operator")
        assert tenant.status == TenantStatus.ACTIVE.value
        assert tenants.get_status("acme-realty") == TenantStatus.ACTIVE.value

    def test_decommissioned_cannot_be_reactivated(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        tenants.decommission("acme-realty", "operator", reason="Closed")
        with pytest.raises(InvalidStateTransitionError):
            tenants.reactivate("acme-realty", "operator")

    def test_list_filters_by_status(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        tenants.provision("summit-homes", "Summit Homes")
        tenants.suspend("summit-homes", "operator")
        active = tenants.list_tenants(TenantStatus.ACTIVE.value)
        assert [t.slug for t in active] == ["acme-realty"]
        assert len(tenants.list_tenants()) == 2

    def test_profile_update_is_stored(self, tenants, tenant_app) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        tenant = tenants.update_profile(
            "acme-realty", {"contact_email": "info@acme.co.ke"}, updated_by="operator"
        )
        reloaded = tenant_app.repository.get(tenant.id)
        assert reloaded.profile == {"contact_email": "info@acme.co.ke"}


@pytest.mark.unit
class TestMemberships:
    def test_add_and_list_members(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        user_id = uuid4()
        tenants.add_member("acme-realty", user_id, "admin", email="owner@acme.co.ke")
        [member] = tenants.list_members("acme-realty")
        assert member.user_id == user_id
        assert member.role == "admin"

    def test_adding_again_updates_role(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        user_id = uuid4()
        tenants.add_member("acme-realty", user_id, "staff")
        tenants.add_member("acme-realty", user_id, "admin")
        [member] = tenants.list_members("acme-realty")
        assert member.role == "admin"

    def test_user_cannot_join_second_tenant(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        tenants.provision("summit-homes", "Summit Homes")
        user_id = uuid4()
        tenants.add_member("acme-realty", user_id)
        with pytest.raises(ConflictError):
            tenants.add_member("summit-homes", user_id)

    def test_operator_role_is_not_a_member_role(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        with pytest.raises(ValidationError):
            tenants.add_member("acme-realty", uuid4(), "super_admin")

    def test_decommissioned_tenant_rejects_members(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        tenants.decommission("acme-realty", "operator")
        with pytest.raises(ConflictError):
            tenants.add_member("acme-realty", uuid4())

    def test_remove_unknown_member_is_not_found(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        with pytest.raises(NotFoundError):
            tenants.remove_member("acme-realty", uuid4())

    def test_remove_member(self, tenants) -> None:
        tenants.provision("acme-realty", "Acme Realty")
        user_id = uuid4()
        tenants.add_member("acme-realty", user_id)
        tenants.remove_member("acme-realty", user_id)
        assert tenants.list_members("acme-realty") == []
