"""landdesk Domain Tenancy -- tenant lifecycle, directory and memberships."""

from landdesk.domain.tenancy.models import TenantRecord, TenantUser
from landdesk.domain.tenancy.service import TenantService
from landdesk.domain.tenancy.tenant import Tenant
from landdesk.domain.tenancy.tenant_app import TenantApplication, event_store_env

__all__ = [
    "Tenant",
    "TenantApplication",
    "TenantRecord",
    "TenantService",
    "TenantUser",
    "event_store_env",
]
