"""landdesk Domain Company -- the tenant's company profile."""

from landdesk.domain.company.models import CompanySettings

__all__ = ["CompanySettings"]
