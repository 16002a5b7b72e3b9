"""Read and update the tenant's company profile."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select

from landdesk.domain.company.models import CompanySettings
from landdesk.domain.company.schemas import CompanySettingsResponse

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from landdesk.domain.company.schemas import CompanySettingsUpdate

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "My Company"
DEFAULT_RECEIPT_FOOTER = "Thank you for your payment."


def default_settings() -> CompanySettingsResponse:
    return CompanySettingsResponse(
        company_name=DEFAULT_COMPANY_NAME,
        receipt_footer_message=DEFAULT_RECEIPT_FOOTER,
    )


def _row(session: Session, tenant_id: str) -> CompanySettings | None:
    return session.scalar(select(CompanySettings).where(CompanySettings.tenant_id == tenant_id))


def get_settings(session: Session, tenant_id: str) -> CompanySettingsResponse:
    """Return the tenant's settings, or the defaults if none were saved."""
    row = _row(session, tenant_id)
    if row is None:
        return default_settings()
    return CompanySettingsResponse.model_validate(row)


def update_settings(
    session: Session, tenant_id: str, data: CompanySettingsUpdate
) -> CompanySettingsResponse:
    """Apply ``data`` over the saved settings, creating the row on first save."""
    row = _row(session, tenant_id)
    if row is None:
        row = CompanySettings(tenant_id=tenant_id, **default_settings().model_dump())
        session.add(row)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field == "company_name" and value is None:
            continue
        setattr(row, field, value)
    session.commit()
    logger.info("company_settings_updated: tenant_id=%s fields=%s", tenant_id, sorted(changes))
    return CompanySettingsResponse.model_validate(row)
