"""Per-tenant company profile printed on receipts and payslips."""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from landdesk.infra.persistence.base import Base, TenantScopedMixin


class CompanySettings(TenantScopedMixin, Base):
    __tablename__ = "company_settings"
    __table_args__ = (UniqueConstraint("tenant_id", name="uq_company_settings_tenant"),)

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_tagline: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(64))
    email: Mapped[str | None] = mapped_column(String(255))
    email_secondary: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(255))
    social_handle: Mapped[str | None] = mapped_column(String(255))
    po_box: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(Text)
    logo_url: Mapped[str | None] = mapped_column(String(1024))
    receipt_footer_message: Mapped[str | None] = mapped_column(Text)
    receipt_watermark: Mapped[str | None] = mapped_column(String(255))
