"""Request and response models for company settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CompanySettingsUpdate(BaseModel):
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    company_tagline: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    email_secondary: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=255)
    social_handle: str | None = Field(default=None, max_length=255)
    po_box: str | None = Field(default=None, max_length=255)
    address: str | None = None
    logo_url: str | None = Field(default=None, max_length=1024)
    receipt_footer_message: str | None = None
    receipt_watermark: str | None = Field(default=None, max_length=255)


class CompanySettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_name: str
    company_tagline: str | None = None
    phone: str | None = None
    email: str | None = None
    email_secondary: str | None = None
    website: str | None = None
    social_handle: str | None = None
    po_box: str | None = None
    address: str | None = None
    logo_url: str | None = None
    receipt_footer_message: str | None = None
    receipt_watermark: str | None = None
