"""Backup configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackupSettings(BaseSettings):
    """Where scheduled backups are written and how many are kept.

    Environment Variables:
        BACKUP_DIRECTORY: Directory for scheduled backup files (default: backups)
        BACKUP_RETENTION: Newest files kept per tenant (default: 14)
    """

    model_config = SettingsConfigDict(
        env_prefix="BACKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    directory: Path = Field(default=Path("backups"), description="Backup output directory")
    retention: int = Field(default=14, ge=1, le=365, description="Files kept per tenant")


@lru_cache(maxsize=1)
def get_backup_settings() -> BackupSettings:
    """Get cached backup settings singleton."""
    return BackupSettings()
