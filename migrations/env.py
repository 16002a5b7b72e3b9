"""Alembic environment for landdesk."""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context

# Model modules register their tables on Base.metadata when imported.
import landdesk.domain.cancellations.models
import landdesk.domain.company.models
import landdesk.domain.expenses.models
import landdesk.domain.inventory.models
import landdesk.domain.payroll.models
import landdesk.domain.sales.models
import landdesk.domain.tenancy.models  # noqa: F401
from landdesk.infra.persistence.alembic_env import run_migrations
from landdesk.infra.persistence.base import Base

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

run_migrations(Base.metadata)
