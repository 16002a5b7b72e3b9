"""Reusable helpers for RLS migration operations.

Alembic has no native RLS support, so these emit raw DDL through
``op.execute()``. Every identifier is checked against a strict pattern
before it is interpolated.
"""

from __future__ import annotations

import re

from alembic import op

_IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")

TENANT_SCOPED_TABLES: tuple[str, ...] = (
    "tenant_users",
    "company_settings",
    "projects",
    "plots",
    "clients",
    "payments",
    "expenses",
    "cancelled_sales",
    "employees",
    "employee_deductions",
    "statutory_rates",
    "payroll_records",
)


def _validate_identifier(name: str, label: str = "identifier") -> str:
    """Validate that a string is a safe SQL identifier.

    Raises:
        ValueError: If the identifier contains unsafe characters.
    """
    if not _IDENTIFIER_PATTERN.fullmatch(name):
        msg = (
            f"Invalid SQL {label}: {name!r}. "
            "Must match [a-z_][a-z0-9_]* (lowercase, no special characters)."
        )
        raise ValueError(msg)
    return name


def enable_rls(table_name: str, *, force: bool = False) -> None:
    """Enable Row-Level Security on a table.

    Args:
        table_name: PostgreSQL table name.
        force: Also apply FORCE ROW LEVEL SECURITY so the table owner is
            filtered too.
    """
    _validate_identifier(table_name, "table_name")
    op.execute(f"ALTER TABLE {table_name} ENABLE ROW LEVEL SECURITY")
    if force:
        op.execute(f"ALTER TABLE {table_name} FORCE ROW LEVEL SECURITY")


def disable_rls(table_name: str) -> None:
    """Disable Row-Level Security on a table."""
    _validate_identifier(table_name, "table_name")
    op.execute(f"ALTER TABLE {table_name} DISABLE ROW LEVEL SECURITY")


def create_tenant_isolation_policy(
    table_name: str,
    *,
    cast_type: str | None = None,
    policy_name: str = "tenant_isolation_policy",
) -> None:
    """Create the policy comparing ``tenant_id`` with ``app.current_tenant``.

    Args:
        table_name: PostgreSQL table name (must have a tenant_id column).
        cast_type: Type to cast the setting to. None for text columns.
        policy_name: Policy name.
    """
    _validate_identifier(table_name, "table_name")
    _validate_identifier(policy_name, "policy_name")
    if cast_type is not None:
        _validate_identifier(cast_type, "cast_type")

    cast_expr = f"::{cast_type}" if cast_type else ""

    op.execute(f"""
        CREATE POLICY {policy_name} ON {table_name}
        FOR ALL
        USING (tenant_id = current_setting('app.current_tenant', true){cast_expr})
    """)


def drop_tenant_isolation_policy(
    table_name: str,
    *,
    policy_name: str = "tenant_isolation_policy",
) -> None:
    """Drop a tenant isolation RLS policy if it exists."""
    _validate_identifier(table_name, "table_name")
    _validate_identifier(policy_name, "policy_name")
    op.execute(f"DROP POLICY IF EXISTS {policy_name} ON {table_name}")
