"""Base model for PATCH request bodies.

Omitted fields are left untouched by the services (they apply
``model_dump(exclude_unset=True)``). An explicit ``null`` is a real value,
so fields backed by NOT NULL columns must refuse it here rather than fail
at commit.

Example:
    >>> class ProjectUpdate(PartialUpdate):
    ...     non_nullable = frozenset({"name"})
    ...     name: str | None = None
    ...     description: str | None = None
    >>> ProjectUpdate(description=None).model_dump(exclude_unset=True)
    {'description': None}
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ValidationInfo, field_validator


class PartialUpdate(BaseModel):
    """Partial update whose ``non_nullable`` fields may be omitted but not nulled."""

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*")
    @classmethod
    def reject_null(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None and info.field_name in cls.non_nullable:
            msg = "may be omitted but not set to null"
            raise ValueError(msg)
        return v
