"""Decimal helpers for shilling amounts.

All amounts are stored as ``Numeric(14, 2)`` and handled as ``Decimal``.
Rounding is half-up to the cent, matching how receipts are printed.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce ``value`` to a Decimal rounded to the cent.

    ``None`` is treated as zero. Floats go through ``str`` so that
    ``0.1`` becomes ``Decimal("0.10")`` rather than its binary expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Decimal | int | float | str | None]) -> Decimal:
    """Sum ``values`` as money."""
    total = ZERO
    for value in values:
        total += to_money(value)
    return to_money(total)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part / whole * 100`` rounded to the cent, or zero if ``whole`` is zero."""
    if whole == 0:
        return ZERO
    return to_money(to_money(part) / to_money(whole) * HUNDRED)
