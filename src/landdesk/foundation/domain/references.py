"""Human-facing document numbers printed on receipts, vouchers and payslips.

Each reference is a prefix, a date stamp and a zero-padded sequence that
restarts with every period:

- Receipt:  ``LIP-202610-0007``   (monthly sequence)
- Expense:  ``EXP-20261019-0003`` (daily sequence)
- Employee: ``EMP-260012``        (yearly sequence)

Example:
    >>> from datetime import date
    >>> str(ReceiptNumber.build("LIP", date(2026, 10, 19), 7))
    'LIP-202610-0007'
    >>> ReceiptNumber.parse("LIP-202610-0007").sequence
    7
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from datetime import date

_PREFIX_PATTERN = re.compile(r"^[A-Z]{2,6}$")


def _check_prefix(prefix: str) -> str:
    if not _PREFIX_PATTERN.match(prefix):
        msg = f"Invalid reference prefix: {prefix!r}. Must be 2-6 uppercase letters."
        raise ValueError(msg)
    return prefix


@dataclass(frozen=True)
class ReceiptNumber:
    """Payment receipt number ``<PREFIX>-YYYYMM-NNNN``."""

    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^([A-Z]{2,6})-(\d{6})-(\d{4,})$")

    def __post_init__(self) -> None:
        if not self._PATTERN.match(self.value):
            msg = f"Invalid receipt number: {self.value!r}"
            raise ValueError(msg)

    @classmethod
    def build(cls, prefix: str, on: date, sequence: int) -> ReceiptNumber:
        return cls(f"{_check_prefix(prefix)}-{on:%Y%m}-{sequence:04d}")

    @classmethod
    def period_prefix(cls, prefix: str, on: date) -> str:
        """Return the part shared by every receipt of ``on``'s month."""
        return f"{_check_prefix(prefix)}-{on:%Y%m}-"

    @classmethod
    def parse(cls, value: str) -> ReceiptNumber:
        return cls(value)

    @property
    def sequence(self) -> int:
        match = self._PATTERN.match(self.value)
        assert match is not None
        return int(match.group(3))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExpenseReference:
    """Expense voucher reference ``<PREFIX>-YYYYMMDD-NNNN``."""

    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^([A-Z]{2,6})-(\d{8})-(\d{4,})$")

    def __post_init__(self) -> None:
        if not self._PATTERN.match(self.value):
            msg = f"Invalid expense reference: {self.value!r}"
            raise ValueError(msg)

    @classmethod
    def build(cls, prefix: str, on: date, sequence: int) -> ExpenseReference:
        return cls(f"{_check_prefix(prefix)}-{on:%Y%m%d}-{sequence:04d}")

    @classmethod
    def period_prefix(cls, prefix: str, on: date) -> str:
        return f"{_check_prefix(prefix)}-{on:%Y%m%d}-"

    @property
    def sequence(self) -> int:
        match = self._PATTERN.match(self.value)
        assert match is not None
        return int(match.group(3))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EmployeeNumber:
    """Staff number ``<PREFIX>-YYNNNN``."""

    value: str

    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^([A-Z]{2,6})-(\d{2})(\d{4,})$")

    def __post_init__(self) -> None:
        if not self._PATTERN.match(self.value):
            msg = f"Invalid employee number: {self.value!r}"
            raise ValueError(msg)

    @classmethod
    def build(cls, prefix: str, on: date, sequence: int) -> EmployeeNumber:
        return cls(f"{_check_prefix(prefix)}-{on:%y}{sequence:04d}")

    @classmethod
    def period_prefix(cls, prefix: str, on: date) -> str:
        return f"{_check_prefix(prefix)}-{on:%y}"

    @property
    def sequence(self) -> int:
        match = self._PATTERN.match(self.value)
        assert match is not None
        return int(match.group(3))

    def __str__(self) -> str:
        return self.value
