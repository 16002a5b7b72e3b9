"""Format checks for Kenyan statutory identifiers."""

from __future__ import annotations

import re

_KRA_PIN = re.compile(r"^[AP]\d{9}[A-Z]$")
_NATIONAL_ID = re.compile(r"^\d{7,8}$")
_NSSF_NUMBER = re.compile(r"^\d{9,10}$")


def is_valid_kra_pin(pin: str) -> bool:
    """KRA PIN: ``A`` or ``P``, nine digits and a letter, case-insensitive."""
    return bool(_KRA_PIN.match(pin.strip().upper()))


def is_valid_national_id(value: str) -> bool:
    return bool(_NATIONAL_ID.match(value.strip()))


def is_valid_nssf_number(value: str) -> bool:
    return bool(_NSSF_NUMBER.match(value.strip()))
