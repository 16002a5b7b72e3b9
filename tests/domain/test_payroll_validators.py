"""Unit tests for statutory identifier checks and the employee schemas using them."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from landdesk.domain.payroll.schemas import EmployeeCreate, EmployeeUpdate
from landdesk.domain.payroll.validators import (
    is_valid_kra_pin,
    is_valid_national_id,
    is_valid_nssf_number,
)


class TestKraPin:
    @pytest.mark.unit
    @pytest.mark.parametrize("pin", ["A123456789B", "P987654321Z", " a123456789b "])
    def test_valid(self, pin: str) -> None:
        assert is_valid_kra_pin(pin)

    @pytest.mark.unit
    @pytest.mark.parametrize("pin", ["B123456789C", "A12345678B", "A1234567890", ""])
    def test_invalid(self, pin: str) -> None:
        assert not is_valid_kra_pin(pin)


class TestNationalId:
    @pytest.mark.unit
    def test_seven_or_eight_digits(self) -> None:
        assert is_valid_national_id("1234567")
        assert is_valid_national_id("12345678")
        assert not is_valid_national_id("123456")
        assert not is_valid_national_id("12345678X")


class TestNssfNumber:
    @pytest.mark.unit
    def test_nine_or_ten_digits(self) -> None:
        assert is_valid_nssf_number("123456789")
        assert is_valid_nssf_number("1234567890")
        assert not is_valid_nssf_number("12345678")


class TestEmployeeSchemas:
    @pytest.mark.unit
    def test_kra_pin_is_normalized(self) -> None:
        data = EmployeeCreate(
            full_name="Grace Njeri",
            national_id=" 12345678 ",
            kra_pin="a123456789b",
            basic_salary=Decimal("50000"),
        )
        assert data.kra_pin == "A123456789B"
        assert data.national_id == "12345678"

    @pytest.mark.unit
    def test_bad_kra_pin_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="KRA PIN"):
            EmployeeCreate(
                full_name="Grace Njeri",
                national_id="12345678",
                kra_pin="X1",
                basic_salary=Decimal("50000"),
            )

    @pytest.mark.unit
    def test_empty_nssf_number_becomes_none(self) -> None:
        data = EmployeeCreate(
            full_name="Grace Njeri",
            national_id="12345678",
            kra_pin="A123456789B",
            nssf_number="",
            basic_salary=Decimal("50000"),
        )
        assert data.nssf_number is None

    @pytest.mark.unit
    def test_update_skips_unset_identifiers(self) -> None:
        data = EmployeeUpdate(job_title="Surveyor")
        assert data.model_dump(exclude_unset=True) == {"job_title": "Surveyor"}
