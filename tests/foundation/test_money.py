"""Unit tests for landdesk.foundation.domain.money."""

from __future__ import annotations

from decimal import Decimal

import pytest

from landdesk.foundation.domain.money import ZERO, money_sum, percentage, to_money


@pytest.mark.unit
class TestToMoney:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "0.00"),
            (1500, "1500.00"),
            ("2499.995", "2500.00"),
            (Decimal("10.005"), "10.01"),
            (Decimal("10.004"), "10.00"),
            (0.1, "0.10"),
        ],
    )
    def test_rounds_half_up_to_cent(self, value, expected) -> None:
        assert to_money(value) == Decimal(expected)


@pytest.mark.unit
class TestMoneySum:
    def test_empty_is_zero(self) -> None:
        assert money_sum([]) == ZERO

    def test_sums_mixed_values(self) -> None:
        assert money_sum([Decimal("100.10"), 50, "0.005", None]) == Decimal("150.11")


@pytest.mark.unit
class TestPercentage:
    def test_zero_whole_is_zero(self) -> None:
        assert percentage(Decimal("10"), Decimal("0")) == ZERO

    def test_rounded_to_cent(self) -> None:
        assert percentage(Decimal("1"), Decimal("3")) == Decimal("33.33")
