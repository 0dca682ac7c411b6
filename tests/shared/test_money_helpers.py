"""Tests for the Decimal helpers behind every Money value object."""

from decimal import Decimal

import pytest
from shared.money import DEFAULT_CURRENCY, VALID_CURRENCIES, round_money, to_decimal


class TestRounding:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (1.005, Decimal("1.01")),
            (2.675, Decimal("2.68")),
            ("0.125", Decimal("0.13")),
            (10, Decimal("10.00")),
        ],
    )
    def test_to_decimal_rounds_half_up(self, value, expected):
        assert to_decimal(value) == expected

    def test_round_money_returns_float(self):
        assert round_money(Decimal("1.015")) == 1.02

    def test_default_currency_is_supported(self):
        assert DEFAULT_CURRENCY in VALID_CURRENCIES
