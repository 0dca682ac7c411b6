"""Tests for the CouponCode value object."""

import pytest
from promotions.coupon.coupon import CouponCode
from protean.exceptions import ValidationError


class TestCouponCode:
    def test_of_normalizes_case_and_whitespace(self):
        assert CouponCode.of("  save20 ").value == "SAVE20"

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_rejected(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            CouponCode.of(raw)
        assert "code" in exc_info.value.messages

    @pytest.mark.parametrize("raw", ["ABC", "A" * 21, "SAVE-20", "SAVE 20"])
    def test_malformed_rejected(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            CouponCode.of(raw)
        assert "code" in exc_info.value.messages

    def test_length_bounds_inclusive(self):
        assert CouponCode.of("ABCD").value == "ABCD"
        assert CouponCode.of("A" * 20).value == "A" * 20

    def test_generate(self):
        code = CouponCode.generate()
        assert len(code.value) == 8
        assert code.value.isalnum()
        assert code.value == code.value.upper()

    def test_generate_invalid_length_rejected(self):
        with pytest.raises(ValidationError):
            CouponCode.generate(3)

    def test_generate_with_prefix(self):
        code = CouponCode.generate_with_prefix("vip")
        assert code.value.startswith("VIP")
        assert len(code.value) == 7
