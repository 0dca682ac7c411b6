"""Application tests for coupon issuing, activation and redemption."""

from datetime import UTC, datetime, timedelta

import pytest
from promotions.coupon.coupon import Coupon
from promotions.coupon.management import CreateCoupon, DeactivateCoupon, ReactivateCoupon
from promotions.coupon.redemption import RedeemCoupon
from promotions.shared.discount_rule import DiscountType
from protean import current_domain
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError


def _create_coupon(**overrides):
    defaults = {
        "code": "SAVE20",
        "description": "20% off",
        "discount_type": DiscountType.PERCENTAGE.value,
        "discount_value": 20.0,
        "expiry_date": datetime.now(UTC) + timedelta(days=30),
    }
    defaults.update(overrides)
    return current_domain.process(CreateCoupon(**defaults), asynchronous=False)


def _redeem(code="SAVE20", customer_id="cust-001", order_total=350.0):
    return current_domain.process(
        RedeemCoupon(code=code, customer_id=customer_id, order_total=order_total),
        asynchronous=False,
    )


class TestCreateCoupon:
    def test_create_persists(self):
        coupon_id = _create_coupon(code="save20")
        coupon = current_domain.repository_for(Coupon).get(coupon_id)
        assert coupon.code == "SAVE20"
        assert coupon.discount_rule.value == 20.0

    def test_duplicate_code_rejected_case_insensitively(self):
        _create_coupon(code="SAVE20")
        with pytest.raises(ValidationError) as exc_info:
            _create_coupon(code="save20")
        assert "code" in exc_info.value.messages

    def test_find_by_code_ignores_case(self):
        coupon_id = _create_coupon()
        coupon = current_domain.repository_for(Coupon).find_by_code(" save20 ")
        assert str(coupon.id) == coupon_id


class TestRedeemCoupon:
    def test_redeem_returns_discount(self):
        _create_coupon()
        assert _redeem(order_total=350.0) == 70.0

        coupon = current_domain.repository_for(Coupon).find_by_code("SAVE20")
        assert coupon.usage_count == 1
        assert coupon.uses_by("cust-001") == 1

    def test_code_is_case_insensitive(self):
        _create_coupon()
        assert _redeem(code="save20") == 70.0

    def test_unknown_code(self):
        with pytest.raises(ObjectNotFoundError):
            _redeem(code="NOPE1234")

    def test_single_use_coupon(self):
        _create_coupon(max_uses=1)
        _redeem(customer_id="cust-001")
        with pytest.raises(ValidationError) as exc_info:
            _redeem(customer_id="cust-002")
        assert "max_uses" in exc_info.value.messages

    def test_per_customer_limit(self):
        _create_coupon(max_uses_per_customer=1)
        _redeem(customer_id="cust-001")
        with pytest.raises(ValidationError) as exc_info:
            _redeem(customer_id="cust-001")
        assert "max_uses_per_customer" in exc_info.value.messages

    def test_minimum_order_not_met(self):
        _create_coupon(minimum_order_amount=500.0)
        with pytest.raises(ValidationError) as exc_info:
            _redeem(order_total=499.0)
        assert "minimum_order_amount" in exc_info.value.messages

        coupon = current_domain.repository_for(Coupon).find_by_code("SAVE20")
        assert coupon.usage_count == 0

    def test_expired_coupon(self):
        _create_coupon(expiry_date=datetime.now(UTC) - timedelta(days=1))
        with pytest.raises(ValidationError) as exc_info:
            _redeem()
        assert "expiry_date" in exc_info.value.messages

    def test_deactivated_then_reactivated(self):
        coupon_id = _create_coupon()
        current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
        with pytest.raises(ValidationError) as exc_info:
            _redeem()
        assert "active" in exc_info.value.messages

        current_domain.process(ReactivateCoupon(coupon_id=coupon_id), asynchronous=False)
        assert _redeem() == 70.0

    def test_fixed_amount_capped_at_total(self):
        _create_coupon(code="FLAT500", discount_type=DiscountType.FIXED_AMOUNT.value, discount_value=500.0)
        assert _redeem(code="FLAT500", order_total=120.0) == 120.0


class TestConcurrentRedemption:
    def test_stale_copy_cannot_be_saved(self):
        coupon_id = _create_coupon(max_uses=1)
        repo = current_domain.repository_for(Coupon)

        first = repo.get(coupon_id)
        second = repo.get(coupon_id)
        assert first.version == second.version

        first.use("cust-001")
        repo.add(first)

        # The stale copy still sees zero uses, so the domain check passes
        second.use("cust-002")
        with pytest.raises(ExpectedVersionError):
            repo.add(second)

        coupon = repo.get(coupon_id)
        assert coupon.usage_count == 1
        assert coupon.uses_by("cust-001") == 1
        assert coupon.uses_by("cust-002") == 0
