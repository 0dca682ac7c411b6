"""Coupon redemption at checkout — validate, use and report the discount.

Checks run in a fixed order so callers always see the most fundamental
problem first: unknown code, inactive or expired coupon, global usage limit,
per-customer limit, then the discount rule's minimum order.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon
from promotions.domain import promotions

logger = structlog.get_logger(__name__)


@promotions.command(part_of="Coupon")
class RedeemCoupon:
    """Redeem a coupon for a customer's order total. Returns the discount amount."""

    code = String(required=True, max_length=20)
    customer_id = Identifier(required=True)
    order_total = Float(required=True, min_value=0.0)
    order_id = Identifier()


def validate_redemption(coupon, code, customer_id, order_total):
    """Raise the first reason the coupon cannot be redeemed, if any."""
    if coupon is None:
        raise ObjectNotFoundError(f"Coupon not found: {code}")
    if not coupon.active:
        raise ValidationError({"active": ["Coupon is not active"]})
    if coupon.is_expired():
        raise ValidationError({"expiry_date": ["Coupon has expired"]})
    if coupon.is_exhausted():
        raise ValidationError({"max_uses": ["Coupon has reached maximum uses"]})
    if not coupon.can_be_used_by(customer_id):
        raise ValidationError({"max_uses_per_customer": ["Customer has reached maximum uses for this coupon"]})
    if not coupon.is_applicable_to(order_total):
        raise ValidationError(
            {
                "minimum_order_amount": [
                    f"Order total does not meet the minimum of {coupon.discount_rule.minimum_order_amount:.2f}"
                ]
            }
        )


@promotions.command_handler(part_of=Coupon)
class RedeemCouponHandler:
    @handle(RedeemCoupon)
    def redeem_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.find_by_code(command.code)
        validate_redemption(coupon, command.code, command.customer_id, command.order_total)

        discount = coupon.calculate_discount(command.order_total)
        coupon.use(command.customer_id, order_id=command.order_id, discount_amount=discount)
        repo.add(coupon)

        logger.info(
            "Coupon redeemed",
            code=coupon.code,
            customer_id=str(command.customer_id),
            order_id=str(command.order_id) if command.order_id else None,
            discount=discount,
        )
        return discount
