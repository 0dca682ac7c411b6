"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from promotions.domain import promotions


@promotions.event(part_of="Coupon")
class CouponCreated:
    """A redeemable coupon code was issued."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    expiry_date = DateTime(required=True)
    max_uses = Integer()
    max_uses_per_customer = Integer()
    created_at = DateTime(required=True)


@promotions.event(part_of="Coupon")
class CouponUsed:
    """A customer redeemed the coupon."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier()
    discount_amount = Float(default=0.0)
    usage_count = Integer(required=True)
    used_at = DateTime(required=True)


@promotions.event(part_of="Coupon")
class CouponDeactivated:
    """The coupon was switched off and can no longer be redeemed."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    deactivated_at = DateTime(required=True)


@promotions.event(part_of="Coupon")
class CouponReactivated:
    """A deactivated coupon was switched back on."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    reactivated_at = DateTime(required=True)
