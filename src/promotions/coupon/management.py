"""Coupon issuing and activation — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from shared.money import DEFAULT_CURRENCY

from promotions.coupon.coupon import Coupon
from promotions.domain import promotions
from promotions.shared.discount_rule import DiscountRule, DiscountType

logger = structlog.get_logger(__name__)


@promotions.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=20)
    description = Text()
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    minimum_order_amount = Float(min_value=0.0)
    expiry_date = DateTime(required=True)
    max_uses = Integer(min_value=1)
    max_uses_per_customer = Integer(min_value=1)


@promotions.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


@promotions.command(part_of="Coupon")
class ReactivateCoupon:
    coupon_id = Identifier(required=True)


@promotions.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        if repo.exists_by_code(command.code):
            raise ValidationError({"code": [f"Coupon code already exists: {command.code.strip().upper()}"]})

        rule = DiscountRule(
            discount_type=command.discount_type,
            value=command.discount_value,
            currency=command.currency,
            minimum_order_amount=command.minimum_order_amount,
        )
        coupon = Coupon.create(
            code=command.code,
            description=command.description,
            discount_rule=rule,
            expiry_date=command.expiry_date,
            max_uses=command.max_uses,
            max_uses_per_customer=command.max_uses_per_customer,
        )
        repo.add(coupon)

        logger.info("Coupon created", coupon_id=str(coupon.id), code=coupon.code)
        return str(coupon.id)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.deactivate()
        repo.add(coupon)

    @handle(ReactivateCoupon)
    def reactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.reactivate()
        repo.add(coupon)
