"""Promotion scheduling and activation — commands and handler."""

import structlog
from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain
from shared.money import DEFAULT_CURRENCY

from promotions.domain import promotions
from promotions.promotion.promotion import Promotion
from promotions.shared.discount_rule import DiscountRule, DiscountType

logger = structlog.get_logger(__name__)


@promotions.command(part_of="Promotion")
class CreatePromotion:
    name = String(required=True, max_length=255)
    description = Text()
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    minimum_order_amount = Float(min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@promotions.command(part_of="Promotion")
class UpdatePromotion:
    promotion_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()


@promotions.command(part_of="Promotion")
class ActivatePromotion:
    promotion_id = Identifier(required=True)


@promotions.command(part_of="Promotion")
class DeactivatePromotion:
    promotion_id = Identifier(required=True)


@promotions.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        rule = DiscountRule(
            discount_type=command.discount_type,
            value=command.discount_value,
            currency=command.currency,
            minimum_order_amount=command.minimum_order_amount,
        )
        promotion = Promotion.create(
            name=command.name,
            description=command.description,
            discount_rule=rule,
            start_date=command.start_date,
            end_date=command.end_date,
        )
        current_domain.repository_for(Promotion).add(promotion)

        logger.info("Promotion created", promotion_id=str(promotion.id), name=promotion.name)
        return str(promotion.id)

    @handle(UpdatePromotion)
    def update_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.update(command.name, command.description)
        repo.add(promotion)

    @handle(ActivatePromotion)
    def activate_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.activate()
        repo.add(promotion)

    @handle(DeactivatePromotion)
    def deactivate_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.deactivate()
        repo.add(promotion)
