"""Domain events for the Promotion aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from promotions.domain import promotions


@promotions.event(part_of="Promotion")
class PromotionCreated:
    """A time-boxed promotion was scheduled."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    name = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@promotions.event(part_of="Promotion")
class PromotionActivated:
    """The promotion was switched on by an operator."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    activated_at = DateTime(required=True)


@promotions.event(part_of="Promotion")
class PromotionDeactivated:
    """The promotion was switched off by an operator, regardless of its dates."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@promotions.event(part_of="Promotion")
class PromotionUpdated:
    """The promotion's name or description changed."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    name = String(required=True)
    description = String()
