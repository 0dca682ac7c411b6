"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from identity.domain import identity


@identity.event(part_of="Customer")
class CustomerRegistered:
    """A new customer account was created on the platform."""

    __version__ = 1

    customer_id: Identifier(required=True)
    email: String(required=True)
    first_name: String(required=True)
    last_name: String(required=True)
    registered_at: DateTime(required=True)


@identity.event(part_of="Customer")
class SpendingAdded:
    """A paid order was added to the customer's cumulative spending."""

    __version__ = 1

    customer_id: Identifier(required=True)
    amount: Float(required=True)
    currency: String(required=True)
    total_spending: Float(required=True)


@identity.event(part_of="Customer")
class LevelUpgraded:
    """A customer's cumulative spending moved them into a higher membership level."""

    __version__ = 1

    customer_id: Identifier(required=True)
    previous_level: String(required=True)
    new_level: String(required=True)
    new_discount_percentage: Integer(required=True)
    total_spending: Float(required=True)
