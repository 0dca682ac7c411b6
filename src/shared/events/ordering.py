"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains
(Inventory reserves, confirms and releases stock; Identity accumulates
customer spending). They are registered as external events via
domain.register_external_event() with matching __type__ strings so Protean's
stream deserialization works correctly.

The source-of-truth events are in src/ordering/order/events.py. ``items`` is
a JSON list of {product_id, product_sku, quantity, unit_price}.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String, Text


class OrderPlaced(BaseEvent):
    """An order was created from the customer's cart at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    subtotal = Float(required=True)
    discount = Float(default=0.0)
    total = Float(required=True)
    currency = String(max_length=3, required=True)
    coupon_code = String(max_length=20)
    placed_at = DateTime(required=True)


class OrderPaid(BaseEvent):
    """Payment was recorded for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    payment_id = String(required=True, max_length=255)
    total = Float(required=True)
    currency = String(max_length=3, required=True)
    paid_at = DateTime(required=True)


class OrderCancelled(BaseEvent):
    """The order was cancelled. ``previous_status`` tells whether it had been paid."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    previous_status = String(required=True)
    reason = String(required=True, max_length=500)
    cancelled_at = DateTime(required=True)


class OrderPaymentExpired(BaseEvent):
    """The payment window closed before the order was paid."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    expired_at = DateTime(required=True)
