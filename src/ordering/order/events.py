"""Domain events for the Order aggregate.

Lifecycle events carry the order's lines as JSON so that other bounded
contexts (inventory, identity) can react without loading the order.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was created from the customer's cart at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, product_sku, quantity, unit_price}
    subtotal = Float(required=True)
    discount = Float(default=0.0)
    total = Float(required=True)
    currency = String(max_length=3, required=True)
    coupon_code = String(max_length=20)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment was recorded for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    payment_id = String(required=True, max_length=255)
    total = Float(required=True)
    currency = String(max_length=3, required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """The order was handed to a carrier."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """The order reached the customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before shipping."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    previous_status = String(required=True)
    reason = String(required=True, max_length=500)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentExpired:
    """The payment window closed before the order was paid."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)
    expired_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderRefunded:
    """The order's payment was returned to the customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    refund_amount = Float(required=True)
    currency = String(max_length=3, required=True)
    refunded_at = DateTime(required=True)
