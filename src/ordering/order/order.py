"""Order aggregate (CQRS) — the core of the ordering domain.

An order snapshots the cart's lines at checkout, prices them once and then
moves through the payment and shipping lifecycle. Line items never change
after creation, so later catalog price changes cannot affect a placed order.

State Machine (7 states):
    PENDING_PAYMENT → PAID → SHIPPED → DELIVERED
    PENDING_PAYMENT → PAYMENT_EXPIRED
    PENDING_PAYMENT/PAID → CANCELLED
    PAID/CANCELLED → REFUNDED

Pricing:
    total = subtotal - discount, never below zero
    discount = min(coupon discount, subtotal)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject
from shared.money import DEFAULT_CURRENCY, to_decimal

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPaid,
    OrderPaymentExpired,
    OrderPlaced,
    OrderRefunded,
    OrderShipped,
)
from ordering.shared.money import Money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING_PAYMENT = "Pending_Payment"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    PAYMENT_EXPIRED = "Payment_Expired"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING_PAYMENT: {
        OrderStatus.PAID,
        OrderStatus.PAYMENT_EXPIRED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAID: {
        OrderStatus.SHIPPED,
        OrderStatus.CANCELLED,
        OrderStatus.REFUNDED,
    },
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.PAYMENT_EXPIRED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked at checkout: subtotal, discount and the payable total."""

    subtotal = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if to_decimal(self.discount) > to_decimal(self.subtotal):
            raise ValidationError({"discount": ["Discount cannot exceed the subtotal"]})

    @invariant.post
    def total_must_be_subtotal_less_discount(self):
        expected = max(to_decimal(self.subtotal) - to_decimal(self.discount), to_decimal(0))
        if to_decimal(self.total) != expected:
            raise ValidationError({"total": ["Total must equal subtotal minus discount"]})


@ordering.value_object(part_of="Order")
class CouponDiscount:
    """A coupon code together with the discount it was redeemed for."""

    code = String(required=True, max_length=20)
    amount = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A product line captured at checkout. Never modified after the order is placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_sku = String(required=True, max_length=50)
    unit_price = ValueObject(Money, required=True)
    quantity = Integer(required=True, min_value=1)

    @classmethod
    def from_cart_item(cls, cart_item):
        return cls(
            product_id=cart_item.product_id,
            product_name=cart_item.product_name,
            product_sku=cart_item.product_sku,
            unit_price=cart_item.unit_price,
            quantity=cart_item.quantity.value,
        )

    def subtotal(self):
        return self.unit_price.multiply(self.quantity)

    def to_dict(self):
        return {
            "product_id": str(self.product_id),
            "product_sku": self.product_sku,
            "quantity": self.quantity,
            "unit_price": self.unit_price.amount,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    coupon_code = String(max_length=20)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING_PAYMENT.value,
    )
    payment_id = String(max_length=255)
    tracking_number = String(max_length=255)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    paid_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    refunded_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create_from_cart(cls, customer_id, items, coupon_discount=None):
        """Create a pending order from a list of OrderItems.

        Args:
            customer_id: The customer placing the order.
            items: OrderItem snapshots, at least one.
            coupon_discount: Optional CouponDiscount. The applied discount is
                capped at the subtotal.
        """
        if not items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        currency = items[0].unit_price.currency
        subtotal = Money.zero(currency)
        for item in items:
            subtotal = subtotal.add(item.subtotal())

        discount = Money.zero(currency)
        coupon_code = None
        if coupon_discount is not None:
            discount = Money.of(coupon_discount.amount, currency).min(subtotal)
            coupon_code = coupon_discount.code

        total = subtotal.subtract_floored(discount)
        now = datetime.now(UTC)

        order = cls(
            customer_id=customer_id,
            items=list(items),
            pricing=OrderPricing(
                subtotal=subtotal.amount,
                discount=discount.amount,
                total=total.amount,
                currency=currency,
            ),
            coupon_code=coupon_code,
            status=OrderStatus.PENDING_PAYMENT.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=order._items_json(),
                subtotal=subtotal.amount,
                discount=discount.amount,
                total=total.amount,
                currency=currency,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def subtotal(self):
        return Money.of(self.pricing.subtotal, self.pricing.currency)

    @property
    def discount(self):
        return Money.of(self.pricing.discount, self.pricing.currency)

    @property
    def total(self):
        return Money.of(self.pricing.total, self.pricing.currency)

    def item_count(self) -> int:
        return len(self.items)

    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[OrderStatus(self.status)]

    def _items_json(self):
        return json.dumps([item.to_dict() for item in self.items])

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def mark_as_paid(self, payment_id):
        self._assert_can_transition(OrderStatus.PAID)

        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.payment_id = payment_id
        self.paid_at = now
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                items=self._items_json(),
                payment_id=payment_id,
                total=self.pricing.total,
                currency=self.pricing.currency,
                paid_at=now,
            )
        )

    def expire_payment(self):
        """Close the payment window. Triggered by an external scheduler."""
        self._assert_can_transition(OrderStatus.PAYMENT_EXPIRED)

        now = datetime.now(UTC)
        self.status = OrderStatus.PAYMENT_EXPIRED.value
        self.updated_at = now

        self.raise_(
            OrderPaymentExpired(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                items=self._items_json(),
                expired_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Shipping
    # -------------------------------------------------------------------
    def mark_as_shipped(self, tracking_number):
        self._assert_can_transition(OrderStatus.SHIPPED)

        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.tracking_number = tracking_number
        self.shipped_at = now
        self.updated_at = now

        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                tracking_number=tracking_number,
                shipped_at=now,
            )
        )

    def mark_as_delivered(self):
        self._assert_can_transition(OrderStatus.DELIVERED)

        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                delivered_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation & Refund
    # -------------------------------------------------------------------
    def cancel(self, reason):
        """Cancel an unpaid or paid order that has not shipped yet."""
        self._assert_can_transition(OrderStatus.CANCELLED)

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                items=self._items_json(),
                previous_status=previous_status,
                reason=reason,
                cancelled_at=now,
            )
        )

    def mark_as_refunded(self):
        self._assert_can_transition(OrderStatus.REFUNDED)

        now = datetime.now(UTC)
        self.status = OrderStatus.REFUNDED.value
        self.refunded_at = now
        self.updated_at = now

        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                refund_amount=self.pricing.total,
                currency=self.pricing.currency,
                refunded_at=now,
            )
        )
