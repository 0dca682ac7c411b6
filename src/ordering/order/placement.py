"""Order placement — turns the customer's cart into an order.

The cart's lines are snapshotted into OrderItems, the order is saved and the
cart is emptied, all inside the handler's unit of work.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order.order import CouponDiscount, Order, OrderItem

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    """Check out the customer's cart, optionally with an already-redeemed coupon."""

    customer_id = Identifier(required=True)
    coupon_code = String(max_length=20)
    coupon_discount = Float(min_value=0.0)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.find_by_customer_id(command.customer_id)
        if cart is None:
            raise ObjectNotFoundError(f"Cart for customer {command.customer_id} not found")
        if cart.is_empty():
            raise ValidationError({"items": ["Cannot place an order from an empty cart"]})

        has_code = bool(command.coupon_code)
        has_amount = command.coupon_discount is not None
        if has_code != has_amount:
            raise ValidationError(
                {"coupon_discount": ["A coupon code and its redeemed discount must be given together"]}
            )

        coupon_discount = None
        if has_code:
            coupon_discount = CouponDiscount(code=command.coupon_code, amount=command.coupon_discount)

        order = Order.create_from_cart(
            customer_id=command.customer_id,
            items=[OrderItem.from_cart_item(item) for item in cart.items],
            coupon_discount=coupon_discount,
        )
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total=order.pricing.total,
            coupon_code=order.coupon_code,
        )
        return str(order.id)
