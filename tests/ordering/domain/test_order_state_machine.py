"""Tests for the Order state machine — valid transitions and invalid transition guards."""

import pytest
from ordering.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPaid,
    OrderPaymentExpired,
    OrderRefunded,
    OrderShipped,
)
from ordering.order.order import Order, OrderItem, OrderStatus
from ordering.shared.money import Money
from protean.exceptions import ValidationError


def _make_order():
    item = OrderItem(
        product_id="prod-001",
        product_name="Test Product",
        product_sku="SKU-001",
        unit_price=Money.of(50.0),
        quantity=1,
    )
    order = Order.create_from_cart("cust-001", [item])
    order._events.clear()
    return order


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = _make_order()
    if target_status == OrderStatus.PENDING_PAYMENT:
        return order

    if target_status == OrderStatus.PAYMENT_EXPIRED:
        order.expire_payment()
    elif target_status == OrderStatus.CANCELLED:
        order.cancel("Changed my mind")
    else:
        order.mark_as_paid("pay-001")
        if target_status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            order.mark_as_shipped("TRACK-001")
        if target_status == OrderStatus.DELIVERED:
            order.mark_as_delivered()
        if target_status == OrderStatus.REFUNDED:
            order.mark_as_refunded()

    order._events.clear()
    assert order.status == target_status.value
    return order


class TestHappyPath:
    def test_pay_ship_deliver(self):
        order = _make_order()

        order.mark_as_paid("pay-001")
        assert order.status == OrderStatus.PAID.value
        assert order.payment_id == "pay-001"
        assert order.paid_at is not None

        order.mark_as_shipped("TRACK-001")
        assert order.status == OrderStatus.SHIPPED.value
        assert order.tracking_number == "TRACK-001"

        order.mark_as_delivered()
        assert order.status == OrderStatus.DELIVERED.value
        assert order.delivered_at is not None
        assert order.is_terminal()

        assert [type(e) for e in order._events] == [OrderPaid, OrderShipped, OrderDelivered]

    def test_paid_event_carries_total_and_lines(self):
        order = _make_order()
        order.mark_as_paid("pay-001")
        event = order._events[-1]
        assert event.total == 50.0
        assert event.customer_id == "cust-001"
        assert "prod-001" in event.items


class TestPaymentExpiry:
    def test_expire_pending_order(self):
        order = _make_order()
        order.expire_payment()
        assert order.status == OrderStatus.PAYMENT_EXPIRED.value
        assert isinstance(order._events[-1], OrderPaymentExpired)
        assert order.is_terminal()

    def test_paid_order_cannot_expire(self):
        order = _order_at_state(OrderStatus.PAID)
        with pytest.raises(ValidationError) as exc_info:
            order.expire_payment()
        assert "status" in exc_info.value.messages


class TestCancellation:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING_PAYMENT, OrderStatus.PAID])
    def test_cancel_allowed_before_shipping(self, status):
        order = _order_at_state(status)
        order.cancel("Customer request")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "Customer request"

        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == status.value

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.PAYMENT_EXPIRED, OrderStatus.REFUNDED],
    )
    def test_cancel_rejected_after_shipping_or_in_terminal_state(self, status):
        order = _order_at_state(status)
        with pytest.raises(ValidationError) as exc_info:
            order.cancel("Too late")
        assert "status" in exc_info.value.messages
        assert order.status == status.value


class TestRefund:
    @pytest.mark.parametrize("status", [OrderStatus.PAID, OrderStatus.CANCELLED])
    def test_refund_allowed(self, status):
        order = _order_at_state(status)
        order.mark_as_refunded()
        assert order.status == OrderStatus.REFUNDED.value
        assert order.refunded_at is not None

        event = order._events[-1]
        assert isinstance(event, OrderRefunded)
        assert event.refund_amount == 50.0

    @pytest.mark.parametrize("status", [OrderStatus.PENDING_PAYMENT, OrderStatus.SHIPPED, OrderStatus.DELIVERED])
    def test_refund_rejected(self, status):
        order = _order_at_state(status)
        with pytest.raises(ValidationError):
            order.mark_as_refunded()


class TestInvalidTransitions:
    def test_cannot_ship_unpaid_order(self):
        with pytest.raises(ValidationError):
            _make_order().mark_as_shipped("TRACK-001")

    def test_cannot_deliver_unshipped_order(self):
        with pytest.raises(ValidationError):
            _order_at_state(OrderStatus.PAID).mark_as_delivered()

    def test_cannot_pay_twice(self):
        with pytest.raises(ValidationError):
            _order_at_state(OrderStatus.PAID).mark_as_paid("pay-002")

    def test_failed_transition_raises_no_event(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(ValidationError):
            order.mark_as_paid("pay-002")
        assert order._events == []

    @pytest.mark.parametrize(
        "status", [OrderStatus.DELIVERED, OrderStatus.PAYMENT_EXPIRED, OrderStatus.REFUNDED]
    )
    def test_terminal_states(self, status):
        assert _order_at_state(status).is_terminal()

    def test_cancelled_is_not_terminal(self):
        assert not _order_at_state(OrderStatus.CANCELLED).is_terminal()
