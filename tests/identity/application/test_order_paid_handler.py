"""Application tests for OrderingIdentityEventHandler — Identity reacts to Ordering events."""

from datetime import UTC, datetime

from identity.customer.customer import Customer
from identity.customer.membership import MemberLevel
from identity.customer.ordering_events import OrderingIdentityEventHandler
from identity.customer.registration import RegisterCustomer
from protean import current_domain
from shared.events.ordering import OrderPaid


def _register():
    return current_domain.process(
        RegisterCustomer(email="jane@example.com", first_name="Jane", last_name="Doe"),
        asynchronous=False,
    )


def _order_paid(customer_id, total):
    return OrderPaid(
        order_id="ord-001",
        customer_id=customer_id,
        items="[]",
        payment_id="pay-001",
        total=total,
        currency="TWD",
        paid_at=datetime.now(UTC),
    )


class TestOrderPaidHandler:
    def test_adds_order_total_to_spending(self):
        customer_id = _register()

        OrderingIdentityEventHandler().on_order_paid(_order_paid(customer_id, 12000.0))

        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.total_spending.amount == 12000.0
        assert customer.member_level == MemberLevel.SILVER.value

    def test_unknown_customer_is_skipped(self):
        # Should not raise
        OrderingIdentityEventHandler().on_order_paid(_order_paid("cust-404", 500.0))
