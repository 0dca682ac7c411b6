"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_customer_id(self, customer_id) -> list[Order]:
        """All orders placed by a customer."""
        return self._dao.query.filter(customer_id=str(customer_id)).all().items

    def find_pending_payment(self) -> list[Order]:
        """Orders still waiting for payment, for the payment-expiry scheduler."""
        return self._dao.query.filter(status=OrderStatus.PENDING_PAYMENT.value).all().items
