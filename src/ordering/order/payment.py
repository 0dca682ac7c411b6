"""Order payment — recording a payment and expiring unpaid orders."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MarkOrderPaid:
    order_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)


@ordering.command(part_of="Order")
class ExpireOrderPayment:
    """Issued by the scheduler that polls for stale pending orders."""

    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(MarkOrderPaid)
    def mark_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_as_paid(command.payment_id)
        repo.add(order)
        logger.info("Order paid", order_id=str(order.id), payment_id=command.payment_id)

    @handle(ExpireOrderPayment)
    def expire_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.expire_payment()
        repo.add(order)
        logger.info("Order payment expired", order_id=str(order.id))
