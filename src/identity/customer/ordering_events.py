"""Inbound cross-domain event handler — Identity reacts to Ordering events.

Listens for OrderPaid to add the order total to the customer's cumulative
spending, which may move the customer into a higher membership level.

Cross-domain events are imported from shared.events.ordering and registered
as external events via identity.register_external_event().
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderPaid

from identity.customer.customer import Customer
from identity.customer.spending import AddSpending
from identity.domain import identity

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
identity.register_external_event(OrderPaid, "Ordering.OrderPaid.v1")


@identity.event_handler(part_of=Customer, stream_category="ordering::order")
class OrderingIdentityEventHandler:
    """Reacts to Ordering domain events to track customer spending."""

    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        """Add a paid order's total to the customer's spending."""
        try:
            current_domain.repository_for(Customer).get(str(event.customer_id))
        except ObjectNotFoundError:
            logger.warning(
                "Paid order for unknown customer, spending not recorded",
                order_id=str(event.order_id),
                customer_id=str(event.customer_id),
            )
            return

        current_domain.process(
            AddSpending(
                customer_id=str(event.customer_id),
                amount=event.total,
                currency=event.currency,
            ),
            asynchronous=False,
        )
        logger.info(
            "Recorded spending for paid order",
            order_id=str(event.order_id),
            customer_id=str(event.customer_id),
            amount=event.total,
        )
