"""Inbound cross-domain event handler — Inventory reacts to Ordering events.

Each order line maps to one reservation step on the product's Inventory:
placing an order holds stock, payment confirms the hold, and cancellation or
payment expiry gives it back. A paid order that is cancelled has already
consumed its stock, so its lines are restocked instead of released.

Cross-domain events are imported from shared.events.ordering and registered
as external events via inventory.register_external_event().
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderCancelled, OrderPaid, OrderPaymentExpired, OrderPlaced
from shared.logging import log_context

from inventory.domain import inventory
from inventory.stock.management import RestockInventory
from inventory.stock.reservation import ConfirmReservation, ReleaseReservation, ReserveStock
from inventory.stock.stock import Inventory

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
inventory.register_external_event(OrderPlaced, "Ordering.OrderPlaced.v1")
inventory.register_external_event(OrderPaid, "Ordering.OrderPaid.v1")
inventory.register_external_event(OrderCancelled, "Ordering.OrderCancelled.v1")
inventory.register_external_event(OrderPaymentExpired, "Ordering.OrderPaymentExpired.v1")

# OrderCancelled.previous_status for orders that had already been paid
_PAID_STATUS = "Paid"


def _order_lines(event):
    if not event.items:
        return []
    return json.loads(event.items) if isinstance(event.items, str) else event.items


@inventory.event_handler(part_of=Inventory, stream_category="ordering::order")
class OrderingInventoryEventHandler:
    """Reacts to Ordering domain events to reserve, confirm and release stock."""

    def _process_lines(self, event, command_factory):
        repo = current_domain.repository_for(Inventory)

        with log_context(order_id=str(event.order_id)):
            for line in _order_lines(event):
                product_id = str(line.get("product_id"))
                quantity = int(line.get("quantity", 1))

                if repo.find_by_product_id(product_id) is None:
                    logger.warning("No inventory record found for order line", product_id=product_id)
                    continue

                current_domain.process(command_factory(product_id, quantity), asynchronous=False)

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        """Hold stock for every line of a new order."""
        logger.info("Reserving stock for placed order", order_id=str(event.order_id))
        self._process_lines(
            event,
            lambda product_id, quantity: ReserveStock(
                product_id=product_id, quantity=quantity, order_id=str(event.order_id)
            ),
        )

    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        """Turn the order's holds into committed sales."""
        logger.info("Confirming reservations for paid order", order_id=str(event.order_id))
        self._process_lines(
            event,
            lambda product_id, quantity: ConfirmReservation(
                product_id=product_id, quantity=quantity, order_id=str(event.order_id)
            ),
        )

    @handle(OrderPaymentExpired)
    def on_order_payment_expired(self, event: OrderPaymentExpired) -> None:
        """Give back the holds of an order that was never paid."""
        logger.info("Releasing reservations for expired order", order_id=str(event.order_id))
        self._process_lines(
            event,
            lambda product_id, quantity: ReleaseReservation(
                product_id=product_id, quantity=quantity, order_id=str(event.order_id)
            ),
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        """Release the holds of an unpaid order, or restock a paid one."""
        logger.info(
            "Returning stock for cancelled order",
            order_id=str(event.order_id),
            previous_status=event.previous_status,
            reason=event.reason,
        )

        if event.previous_status == _PAID_STATUS:
            self._process_lines(
                event,
                lambda product_id, quantity: RestockInventory(product_id=product_id, quantity=quantity),
            )
        else:
            self._process_lines(
                event,
                lambda product_id, quantity: ReleaseReservation(
                    product_id=product_id, quantity=quantity, order_id=str(event.order_id)
                ),
            )
