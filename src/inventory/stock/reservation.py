"""Stock reservation — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import Inventory

logger = structlog.get_logger(__name__)


@inventory.command(part_of="Inventory")
class ReserveStock:
    """Hold units of a product for an order."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    order_id = Identifier()


@inventory.command(part_of="Inventory")
class ReleaseReservation:
    """Return held units to the available pool."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    order_id = Identifier()


@inventory.command(part_of="Inventory")
class ConfirmReservation:
    """Convert held units into a sale after payment."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    order_id = Identifier()


@inventory.command_handler(part_of=Inventory)
class ReservationHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get_by_product_id(command.product_id)
        item.reserve(command.quantity)
        repo.add(item)
        logger.info(
            "Stock reserved",
            product_id=str(command.product_id),
            order_id=str(command.order_id) if command.order_id else None,
            quantity=command.quantity,
            available=item.available_quantity,
        )

    @handle(ReleaseReservation)
    def release_reservation(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get_by_product_id(command.product_id)
        item.release_reservation(command.quantity)
        repo.add(item)
        logger.info(
            "Reservation released",
            product_id=str(command.product_id),
            order_id=str(command.order_id) if command.order_id else None,
            quantity=command.quantity,
        )

    @handle(ConfirmReservation)
    def confirm_reservation(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get_by_product_id(command.product_id)
        item.confirm_reservation(command.quantity)
        repo.add(item)
        logger.info(
            "Reservation confirmed",
            product_id=str(command.product_id),
            order_id=str(command.order_id) if command.order_id else None,
            quantity=command.quantity,
        )
