"""Stock management — opening, restocking, writing off and alert thresholds."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import DEFAULT_LOW_STOCK_THRESHOLD, Inventory

logger = structlog.get_logger(__name__)


@inventory.command(part_of="Inventory")
class CreateInventory:
    """Open a stock record for a product (one per product)."""

    product_id = Identifier(required=True)
    initial_stock = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=DEFAULT_LOW_STOCK_THRESHOLD, min_value=0)


@inventory.command(part_of="Inventory")
class RestockInventory:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@inventory.command(part_of="Inventory")
class ReduceStock:
    """Write off stock without going through a reservation."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@inventory.command(part_of="Inventory")
class SetLowStockThreshold:
    product_id = Identifier(required=True)
    threshold = Integer(required=True, min_value=0)


@inventory.command_handler(part_of=Inventory)
class StockManagementHandler:
    @handle(CreateInventory)
    def create_inventory(self, command):
        repo = current_domain.repository_for(Inventory)
        if repo.find_by_product_id(command.product_id) is not None:
            raise ValidationError({"product_id": [f"Inventory already exists for product {command.product_id}"]})

        item = Inventory.create(
            product_id=command.product_id,
            initial_stock=command.initial_stock,
            low_stock_threshold=command.low_stock_threshold,
        )
        repo.add(item)
        logger.info(
            "Inventory created",
            inventory_id=str(item.id),
            product_id=str(command.product_id),
            initial_stock=command.initial_stock,
        )
        return str(item.id)

    @handle(RestockInventory)
    def restock(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get_by_product_id(command.product_id)
        item.restock(command.quantity)
        repo.add(item)
        logger.info("Stock restocked", product_id=str(command.product_id), new_stock=item.stock.quantity)

    @handle(ReduceStock)
    def reduce_stock(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get_by_product_id(command.product_id)
        item.reduce_stock(command.quantity)
        repo.add(item)
        logger.info("Stock reduced", product_id=str(command.product_id), new_stock=item.stock.quantity)

    @handle(SetLowStockThreshold)
    def set_low_stock_threshold(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get_by_product_id(command.product_id)
        item.set_low_stock_threshold(command.threshold)
        repo.add(item)
