"""Repository for the Inventory aggregate."""

from protean.exceptions import ObjectNotFoundError

from inventory.domain import inventory
from inventory.stock.stock import Inventory


@inventory.repository(part_of=Inventory)
class InventoryRepository:
    def find_by_product_id(self, product_id) -> Inventory | None:
        """Find the stock record for a product, if one exists."""
        records = self._dao.query.filter(product_id=str(product_id)).all().items
        return records[0] if records else None

    def get_by_product_id(self, product_id) -> Inventory:
        """Like find_by_product_id, but raise ObjectNotFoundError when absent."""
        record = self.find_by_product_id(product_id)
        if record is None:
            raise ObjectNotFoundError(f"Inventory for product {product_id} not found")
        return record
