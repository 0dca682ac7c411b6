"""Domain events for the Inventory aggregate."""

from protean.fields import DateTime, Identifier, Integer

from inventory.domain import inventory


@inventory.event(part_of="Inventory")
class InventoryCreated:
    """A stock record was opened for a product."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    initial_stock = Integer(required=True)
    low_stock_threshold = Integer(required=True)
    created_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockRestocked:
    """Stock was added to the product's on-hand quantity."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    restocked_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockReserved:
    """Units were put on hold for an order."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    reserved_quantity = Integer(required=True)
    available_quantity = Integer(required=True)
    reserved_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class ReservationReleased:
    """A hold was lifted, returning units to the available pool."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    reserved_quantity = Integer(required=True)
    released_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class ReservationConfirmed:
    """Held units were sold, reducing both stock and reserved quantity."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    reserved_quantity = Integer(required=True)
    confirmed_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockReduced:
    """Stock was written off directly, bypassing reservation."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    reduced_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class LowStockThresholdChanged:
    """The low-stock alert threshold was changed."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_threshold = Integer(required=True)
    new_threshold = Integer(required=True)


@inventory.event(part_of="Inventory")
class LowStockDetected:
    """Stock fell below the low-stock threshold."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    current_stock = Integer(required=True)
    threshold = Integer(required=True)
    detected_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockDepleted:
    """The product has no stock left."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    depleted_at = DateTime(required=True)
