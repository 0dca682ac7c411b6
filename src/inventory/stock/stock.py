"""Inventory aggregate (CQRS) — stock ledger for a single product.

Stock Level Model:
    stock:     Physical units on hand
    reserved:  Held for orders that are not paid yet
    available: stock - reserved (what can still be promised)

Reservations move units through hold → sale (confirm) or hold → pool
(release). The invariant 0 <= reserved <= stock holds after every mutation;
changes that touch both numbers run inside ``atomic_change``.

Low-stock and stock-depleted signals are raised on the aggregate and only
dispatched once the repository commit succeeds.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, ValueObject

from inventory.domain import inventory
from inventory.stock.events import (
    InventoryCreated,
    LowStockDetected,
    LowStockThresholdChanged,
    ReservationConfirmed,
    ReservationReleased,
    StockDepleted,
    StockReduced,
    StockReserved,
    StockRestocked,
)

DEFAULT_LOW_STOCK_THRESHOLD = 10


def _require_positive(quantity):
    if quantity is None or quantity <= 0:
        raise ValidationError({"quantity": ["Quantity must be positive"]})


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@inventory.value_object(part_of="Inventory")
class Stock:
    """A non-negative count of physical units."""

    quantity = Integer(required=True, min_value=0)

    @classmethod
    def of(cls, quantity):
        return cls(quantity=quantity)

    @classmethod
    def zero(cls):
        return cls(quantity=0)

    def add(self, quantity):
        if quantity < 0:
            raise ValidationError({"quantity": ["Cannot add a negative quantity"]})
        return Stock(quantity=self.quantity + quantity)

    def subtract(self, quantity):
        if quantity > self.quantity:
            raise ValidationError({"quantity": [f"Insufficient stock: have {self.quantity}, need {quantity}"]})
        return Stock(quantity=self.quantity - quantity)

    def has_enough(self, quantity) -> bool:
        return self.quantity >= quantity

    def is_out_of_stock(self) -> bool:
        return self.quantity == 0

    def is_low_stock(self, threshold) -> bool:
        return self.quantity < threshold


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@inventory.aggregate
class Inventory:
    """Stock and reservations for one product."""

    product_id = Identifier(required=True)
    stock = ValueObject(Stock)
    reserved_quantity = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=DEFAULT_LOW_STOCK_THRESHOLD, min_value=0)
    last_restocked_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def reserved_cannot_exceed_stock(self):
        on_hand = self.stock.quantity if self.stock else 0
        if (self.reserved_quantity or 0) > on_hand:
            raise ValidationError(
                {"reserved_quantity": [f"Reserved quantity {self.reserved_quantity} exceeds stock {on_hand}"]}
            )

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, product_id, initial_stock=0, low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD):
        now = datetime.now(UTC)
        item = cls(
            product_id=product_id,
            stock=Stock.of(initial_stock),
            reserved_quantity=0,
            low_stock_threshold=low_stock_threshold,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            InventoryCreated(
                inventory_id=str(item.id),
                product_id=str(product_id),
                initial_stock=initial_stock,
                low_stock_threshold=low_stock_threshold,
                created_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def available_quantity(self) -> int:
        return self.stock.quantity - self.reserved_quantity

    @property
    def version(self) -> int:
        return self._version

    def has_available_stock(self, quantity) -> bool:
        return self.available_quantity >= quantity

    def is_low_stock(self) -> bool:
        return self.stock.is_low_stock(self.low_stock_threshold)

    def is_out_of_stock(self) -> bool:
        return self.stock.is_out_of_stock()

    # -------------------------------------------------------------------
    # Signals
    # -------------------------------------------------------------------
    def _check_low_stock(self, now):
        """Raise LowStockDetected if stock is below the threshold."""
        if self.is_low_stock():
            self.raise_(
                LowStockDetected(
                    inventory_id=str(self.id),
                    product_id=str(self.product_id),
                    current_stock=self.stock.quantity,
                    threshold=self.low_stock_threshold,
                    detected_at=now,
                )
            )

    def _check_depleted(self, now):
        if self.is_out_of_stock():
            self.raise_(
                StockDepleted(
                    inventory_id=str(self.id),
                    product_id=str(self.product_id),
                    depleted_at=now,
                )
            )

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def restock(self, quantity):
        _require_positive(quantity)

        now = datetime.now(UTC)
        self.stock = self.stock.add(quantity)
        self.last_restocked_at = now
        self.updated_at = now

        self.raise_(
            StockRestocked(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                quantity=quantity,
                new_stock=self.stock.quantity,
                restocked_at=now,
            )
        )

    def reduce_stock(self, quantity):
        """Write off stock directly. Reserved units cannot be written off."""
        _require_positive(quantity)
        if quantity > self.available_quantity:
            raise ValidationError(
                {"quantity": [f"Insufficient available stock: have {self.available_quantity}, need {quantity}"]}
            )

        now = datetime.now(UTC)
        self.stock = self.stock.subtract(quantity)
        self.updated_at = now

        self.raise_(
            StockReduced(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                quantity=quantity,
                new_stock=self.stock.quantity,
                reduced_at=now,
            )
        )
        self._check_low_stock(now)
        self._check_depleted(now)

    def set_low_stock_threshold(self, threshold):
        if threshold is None or threshold < 0:
            raise ValidationError({"low_stock_threshold": ["Threshold cannot be negative"]})

        previous = self.low_stock_threshold
        self.low_stock_threshold = threshold
        self.updated_at = datetime.now(UTC)

        self.raise_(
            LowStockThresholdChanged(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                previous_threshold=previous,
                new_threshold=threshold,
            )
        )

    # -------------------------------------------------------------------
    # Reservations
    # -------------------------------------------------------------------
    def reserve(self, quantity):
        _require_positive(quantity)
        if not self.has_available_stock(quantity):
            raise ValidationError(
                {"quantity": [f"Insufficient available stock: have {self.available_quantity}, need {quantity}"]}
            )

        now = datetime.now(UTC)
        self.reserved_quantity += quantity
        self.updated_at = now

        self.raise_(
            StockReserved(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                quantity=quantity,
                reserved_quantity=self.reserved_quantity,
                available_quantity=self.available_quantity,
                reserved_at=now,
            )
        )
        self._check_low_stock(now)

    def release_reservation(self, quantity):
        """Return held units to the available pool.

        Releasing more than is reserved clears the reservation instead of failing.
        """
        _require_positive(quantity)

        now = datetime.now(UTC)
        released = min(quantity, self.reserved_quantity)
        self.reserved_quantity -= released
        self.updated_at = now

        self.raise_(
            ReservationReleased(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                quantity=released,
                reserved_quantity=self.reserved_quantity,
                released_at=now,
            )
        )

    def confirm_reservation(self, quantity):
        """Turn held units into a sale, reducing stock and reserved together."""
        _require_positive(quantity)
        if quantity > self.reserved_quantity:
            raise ValidationError(
                {
                    "reserved_quantity": [
                        f"Cannot confirm more than reserved: reserved {self.reserved_quantity}, requested {quantity}"
                    ]
                }
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock = self.stock.subtract(quantity)
            self.reserved_quantity -= quantity
            self.updated_at = now

        self.raise_(
            ReservationConfirmed(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                quantity=quantity,
                new_stock=self.stock.quantity,
                reserved_quantity=self.reserved_quantity,
                confirmed_at=now,
            )
        )
        self._check_depleted(now)
