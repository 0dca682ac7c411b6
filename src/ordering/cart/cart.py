"""Cart aggregate (CQRS) — a customer's selection of products before checkout.

The cart is a standard CQRS aggregate (not event sourced). Lines are keyed
by product: adding a product that is already in the cart increases its
quantity instead of creating a second line. The cart never persists itself;
use-case handlers load it, call a mutator and save it.

Capacity limits:
    at most 50 distinct products per cart
    at most 99 units per product line
"""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String, ValueObject

from ordering.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from ordering.domain import ordering
from ordering.shared.money import Money
from ordering.shared.quantity import MAX_QUANTITY, Quantity

MAX_ITEMS = 50
MAX_QUANTITY_PER_ITEM = MAX_QUANTITY

_SKU_PATTERN = re.compile(r"^[A-Z0-9-]{3,50}$")


@ordering.entity(part_of="Cart")
class CartItem:
    """One product line in the cart with a snapshot of its catalog details."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_sku = String(required=True, max_length=50)
    unit_price = ValueObject(Money, required=True)
    quantity = ValueObject(Quantity, required=True)
    added_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def sku_must_be_well_formed(self):
        if self.product_sku and not _SKU_PATTERN.match(self.product_sku):
            raise ValidationError({"product_sku": [f"Invalid SKU format: {self.product_sku}"]})

    def subtotal(self):
        return self.unit_price.multiply(self.quantity.value)


@ordering.aggregate
class Cart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_not_exceed_capacity(self):
        if self.items and len(self.items) > MAX_ITEMS:
            raise ValidationError({"items": [f"Cart cannot hold more than {MAX_ITEMS} different products"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_item(self, product_id):
        """Return the line for a product, or None when the product is not in the cart."""
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def contains_product(self, product_id) -> bool:
        return self.get_item(product_id) is not None

    def item_count(self) -> int:
        """Number of distinct products."""
        return len(self.items)

    def get_total_item_count(self) -> int:
        """Sum of quantities across all lines."""
        return sum(item.quantity.value for item in self.items)

    def is_empty(self) -> bool:
        return not self.items

    def get_total(self):
        if not self.items:
            return Money.zero()

        total = Money.zero(self.items[0].unit_price.currency)
        for item in self.items:
            total = total.add(item.subtotal())
        return total

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, product_name, product_sku, unit_price, quantity):
        """Add a product to the cart, or increase its quantity if already present."""
        increment = Quantity.of(quantity)
        existing = self.get_item(product_id)
        now = datetime.now(UTC)

        if existing:
            if existing.quantity.value + increment.value > MAX_QUANTITY_PER_ITEM:
                raise ValidationError({"quantity": [f"Quantity cannot exceed {MAX_QUANTITY_PER_ITEM} per item"]})
            existing.quantity = existing.quantity.add(increment)
            existing.updated_at = now
            line = existing
        else:
            if len(self.items) >= MAX_ITEMS:
                raise ValidationError({"items": [f"Cart cannot hold more than {MAX_ITEMS} different products"]})
            line = CartItem(
                product_id=product_id,
                product_name=product_name,
                product_sku=product_sku,
                unit_price=unit_price,
                quantity=increment,
                added_at=now,
                updated_at=now,
            )
            if self.items and line.unit_price.currency != self.items[0].unit_price.currency:
                raise ValidationError({"currency": ["All cart items must share the same currency"]})
            self.add_items(line)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                quantity=increment.value,
                line_quantity=line.quantity.value,
                unit_price=line.unit_price.amount,
            )
        )

    def update_item_quantity(self, product_id, new_quantity):
        """Replace the quantity of an existing line."""
        item = self.get_item(product_id)
        if item is None:
            raise ValidationError({"product_id": [f"Product {product_id} not found in cart"]})

        previous_quantity = item.quantity.value
        now = datetime.now(UTC)
        item.quantity = Quantity.of(new_quantity)
        item.updated_at = now
        self.updated_at = now

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.get_item(product_id)
        if item is None:
            raise ValidationError({"product_id": [f"Product {product_id} not found in cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed=removed,
            )
        )
