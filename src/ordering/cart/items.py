"""Cart item management — commands and handler for adding, updating and removing lines.

Product details and stock availability come from the product catalog port,
never from the caller.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.catalog import get_product_catalog
from ordering.domain import ordering
from ordering.shared.money import Money

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="Cart")
class UpdateCartItemQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


def _load_cart(repo, customer_id):
    cart = repo.find_by_customer_id(customer_id)
    if cart is None:
        raise ObjectNotFoundError(f"Cart for customer {customer_id} not found")
    return cart


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        catalog = get_product_catalog()
        product = catalog.get_product_info(str(command.product_id))
        if product is None:
            raise ValidationError({"product_id": [f"Product not found: {command.product_id}"]})
        if not product.active:
            raise ValidationError({"product_id": [f"Product is not available: {command.product_id}"]})
        if not catalog.is_stock_available(product.id, command.quantity):
            raise ValidationError({"quantity": [f"Insufficient stock for product {product.id}"]})

        repo = current_domain.repository_for(Cart)
        cart = repo.find_by_customer_id(command.customer_id)
        if cart is None:
            cart = Cart.create(customer_id=command.customer_id)

        existing = cart.get_item(product.id)
        if existing and not catalog.is_stock_available(product.id, existing.quantity.value + command.quantity):
            raise ValidationError({"quantity": [f"Insufficient stock for product {product.id}"]})

        cart.add_item(
            product_id=product.id,
            product_name=product.name,
            product_sku=product.sku,
            unit_price=Money.of(product.price, product.currency),
            quantity=command.quantity,
        )
        repo.add(cart)

        logger.info(
            "Item added to cart",
            cart_id=str(cart.id),
            customer_id=str(command.customer_id),
            product_id=product.id,
            quantity=command.quantity,
        )
        return str(cart.id)

    @handle(UpdateCartItemQuantity)
    def update_quantity(self, command):
        catalog = get_product_catalog()
        if not catalog.is_stock_available(str(command.product_id), command.quantity):
            raise ValidationError({"quantity": [f"Insufficient stock for product {command.product_id}"]})

        repo = current_domain.repository_for(Cart)
        cart = _load_cart(repo, command.customer_id)
        cart.update_item_quantity(command.product_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _load_cart(repo, command.customer_id)
        cart.remove_item(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _load_cart(repo, command.customer_id)
        cart.clear()
        repo.add(cart)
