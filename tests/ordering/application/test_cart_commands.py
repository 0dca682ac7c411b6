"""Application tests for cart commands backed by the product catalog."""

import pytest
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItemQuantity
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture
def products(catalog):
    catalog.add_product("prod-001", "Wireless Mouse", "MOUSE-001", 100.0, available_stock=10)
    catalog.add_product("prod-002", "Keyboard", "KEYB-001", 150.0, available_stock=5)
    catalog.add_product("prod-003", "Retired Cable", "CABLE-001", 20.0, active=False)
    return catalog


def _add(product_id="prod-001", quantity=1, customer_id="cust-001"):
    return current_domain.process(
        AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def _cart(customer_id="cust-001"):
    return current_domain.repository_for(Cart).find_by_customer_id(customer_id)


class TestAddToCartCommand:
    def test_first_add_creates_cart(self, products):
        cart_id = _add(quantity=2)
        cart = current_domain.repository_for(Cart).get(cart_id)
        assert str(cart.customer_id) == "cust-001"
        assert cart.get_item("prod-001").quantity.value == 2

    def test_line_snapshots_catalog_details(self, products):
        _add()
        item = _cart().get_item("prod-001")
        assert item.product_name == "Wireless Mouse"
        assert item.product_sku == "MOUSE-001"
        assert item.unit_price.amount == 100.0

    def test_same_cart_is_reused(self, products):
        first = _add("prod-001")
        second = _add("prod-002")
        assert first == second
        assert _cart().item_count() == 2

    def test_unknown_product_rejected(self, products):
        with pytest.raises(ValidationError) as exc_info:
            _add("prod-404")
        assert "product_id" in exc_info.value.messages

    def test_inactive_product_rejected(self, products):
        with pytest.raises(ValidationError) as exc_info:
            _add("prod-003")
        assert "product_id" in exc_info.value.messages

    def test_insufficient_stock_rejected(self, products):
        with pytest.raises(ValidationError) as exc_info:
            _add("prod-002", quantity=6)
        assert "quantity" in exc_info.value.messages

    def test_combined_quantity_checked_against_stock(self, products):
        _add("prod-002", quantity=3)
        with pytest.raises(ValidationError) as exc_info:
            _add("prod-002", quantity=3)
        assert "quantity" in exc_info.value.messages
        assert _cart().get_item("prod-002").quantity.value == 3


class TestUpdateCartItemQuantityCommand:
    def test_update_quantity_persists(self, products):
        _add(quantity=1)
        current_domain.process(
            UpdateCartItemQuantity(customer_id="cust-001", product_id="prod-001", quantity=4),
            asynchronous=False,
        )
        assert _cart().get_item("prod-001").quantity.value == 4

    def test_update_beyond_stock_rejected(self, products):
        _add(quantity=1)
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateCartItemQuantity(customer_id="cust-001", product_id="prod-001", quantity=11),
                asynchronous=False,
            )

    def test_update_without_cart_fails(self, products):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateCartItemQuantity(customer_id="cust-404", product_id="prod-001", quantity=1),
                asynchronous=False,
            )


class TestRemoveAndClearCommands:
    def test_remove_item_persists(self, products):
        _add("prod-001")
        _add("prod-002")
        current_domain.process(
            RemoveFromCart(customer_id="cust-001", product_id="prod-001"),
            asynchronous=False,
        )
        cart = _cart()
        assert not cart.contains_product("prod-001")
        assert cart.contains_product("prod-002")

    def test_clear_cart_persists(self, products):
        _add("prod-001")
        _add("prod-002")
        current_domain.process(ClearCart(customer_id="cust-001"), asynchronous=False)
        assert _cart().is_empty()

    def test_clear_without_cart_fails(self, products):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(ClearCart(customer_id="cust-404"), asynchronous=False)
