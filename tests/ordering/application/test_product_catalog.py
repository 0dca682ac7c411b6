"""Application tests for selecting the product catalog the cart handlers use."""

import pytest
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart
from ordering.catalog import get_product_catalog, reset_product_catalog, use_product_catalog
from ordering.catalog.fake_adapter import FakeProductCatalog
from protean import current_domain


class TestCatalogSelection:
    def test_catalog_is_shared_until_reset(self, catalog):
        assert get_product_catalog() is catalog

        reset_product_catalog()
        assert get_product_catalog() is not catalog

    def test_unknown_adapter_rejected(self, catalog, monkeypatch):
        reset_product_catalog()
        monkeypatch.setenv("PRODUCT_CATALOG_ADAPTER", "http")
        with pytest.raises(ValueError):
            get_product_catalog()

    def test_installed_catalog_serves_cart_commands(self, catalog):
        replacement = FakeProductCatalog()
        replacement.add_product("prod-900", "Desk Lamp", "LAMP-001", 45.0)
        use_product_catalog(replacement)

        current_domain.process(AddToCart(customer_id="cust-001", product_id="prod-900", quantity=2), asynchronous=False)

        cart = current_domain.repository_for(Cart).find_by_customer_id("cust-001")
        assert cart.get_item("prod-900").product_name == "Desk Lamp"

    def test_installing_a_non_catalog_rejected(self, catalog):
        with pytest.raises(TypeError):
            use_product_catalog(object())
        assert get_product_catalog() is catalog
