"""Product lookup for the cart handlers.

Carts never hold product data of their own; prices and stock are read from
whichever ProductCatalogPort is active. The in-memory catalog is the only
adapter shipped. Another implementation can be installed at startup with
``use_product_catalog``.
"""

import os

from ordering.catalog.port import ProductCatalogPort

_active_catalog: ProductCatalogPort | None = None


def _build_from_environment() -> ProductCatalogPort:
    adapter = os.environ.get("PRODUCT_CATALOG_ADAPTER", "fake")
    if adapter != "fake":
        raise ValueError(f"Unknown product catalog adapter: {adapter}")

    from ordering.catalog.fake_adapter import FakeProductCatalog

    return FakeProductCatalog()


def get_product_catalog() -> ProductCatalogPort:
    """The catalog AddToCart and UpdateCartItemQuantity consult.

    Built lazily from PRODUCT_CATALOG_ADAPTER on first use and then shared, so
    products registered on the fake catalog stay visible to later commands.
    """
    global _active_catalog
    if _active_catalog is None:
        _active_catalog = _build_from_environment()
    return _active_catalog


def use_product_catalog(catalog: ProductCatalogPort) -> None:
    """Replace the active catalog, bypassing PRODUCT_CATALOG_ADAPTER."""
    if not isinstance(catalog, ProductCatalogPort):
        raise TypeError(f"Expected a ProductCatalogPort, got {type(catalog).__name__}")
    global _active_catalog
    _active_catalog = catalog


def reset_product_catalog() -> None:
    """Forget the active catalog; the next lookup rebuilds it with no products."""
    global _active_catalog
    _active_catalog = None
