"""Fake product catalog — in-memory catalog for testing and development."""

from shared.money import DEFAULT_CURRENCY

from ordering.catalog.port import ProductCatalogPort, ProductInfo


class FakeProductCatalog(ProductCatalogPort):
    """Catalog backed by a dict of products registered with ``add_product``."""

    def __init__(self):
        self._products: dict[str, ProductInfo] = {}

    def add_product(
        self,
        product_id: str,
        name: str,
        sku: str,
        price: float,
        available_stock: int = 100,
        active: bool = True,
        currency: str = DEFAULT_CURRENCY,
    ) -> ProductInfo:
        product = ProductInfo(
            id=str(product_id),
            name=name,
            sku=sku,
            price=price,
            currency=currency,
            available_stock=available_stock,
            active=active,
        )
        self._products[product.id] = product
        return product

    def clear(self):
        self._products.clear()

    def get_product_info(self, product_id: str) -> ProductInfo | None:
        return self._products.get(str(product_id))

    def is_stock_available(self, product_id: str, quantity: int) -> bool:
        product = self._products.get(str(product_id))
        return product is not None and product.available_stock >= quantity
