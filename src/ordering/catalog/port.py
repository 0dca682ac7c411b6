"""Product catalog port — what the ordering context needs to know about products.

Cart use cases program against this interface; adapters are swapped via
configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductInfo:
    """Snapshot of a product as seen by the catalog at lookup time."""

    id: str
    name: str
    sku: str
    price: float
    currency: str
    available_stock: int
    active: bool


class ProductCatalogPort(ABC):
    """Abstract interface for product catalog adapters."""

    @abstractmethod
    def get_product_info(self, product_id: str) -> ProductInfo | None:
        """Look up a product.

        Returns:
            ProductInfo, or None when the catalog has no such product.
        """
        ...

    @abstractmethod
    def is_stock_available(self, product_id: str, quantity: int) -> bool:
        """Whether the catalog can currently supply ``quantity`` units of the product."""
        ...
