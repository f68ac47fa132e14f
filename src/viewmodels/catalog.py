from __future__ import annotations

from typing import List, Optional, Tuple

from api.client import ApiClient
from api.models import Product
from viewmodels.base import ChangeListener, ViewModel


class CatalogViewModel(ViewModel):
    """
    Products a customer can choose from when placing an order.

    `products` holds the whole last response; `available_products` is the
    customer-facing subset with stock on hand.
    """

    def __init__(self, api: ApiClient, on_change: Optional[ChangeListener] = None):
        super().__init__(on_change)
        self._products = api.resource("products")
        self.products: Tuple[Product, ...] = ()

    async def load_catalog(self) -> bool:
        return await self._load_latest(self._products.fetch_list, self._apply)

    def _apply(self, products: List[Product]) -> None:
        self.products = tuple(products)

    @property
    def available_products(self) -> Tuple[Product, ...]:
        return tuple(p for p in self.products if p.orderable)

    def find_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def available_quantity(self, product_id: str) -> Optional[int]:
        """
        Units on hand per the most recent load.
        None if the product is not in the catalog, 0 if it has no stock record.
        """
        product = self.find_product(product_id)
        return product.quantity if product else None
