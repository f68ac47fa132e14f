from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from api.client import ApiClient
from api.errors import InventoryError
from api.models import Order, Product, Supplier
from utils.logger import get_logger
from viewmodels.base import ChangeListener, ViewModel
from viewmodels.orders import sort_orders

_logger = get_logger(__name__)

LOW_STOCK_THRESHOLD = 10
RECENT_ORDER_COUNT = 5


@dataclass(frozen=True)
class DashboardStats:
    product_count: int = 0
    order_count: int = 0
    supplier_count: int = 0
    revenue: float = 0.0
    pending_count: int = 0
    shipped_count: int = 0
    delivered_count: int = 0
    low_stock_products: Tuple[Product, ...] = ()
    recent_orders: Tuple[Order, ...] = ()


class DashboardAggregator(ViewModel):
    """
    Landing view numbers for admins. `summarize` is a pure function of the
    three collections; `load` fetches them and keeps the result in `stats`.
    """

    def __init__(self, api: ApiClient, on_change: Optional[ChangeListener] = None):
        super().__init__(on_change)
        self._orders = api.resource("orders")
        self._products = api.resource("products")
        self._suppliers = api.resource("suppliers")
        self.stats = DashboardStats()
        # first collection error of the last applied load, if any
        self.partial_error: Optional[InventoryError] = None

    @staticmethod
    def summarize(
        orders: Sequence[Order],
        products: Sequence[Product],
        suppliers: Sequence[Supplier],
    ) -> DashboardStats:
        statuses = [o.status for o in orders]
        return DashboardStats(
            product_count=len(products),
            order_count=len(orders),
            supplier_count=len(suppliers),
            revenue=sum(o.total_amount for o in orders),
            pending_count=statuses.count("pending"),
            shipped_count=statuses.count("shipped"),
            delivered_count=statuses.count("delivered"),
            low_stock_products=tuple(
                p for p in products if p.quantity < LOW_STOCK_THRESHOLD
            ),
            recent_orders=tuple(sort_orders(orders)[:RECENT_ORDER_COUNT]),
        )

    async def load(self) -> bool:
        return await self._load_latest(self._fetch_all, self._apply)

    async def _fetch_all(self) -> Tuple[List, List, List, Optional[InventoryError]]:
        results = await asyncio.gather(
            self._orders.fetch_list(),
            self._products.fetch_list(),
            self._suppliers.fetch_list(),
            return_exceptions=True,
        )
        # a collection that fails counts as empty, the rest still show
        collections: List[List] = []
        failure: Optional[InventoryError] = None
        for result in results:
            if isinstance(result, InventoryError):
                failure = failure or result
                collections.append([])
            elif isinstance(result, BaseException):
                raise result
            else:
                collections.append(result)
        if failure is not None:
            _logger.warning(f"Dashboard loaded partially: {failure}")
        return collections[0], collections[1], collections[2], failure

    def _apply(self, result: Tuple[List, List, List, Optional[InventoryError]]) -> None:
        orders, products, suppliers, failure = result
        self.stats = self.summarize(orders, products, suppliers)
        self.partial_error = failure
