from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from api.client import ApiClient
from api.models import Product, Stock, Supplier
from viewmodels.base import ChangeListener, Confirm, ViewModel

R = TypeVar("R")


class RecordListViewModel(ViewModel, Generic[R]):
    """
    Admin CRUD over one record kind. Every successful write reloads the
    whole list; a failed write leaves it untouched and re-raises.
    """

    kind: ClassVar[str]

    def __init__(self, api: ApiClient, on_change: Optional[ChangeListener] = None):
        super().__init__(on_change)
        self.api = api
        self.resource = api.resource(self.kind)
        self.records: Tuple[R, ...] = ()

    async def load(self) -> bool:
        return await self._load_latest(self.resource.fetch_list, self._apply)

    def _apply(self, records: List[R]) -> None:
        self.records = tuple(records)

    def find(self, record_id: str) -> Optional[R]:
        for record in self.records:
            if getattr(record, "id", None) == record_id:
                return record
        return None

    async def create(self, payload: Dict[str, Any]) -> R:
        record = await self._mutate(lambda: self.resource.create(payload))
        await self.load()
        return record

    async def update(self, record_id: str, payload: Dict[str, Any]) -> R:
        record = await self._mutate(lambda: self.resource.update(record_id, payload))
        await self.load()
        return record

    async def delete(self, record_id: str, confirm: Confirm) -> bool:
        """Irreversible; only proceeds on an affirmative `confirm()`."""
        if not await confirm():
            return False
        await self._mutate(lambda: self.resource.remove(record_id))
        await self.load()
        return True


class SupplierViewModel(RecordListViewModel[Supplier]):
    kind = "suppliers"


class StockViewModel(RecordListViewModel[Stock]):
    """Stock records, with the supplier list for the form's choices."""

    kind = "stocks"

    def __init__(self, api: ApiClient, on_change: Optional[ChangeListener] = None):
        super().__init__(api, on_change)
        self.suppliers = SupplierViewModel(api)

    async def load_all(self) -> bool:
        stocks_ok, suppliers_ok = await asyncio.gather(
            self.load(), self.suppliers.load()
        )
        return stocks_ok and suppliers_ok

    @staticmethod
    def payload(
        category: str, quantity: int, supplier_id: str, product_name: str = ""
    ) -> Dict[str, Any]:
        if quantity < 0:
            raise ValueError("Quantity cannot be negative.")
        return {
            "productName": product_name,
            "category": category,
            "quantity": quantity,
            "supplierId": supplier_id,
        }


@dataclass(frozen=True)
class ProductFormFill:
    """Read-only product form fields derived from the selected stock."""

    category: str = ""
    quantity: str = ""
    supplier_name: str = ""
    company: str = ""
    contact: str = ""


class ProductAdminViewModel(RecordListViewModel[Product]):
    """Products, with the stock list the product form links against."""

    kind = "products"

    def __init__(self, api: ApiClient, on_change: Optional[ChangeListener] = None):
        super().__init__(api, on_change)
        self.stocks = StockViewModel(api)

    async def load_all(self) -> bool:
        products_ok, stocks_ok = await asyncio.gather(self.load(), self.stocks.load())
        return products_ok and stocks_ok

    def autofill(self, stock_id: str) -> ProductFormFill:
        """
        Fields shown next to the stock selector. An unknown stock clears them.
        """
        stock: Optional[Stock] = self.stocks.find(stock_id)
        if stock is None:
            return ProductFormFill()
        supplier = stock.supplier
        return ProductFormFill(
            category=stock.category,
            quantity=str(stock.quantity),
            supplier_name=supplier.name if supplier else "",
            company=supplier.company if supplier else "",
            contact=supplier.phone if supplier else "",
        )

    @staticmethod
    def payload(name: str, description: str, price: float, stock_id: str) -> Dict[str, Any]:
        return {
            "name": name,
            "description": description,
            "price": price,
            "stockId": stock_id,
        }
