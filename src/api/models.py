# provide dataclass models, parsed from the api's json documents

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def _record_id(doc: Dict[str, Any]) -> str:
    return str(doc.get("_id") or doc["id"])


def _embedded(value: Any) -> Optional[Dict[str, Any]]:
    """A reference is either populated (a dict) or a bare id string."""
    return value if isinstance(value, dict) else None


def parse_timestamp(value: Optional[str]) -> datetime:
    """ISO-8601 to an aware datetime; missing values sort as the epoch."""
    if not value:
        return EPOCH
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str  # "admin" or "customer"

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> User:
        return cls(
            id=str(doc.get("_id") or doc.get("id") or ""),
            name=doc.get("name") or "",
            email=doc.get("email") or "",
            role=doc.get("role") or "",
        )


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    company: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> Supplier:
        return cls(
            id=_record_id(doc),
            name=doc.get("name") or "",
            company=doc.get("company") or "",
            phone=doc.get("phone") or "",
            email=doc.get("email") or "",
            address=doc.get("address") or "",
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "company": self.company,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
        }


@dataclass(frozen=True)
class Stock:
    id: str
    category: str
    quantity: int
    supplier: Optional[Supplier] = None
    product_name: str = ""

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> Stock:
        supplier = _embedded(doc.get("supplierId"))
        quantity = int(doc.get("quantity") or 0)
        if quantity < 0:
            raise ValueError(f"negative stock quantity {quantity}")
        return cls(
            id=_record_id(doc),
            category=doc.get("category") or "",
            quantity=quantity,
            supplier=Supplier.from_json(supplier) if supplier else None,
            product_name=doc.get("productName") or "",
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: float
    stock: Optional[Stock] = None

    @property
    def quantity(self) -> int:
        """Units on hand; a product without a stock record has none."""
        return self.stock.quantity if self.stock else 0

    @property
    def orderable(self) -> bool:
        return self.quantity > 0

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> Product:
        stock = _embedded(doc.get("stockId"))
        return cls(
            id=_record_id(doc),
            name=doc.get("name") or "",
            description=doc.get("description") or "",
            price=float(doc.get("price") or 0),
            stock=Stock.from_json(stock) if stock else None,
        )


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str  # snapshot at order time
    quantity: int
    unit_price: float  # snapshot at order time

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> OrderItem:
        product = doc.get("productId")
        if isinstance(product, dict):
            product = _record_id(product)
        return cls(
            product_id=str(product or ""),
            product_name=doc.get("productName") or "",
            quantity=int(doc["quantity"]),
            unit_price=float(doc.get("price") or 0),
        )


@dataclass(frozen=True)
class Customer:
    id: str = ""
    name: str = ""
    email: str = ""

    @classmethod
    def from_order_json(cls, doc: Dict[str, Any]) -> Customer:
        """`userId` is either populated, a bare id, or absent."""
        user = doc.get("userId")
        if isinstance(user, dict):
            return cls(
                id=str(user.get("_id") or ""),
                name=user.get("name") or "",
                email=user.get("email") or "",
            )
        return cls(id=str(user or ""), name=doc.get("customerName") or "")

    @property
    def display_name(self) -> str:
        return self.name or self.id or "N/A"


@dataclass(frozen=True)
class Order:
    id: str
    customer: Customer
    items: Tuple[OrderItem, ...]
    total_amount: float
    status: str  # "pending", "shipped" or "delivered"
    created_at: datetime

    @property
    def summary(self) -> str:
        """First product name, the way the order tables show it."""
        if not self.items:
            return "—"
        first = self.items[0].product_name or self.items[0].product_id
        if len(self.items) > 1:
            return f"{first} (+{len(self.items) - 1} more)"
        return first

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> Order:
        return cls(
            id=_record_id(doc),
            customer=Customer.from_order_json(doc),
            items=tuple(OrderItem.from_json(i) for i in doc.get("items") or []),
            total_amount=float(doc.get("totalAmount") or 0),
            status=doc.get("status") or "pending",
            created_at=parse_timestamp(doc.get("createdAt")),
        )
