# in-memory stand-in for the inventory REST api, served through httpx.MockTransport
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx

from api.client import ApiClient
from utils.config import Settings
from utils.state import Session

ADMIN_TOKEN = "token-u-admin"
CUSTOMER_TOKEN = "token-u-cust"

START = datetime(2025, 11, 1, 9, 0, 0, tzinfo=timezone.utc)


def iso(ts: datetime) -> str:
    return ts.isoformat().replace("+00:00", "Z")


class FakeInventoryApi:
    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {
            "u-admin": {
                "_id": "u-admin",
                "name": "Ada Admin",
                "email": "admin@example.com",
                "password": "admin123",
                "role": "admin",
            },
            "u-cust": {
                "_id": "u-cust",
                "name": "Cora Customer",
                "email": "cora@example.com",
                "password": "pw",
                "role": "customer",
            },
        }
        self.suppliers: List[Dict[str, Any]] = [
            {
                "_id": "sup-1",
                "name": "Sam Supplier",
                "company": "Acme",
                "phone": "555-0100",
                "email": "sam@acme.test",
                "address": "1 Road",
            }
        ]
        self.stocks: List[Dict[str, Any]] = [
            {
                "_id": "stk-1",
                "productName": "Widget",
                "category": "Tools",
                "quantity": 3,
                "supplierId": "sup-1",
            },
            {
                "_id": "stk-2",
                "productName": "Gadget",
                "category": "Toys",
                "quantity": 0,
                "supplierId": "sup-1",
            },
        ]
        self.products: List[Dict[str, Any]] = [
            {
                "_id": "prod-1",
                "name": "Widget",
                "description": "A widget",
                "price": 25.0,
                "stockId": "stk-1",
            },
            {
                "_id": "prod-2",
                "name": "Gadget",
                "description": "Sold out",
                "price": 40.0,
                "stockId": "stk-2",
            },
        ]
        self.orders: List[Dict[str, Any]] = []
        self.calls: List[Tuple[str, str]] = []
        # (method, path) -> (status, body), served once
        self.failures: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self._clock = START
        self._next_id = 1

    # ---------------------------
    # Test helpers
    # ---------------------------

    def client(self, token: Optional[str] = None, role: Optional[str] = None) -> ApiClient:
        session = Session(token=token, role=role)
        return ApiClient(
            session,
            Settings(api_url="http://inventory.test", timeout=2),
            transport=httpx.MockTransport(self.handle),
        )

    def admin_client(self) -> ApiClient:
        return self.client(ADMIN_TOKEN, "admin")

    def customer_client(self) -> ApiClient:
        return self.client(CUSTOMER_TOKEN, "customer")

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    def fail_once(self, method: str, path: str, status: int, message: str) -> None:
        self.failures[(method, path)] = (status, {"message": message})

    def add_order(
        self, user_id: str, status: str = "pending", created_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        order = self._make_order(user_id, [("prod-1", 1)], status, created_at)
        self.orders.append(order)
        return order

    # ---------------------------
    # Internals
    # ---------------------------

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def _find(self, rows: List[Dict[str, Any]], record_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in rows if r["_id"] == record_id), None)

    def _populated_stock(self, stock: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(stock)
        supplier = self._find(self.suppliers, stock.get("supplierId"))
        doc["supplierId"] = dict(supplier) if supplier else stock.get("supplierId")
        return doc

    def _populated_product(self, product: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(product)
        stock = self._find(self.stocks, product.get("stockId"))
        doc["stockId"] = self._populated_stock(stock) if stock else product.get("stockId")
        return doc

    def _populated_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(order)
        user = self.users[order["userId"]]
        doc["userId"] = {"_id": user["_id"], "name": user["name"], "email": user["email"]}
        return doc

    def _make_order(self, user_id, items, status="pending", created_at=None):
        lines = []
        for product_id, quantity in items:
            product = self._find(self.products, product_id)
            lines.append(
                {
                    "productId": product_id,
                    "productName": product["name"],
                    "quantity": quantity,
                    "price": product["price"],
                }
            )
        return {
            "_id": self._new_id("ord"),
            "userId": user_id,
            "items": lines,
            "totalAmount": sum(l["price"] * l["quantity"] for l in lines),
            "status": status,
            "createdAt": iso(created_at or self._tick()),
        }

    def _user_for(self, request: httpx.Request) -> Optional[Dict[str, Any]]:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer token-"):
            return None
        return self.users.get(header.removeprefix("Bearer token-"))

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))

        if (method, path) in self.failures:
            status, body = self.failures.pop((method, path))
            return httpx.Response(status, json=body)

        body = json.loads(request.content) if request.content else None
        parts = path.strip("/").split("/")  # ["api", kind, ...]

        if parts[1] == "auth":
            return self._auth(parts[2], body)

        user = self._user_for(request)
        if user is None:
            return httpx.Response(401, json={"message": "Not authorized, token failed"})

        if parts[1] == "orders":
            return self._orders(method, parts[2:], body, user)

        rows = {
            "products": self.products,
            "stocks": self.stocks,
            "suppliers": self.suppliers,
        }[parts[1]]
        populate = {
            "products": self._populated_product,
            "stocks": self._populated_stock,
            "suppliers": dict,
        }[parts[1]]
        return self._crud(method, parts[2:], body, rows, populate, parts[1][:-1])

    def _auth(self, action: str, body: Dict[str, Any]) -> httpx.Response:
        if action == "login":
            for user in self.users.values():
                if user["email"] == body["email"] and user["password"] == body["password"]:
                    public = {k: v for k, v in user.items() if k != "password"}
                    return httpx.Response(
                        200, json={"token": f"token-{user['_id']}", "user": public}
                    )
            return httpx.Response(400, json={"message": "Invalid email or password"})
        if any(u["email"] == body["email"] for u in self.users.values()):
            return httpx.Response(400, json={"message": "User already exists"})
        uid = self._new_id("u")
        self.users[uid] = {"_id": uid, "role": "customer", **body}
        return httpx.Response(
            201, json={"_id": uid, "name": body["name"], "email": body["email"]}
        )

    def _crud(self, method, rest, body, rows, populate, singular) -> httpx.Response:
        if method == "GET":
            return httpx.Response(200, json=[populate(r) for r in rows])
        if method == "POST":
            row = {"_id": self._new_id(singular), **body}
            rows.append(row)
            return httpx.Response(201, json={singular: populate(row)})
        row = self._find(rows, rest[0]) if rest else None
        if row is None:
            return httpx.Response(404, json={"message": f"{singular} not found"})
        if method == "PUT":
            row.update(body)
            return httpx.Response(200, json=populate(row))
        rows.remove(row)
        return httpx.Response(200, json={"message": f"{singular} deleted"})

    def _orders(self, method, rest, body, user) -> httpx.Response:
        is_admin = user["role"] == "admin"
        if method == "GET" and rest == ["my-orders"]:
            mine = [o for o in self.orders if o["userId"] == user["_id"]]
            return httpx.Response(200, json=[self._populated_order(o) for o in mine])
        if method == "GET" and not rest:
            if not is_admin:
                return httpx.Response(403, json={"message": "Admin access only"})
            return httpx.Response(
                200, json=[self._populated_order(o) for o in self.orders]
            )
        if method == "POST":
            for item in body["items"]:
                product = self._find(self.products, item["productId"])
                if product is None:
                    return httpx.Response(404, json={"message": "Product not found"})
                stock = self._find(self.stocks, product["stockId"])
                if stock["quantity"] < item["quantity"]:
                    return httpx.Response(
                        400,
                        json={"message": f"Insufficient stock for {product['name']}"},
                    )
            for item in body["items"]:
                product = self._find(self.products, item["productId"])
                self._find(self.stocks, product["stockId"])["quantity"] -= item["quantity"]
            order = self._make_order(
                user["_id"], [(i["productId"], i["quantity"]) for i in body["items"]]
            )
            self.orders.append(order)
            return httpx.Response(201, json=self._populated_order(order))

        if not is_admin:
            return httpx.Response(403, json={"message": "Admin access only"})
        order = self._find(self.orders, rest[0])
        if order is None:
            return httpx.Response(404, json={"message": "Order not found"})
        if method == "PUT" and rest[1:] == ["status"]:
            order["status"] = body["status"]
            return httpx.Response(200, json=self._populated_order(order))
        if method == "DELETE":
            self.orders.remove(order)
            return httpx.Response(200, json={"message": "Order deleted"})
        return httpx.Response(405)
