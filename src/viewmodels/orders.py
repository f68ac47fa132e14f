from __future__ import annotations

import asyncio
from typing import (
    Awaitable,
    Callable,
    ClassVar,
    Iterable,
    List,
    Literal,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from api.client import ApiClient
from api.errors import InsufficientStock, UnknownProduct
from api.models import Order
from utils.logger import get_logger
from utils.state import Session
from viewmodels.base import ChangeListener, Confirm, ViewModel
from viewmodels.catalog import CatalogViewModel

_logger = get_logger(__name__)

Scope = Literal["all", "mine"]
OrderStatus = Literal["pending", "shipped", "delivered"]
ORDER_STATUSES: Tuple[str, ...] = ("pending", "shipped", "delivered")

DEFAULT_POLL_INTERVAL_MS = 5000


def sort_orders(orders: Iterable[Order]) -> List[Order]:
    """Newest first; equal timestamps keep their arrival order."""
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


class OrderRepository(Protocol):
    async def list_orders(self, scope: Scope) -> List[Order]: ...

    async def place_order(self, items: Sequence[Tuple[str, int]]) -> Order: ...

    async def set_status(self, order_id: str, status: str) -> Order: ...

    async def delete_order(self, order_id: str) -> None: ...


class HttpOrderRepository:
    """OrderRepository over the /api/orders endpoints."""

    def __init__(self, api: ApiClient) -> None:
        self._orders = api.resource("orders")

    async def list_orders(self, scope: Scope) -> List[Order]:
        # customers are filtered by the server, never client side
        return await self._orders.fetch_list("my-orders" if scope == "mine" else "")

    async def place_order(self, items: Sequence[Tuple[str, int]]) -> Order:
        return await self._orders.create(
            {"items": [{"productId": pid, "quantity": qty} for pid, qty in items]}
        )

    async def set_status(self, order_id: str, status: str) -> Order:
        return await self._orders.update(order_id, {"status": status}, "status")

    async def delete_order(self, order_id: str) -> None:
        await self._orders.remove(order_id)


class PollHandle:
    """
    A running poll loop: sleep `interval` seconds, await `tick`, repeat.
    Ticks never overlap. The owner must cancel it when its view goes away.
    """

    def __init__(self, tick: Callable[[], Awaitable[object]], interval: float):
        self.interval = interval
        self._tick = tick
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._report_crash)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self._tick()

    @staticmethod
    def _report_crash(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            _logger.error("Order polling stopped", exc_info=task.exception())

    @property
    def active(self) -> bool:
        return not self._cancelled and not self._task.done()

    def cancel(self) -> None:
        self._cancelled = True
        if not self._task.done():
            self._task.cancel()


class OrderViewModel(ViewModel):
    """
    In-memory order list for one screen.

    The list is replaced wholesale on every successful load and is always
    sorted newest first. Subclasses pick the fetch scope.
    """

    scope: ClassVar[Scope] = "all"

    def __init__(
        self,
        session: Session,
        repository: OrderRepository,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        super().__init__(on_change)
        self.session = session
        self.repository = repository
        self.orders: Tuple[Order, ...] = ()

    async def load_orders(self) -> bool:
        return await self._load_latest(
            lambda: self.repository.list_orders(self.scope), self._apply
        )

    def _apply(self, orders: List[Order]) -> None:
        self.orders = tuple(sort_orders(orders))

    def find_order(self, order_id: str) -> Optional[Order]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None


class CustomerOrderView(OrderViewModel):
    """A customer's own orders, plus placing new ones."""

    scope = "mine"

    def __init__(
        self,
        session: Session,
        repository: OrderRepository,
        catalog: CatalogViewModel,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        super().__init__(session, repository, on_change)
        self.catalog = catalog

    def check_order(self, product_id: str, quantity: int) -> None:
        """Raise if the order cannot be placed against the loaded catalog."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")
        available = self.catalog.available_quantity(product_id)
        if available is None:
            raise UnknownProduct(product_id)
        if available < quantity:
            raise InsufficientStock(product_id, quantity, available)

    async def place_order(self, product_id: str, quantity: int) -> Order:
        """
        Submit a single-item order. The server computes the price and name
        snapshots and the total. Orders and catalog are reloaded afterwards
        since stock went down.
        """
        self.check_order(product_id, quantity)
        order = await self._mutate(
            lambda: self.repository.place_order([(product_id, quantity)])
        )
        _logger.info(f"Order {order.id} placed for {quantity} x {product_id}")
        await asyncio.gather(self.load_orders(), self.catalog.load_catalog())
        return order


class AdminOrderView(OrderViewModel):
    """Every order; status changes, deletion and live polling."""

    scope = "all"

    def __init__(
        self,
        session: Session,
        repository: OrderRepository,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        super().__init__(session, repository, on_change)
        self._poll: Optional[PollHandle] = None

    async def update_status(self, order_id: str, status: str) -> None:
        """
        Any status may be set at any time; ordering of transitions is the
        server's business. The list is reloaded rather than patched.
        """
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status {status!r}")
        await self._mutate(lambda: self.repository.set_status(order_id, status))
        await self.load_orders()

    async def delete_order(self, order_id: str, confirm: Confirm) -> bool:
        """
        Delete after an affirmative `confirm()`. Returns False if declined.
        """
        if not await confirm():
            return False
        await self._mutate(lambda: self.repository.delete_order(order_id))
        await self.load_orders()
        return True

    def start_polling(self, interval_ms: Optional[int] = None) -> PollHandle:
        """Reload every `interval_ms`. Replaces any poll already running."""
        self.stop_polling()
        interval_ms = interval_ms or DEFAULT_POLL_INTERVAL_MS
        self._poll = PollHandle(self.load_orders, interval_ms / 1000)
        _logger.debug(f"Polling orders every {interval_ms}ms")
        return self._poll

    def stop_polling(self) -> None:
        if self._poll is not None:
            self._poll.cancel()
            self._poll = None

    @property
    def polling_active(self) -> bool:
        return self._poll is not None and self._poll.active


def order_view_for(
    session: Session,
    repository: OrderRepository,
    catalog: Optional[CatalogViewModel] = None,
    on_change: Optional[ChangeListener] = None,
) -> OrderViewModel:
    """Pick the order view variant for the session's role, once."""
    if session.role == "admin":
        return AdminOrderView(session, repository, on_change)
    if session.role == "customer":
        if catalog is None:
            raise ValueError("A customer order view needs a catalog.")
        return CustomerOrderView(session, repository, catalog, on_change)
    raise ValueError(f"No order view for role {session.role!r}")
