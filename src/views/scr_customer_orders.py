from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.validation import Number
from textual.widgets import Button, DataTable, Input, Label, OptionList
from textual.widgets.option_list import Option

from api.errors import InventoryError
from utils.pure import format_date
from viewmodels.catalog import CatalogViewModel
from viewmodels.orders import (
    CustomerOrderView,
    HttpOrderRepository,
    order_view_for,
)
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal


class CustomerOrdersScreen(BaseScreen):
    """
    Place an order for an in-stock product, and browse own orders.
    """

    def __init__(self) -> None:
        super().__init__()
        self.catalog = CatalogViewModel(
            self.app.api, on_change=lambda _: self.render_catalog()
        )
        self.orders_view: CustomerOrderView = order_view_for(
            self.app.session,
            HttpOrderRepository(self.app.api),
            self.catalog,
            on_change=lambda _: self.render_orders(),
        )
        self._product_id: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Label("Place New Order", id="label-place-order")
            yield OptionList(id="optlist-products")
            with Horizontal(id="hort-order-form"):
                yield Label("Quantity:")
                yield Input(
                    "1",
                    id="input-order-qty",
                    type="integer",
                    validators=[Number(minimum=1)],
                )
                yield Button("Place Order", id="btn-place-order", variant="primary")
                yield Button("Refresh", id="btn-refresh")
            yield Label("My Orders", id="label-my-orders")
            yield DataTable(id="table-my-orders")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order ID", "Product", "Qty", "Total", "Status", "Date")

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def handle_refresh(self) -> None:
        await self.catalog.load_catalog()
        await self.orders_view.load_orders()

    def render_catalog(self) -> None:
        opt_list = self.query_one("#optlist-products", OptionList)
        opt_list.clear_options()
        products = self.catalog.available_products
        if not products:
            self._product_id = None
            opt_list.add_option(
                Option("No products available at the moment.", disabled=True)
            )
            return
        opt_list.add_options(
            [
                Option(
                    f"{p.name} | {self.money(p.price)} | {p.quantity} available",
                    id=p.id,
                )
                for p in products
            ]
        )
        ids = [p.id for p in products]
        if self._product_id in ids:
            opt_list.highlighted = ids.index(self._product_id)
        else:
            self._product_id = None

    def render_orders(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for order in self.orders_view.orders:
            table.add_row(
                order.id,
                order.summary,
                sum(i.quantity for i in order.items),
                self.money(order.total_amount),
                order.status,
                format_date(order.created_at),
            )

    @on(OptionList.OptionHighlighted, "#optlist-products")
    @on(OptionList.OptionSelected, "#optlist-products")
    def handle_product_choice(self, message: OptionList.OptionMessage) -> None:
        self._product_id = message.option.id
        stock = self.catalog.available_quantity(self._product_id) or 0
        self.query_one("#input-order-qty", Input).validators = [
            Number(minimum=1, maximum=stock)
        ]

    @on(Button.Pressed, "#btn-place-order")
    @work(exclusive=True, group="place-order")
    async def handle_place_order(self) -> None:
        qty_input = self.query_one("#input-order-qty", Input)
        if not qty_input.value or not qty_input.value.lstrip("-").isdigit():
            qty_input.focus()
            qty_input.add_class("-invalid")
            self.notify("Enter a quantity.", severity="error")
            return
        quantity = int(qty_input.value)

        try:
            self.orders_view.check_order(self._product_id or "", quantity)
        except (InventoryError, ValueError) as exc:
            self.report_error(exc)
            return

        product = self.catalog.find_product(self._product_id)
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Order {quantity} x {product.name} for "
                f"{self.money(product.price * quantity)}?",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        try:
            order = await self.orders_view.place_order(self._product_id, quantity)
        except (InventoryError, ValueError) as exc:
            self.report_error(exc)
            return

        qty_input.value = "1"
        self.notify(f"Order placed successfully! Order ID: {order.id}")
