from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume, ScreenSuspend
from textual.widgets import Button, DataTable, Label, MarkdownViewer

from api.errors import InventoryError
from api.models import Order
from utils.pure import format_date, generate_markdown_table
from viewmodels.orders import (
    ORDER_STATUSES,
    AdminOrderView,
    HttpOrderRepository,
    order_view_for,
)
from views.base_screen import BaseScreen
from views.modal_dialog import ChoiceModal, ConfirmDeleteModal


class AdminOrdersScreen(BaseScreen):
    """
    All customer orders, newest first, refreshed in the background.

    Layout:
    - Markdown detail of the highlighted order at the top.
    - Orders table below, with refresh / status / delete controls.
    """

    BINDINGS = [
        Binding("s", "change_status", "Change Status", show=True),
        Binding("d", "delete_order", "Delete", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.orders_view: AdminOrderView = order_view_for(
            self.app.session,
            HttpOrderRepository(self.app.api),
            on_change=lambda _: self.render_orders(),
        )

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh Orders", id="btn-refresh")
            yield Button("Change Status", id="btn-status", variant="primary")
            yield Button("Delete", id="btn-delete", variant="error")
            yield Label("", id="label-order-cnt")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(
            "Order ID", "Customer", "Email", "Product", "Qty", "Total", "Status", "Date"
        )

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.orders_view.start_polling(self.app.settings.poll_interval_ms)
        self.handle_refresh()

    @on(ScreenSuspend)
    def handle_suspend(self) -> None:
        self.orders_view.stop_polling()

    def on_unmount(self) -> None:
        self.orders_view.stop_polling()

    @on(Button.Pressed, "#btn-refresh")
    @work(group="orders")
    async def handle_refresh(self) -> None:
        await self.orders_view.load_orders()

    def render_orders(self) -> None:
        table = self.query_one(DataTable)
        label = self.query_one("#label-order-cnt", Label)
        if self.orders_view.loading and not self.orders_view.orders:
            label.update("Refreshing...")
        else:
            label.update(f"{len(self.orders_view.orders)} orders")
        if self.orders_view.last_error is not None:
            label.update(f"Last refresh failed: {self.orders_view.last_error}")

        cursor_row = table.cursor_row
        table.clear()
        for order in self.orders_view.orders:
            table.add_row(
                order.id,
                order.customer.display_name,
                order.customer.email or "N/A",
                order.summary,
                sum(i.quantity for i in order.items),
                self.money(order.total_amount),
                order.status,
                format_date(order.created_at),
            )
        if self.orders_view.orders:
            table.move_cursor(row=min(cursor_row, len(self.orders_view.orders) - 1))
        self._render_detail(self._selected_order())

    def _selected_order(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row = table.cursor_row
        if row is None or row >= len(self.orders_view.orders):
            return None
        return self.orders_view.orders[row]

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self._render_detail(self._selected_order())

    def _render_detail(self, order: Optional[Order]) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            viewer.document.update("### No orders found")
            return
        header = (
            f"### Order {order.id}\n"
            f"Customer: {order.customer.display_name} ({order.customer.email or 'N/A'})  \n"
            f"Date: {format_date(order.created_at)}  \n"
            f"Status: **{order.status}**\n\n"
        )
        rows = [
            [i.product_name, i.quantity, self.money(i.unit_price), self.money(i.line_total)]
            for i in order.items
        ]
        table = generate_markdown_table(
            ["Product", "Qty", "Unit Price", "Line Total"], rows, ["l", "r", "r", "r"]
        )
        footer = f"\n\n**Total:** {self.money(order.total_amount)}"
        viewer.document.update(header + table + footer)

    @on(Button.Pressed, "#btn-status")
    def action_change_status(self) -> None:
        self.handle_change_status()

    @work()
    async def handle_change_status(self) -> None:
        order = self._selected_order()
        if order is None:
            self.notify("Select an order first.", severity="warning")
            return
        status = await self.app.push_screen_wait(
            ChoiceModal(f"Set status of order {order.id}", ORDER_STATUSES, order.status)
        )
        if status is None:
            return
        try:
            await self.orders_view.update_status(order.id, status)
        except (InventoryError, ValueError) as exc:
            self.report_error(exc)
            return
        self.notify("Order status updated successfully.", title="Updated!")

    @on(Button.Pressed, "#btn-delete")
    def action_delete_order(self) -> None:
        self.handle_delete()

    @work()
    async def handle_delete(self) -> None:
        order = self._selected_order()
        if order is None:
            self.notify("Select an order first.", severity="warning")
            return

        async def confirm() -> bool:
            return bool(await self.app.push_screen_wait(ConfirmDeleteModal("order")))

        try:
            deleted = await self.orders_view.delete_order(order.id, confirm)
        except InventoryError as exc:
            self.report_error(exc)
            return
        if deleted:
            self.notify("Order deleted successfully.", title="Deleted!")
