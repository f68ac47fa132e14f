from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

from utils.pure import format_date, generate_markdown_table
from viewmodels.dashboard import LOW_STOCK_THRESHOLD, DashboardAggregator
from views.base_screen import BaseScreen


class DashboardScreen(BaseScreen):
    """
    Admin landing view: totals, order status breakdown, recent orders and
    low stock alerts.
    """

    def __init__(self) -> None:
        super().__init__()
        self.aggregator = DashboardAggregator(self.app.api)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)
            yield Button("Refresh", id="btn-refresh", variant="primary")

    @on(Button.Pressed, "#btn-refresh")
    @on(ScreenResume)
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        if not await self.aggregator.load():
            if self.aggregator.last_error is not None:
                self.report_error(self.aggregator.last_error)
            return
        if self.aggregator.partial_error is not None:
            self.notify(
                f"Some data could not be loaded: {self.aggregator.partial_error}",
                severity="warning",
            )

        stats = self.aggregator.stats
        summary_md = (
            "### Overview\n\n"
            f"- Total Products: {stats.product_count}\n"
            f"- Total Orders: {stats.order_count} ({stats.pending_count} pending)\n"
            f"- Suppliers: {stats.supplier_count}\n"
            f"- Total Revenue: {self.money(stats.revenue)}\n"
            f"- Low Stock Items: {len(stats.low_stock_products)}\n\n"
            "### Order Status\n\n"
            f"- Pending: {stats.pending_count}\n"
            f"- Shipped: {stats.shipped_count}\n"
            f"- Delivered: {stats.delivered_count}\n\n"
        )

        recent_rows = [
            [
                o.customer.display_name,
                o.summary,
                self.money(o.total_amount),
                o.status,
                format_date(o.created_at),
            ]
            for o in stats.recent_orders
        ]
        recent_md = "### Recent Orders\n\n" + (
            generate_markdown_table(
                ["Customer", "Product", "Amount", "Status", "Date"],
                recent_rows,
                ["l", "l", "r", "c", "l"],
            )
            or "No orders yet"
        )

        low_rows = [[p.name, p.quantity] for p in stats.low_stock_products]
        low_md = f"\n\n### Low Stock Alert (below {LOW_STOCK_THRESHOLD})\n\n" + (
            generate_markdown_table(["Product", "Units Left"], low_rows, ["l", "r"])
            or "All products are well stocked!"
        )

        self.query_one("#md-dashboard", MarkdownViewer).document.update(
            summary_md + recent_md + low_md
        )
