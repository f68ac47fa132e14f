from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label

from viewmodels.catalog import CatalogViewModel
from views.base_screen import BaseScreen


class CatalogScreen(BaseScreen):
    """
    Read-only list of products a customer can order (stock > 0).
    """

    def __init__(self) -> None:
        super().__init__()
        self.catalog = CatalogViewModel(
            self.app.api, on_change=lambda _: self.render_catalog()
        )

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Label("Browse available products you can order", id="label-hint")
        yield DataTable(id="table-catalog")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Label("To place an order, go to the My Orders page.")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(
            "Name", "Description", "Price", "Available", "Supplier", "Company", "Contact"
        )

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def handle_refresh(self) -> None:
        if not await self.catalog.load_catalog() and self.catalog.last_error:
            self.report_error(self.catalog.last_error)

    def render_catalog(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for p in self.catalog.available_products:
            supplier = p.stock.supplier if p.stock else None
            table.add_row(
                p.name,
                p.description,
                self.money(p.price),
                p.quantity,
                supplier.name if supplier else "N/A",
                supplier.company if supplier else "N/A",
                supplier.phone if supplier else "N/A",
            )
