from typing import Any, Dict, List, Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, Markdown, OptionList
from textual.widgets.option_list import Option

from api.models import Product
from utils.pure import generate_markdown_table
from viewmodels.records import ProductAdminViewModel, ProductFormFill
from views.scr_records import RecordAdminScreen


class ManageProductsScreen(RecordAdminScreen):
    """
    Admin products. Picking a stock record fills in its category, quantity
    and supplier details next to the form.
    """

    RECORD_NAME = "product"
    COLUMNS = ("Name", "Description", "Price", "Category", "Quantity", "Supplier")
    FIELDS = (
        ("name", "Name", "text"),
        ("description", "Description", "text"),
        ("price", "Price", "number"),
    )

    def __init__(self) -> None:
        super().__init__()
        self.records = ProductAdminViewModel(
            self.app.api, on_change=lambda _: self.render_records()
        )
        self.records.stocks.on_change = lambda _: self.render_stocks()
        self._stock_id: Optional[str] = None

    def compose_extra_fields(self) -> ComposeResult:
        with Vertical():
            yield Label("Stock")
            yield OptionList(id="optlist-stocks")
        yield Markdown("", id="md-autofill")

    async def load(self) -> bool:
        return await self.records.load_all()

    def render_stocks(self) -> None:
        opt_list = self.query_one("#optlist-stocks", OptionList)
        opt_list.clear_options()
        opt_list.add_options(
            [
                Option(
                    f"{s.product_name or s.category} ({s.quantity} units)", id=s.id
                )
                for s in self.records.stocks.records
            ]
        )

    def render_autofill(self, fill: ProductFormFill) -> None:
        rows = [
            ["Category", fill.category or "-"],
            ["Quantity", fill.quantity or "-"],
            ["Supplier", fill.supplier_name or "-"],
            ["Company", fill.company or "-"],
            ["Contact", fill.contact or "-"],
        ]
        self.query_one("#md-autofill", Markdown).update(
            generate_markdown_table(None, rows, ["l", "l"])
        )

    @on(OptionList.OptionHighlighted, "#optlist-stocks")
    def handle_stock_choice(self, message: OptionList.OptionHighlighted) -> None:
        self._stock_id = message.option.id
        self.render_autofill(self.records.autofill(self._stock_id))

    def row_for(self, record: Product) -> List[Any]:
        stock = record.stock
        supplier = stock.supplier if stock else None
        return [
            record.name,
            record.description,
            self.money(record.price),
            stock.category if stock else "-",
            record.quantity,
            supplier.name if supplier else "N/A",
        ]

    def fill_form(self, record: Optional[Product]) -> None:
        self.set_value("name", record.name if record else "")
        self.set_value("description", record.description if record else "")
        self.set_value("price", record.price if record else "")
        self._stock_id = record.stock.id if record and record.stock else None
        self.render_autofill(
            self.records.autofill(self._stock_id) if self._stock_id else ProductFormFill()
        )

    def payload(self) -> Dict[str, Any]:
        if not self.value("name"):
            raise ValueError("Product name is required.")
        try:
            price = float(self.value("price"))
        except ValueError:
            raise ValueError("Price must be a number.") from None
        if price < 0:
            raise ValueError("Price cannot be negative.")
        if not self._stock_id:
            raise ValueError("Please select a stock record.")
        return ProductAdminViewModel.payload(
            self.value("name"), self.value("description"), price, self._stock_id
        )
