from typing import Any, Dict, List, Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option

from api.models import Stock
from viewmodels.records import StockViewModel
from views.scr_records import RecordAdminScreen


class StockScreen(RecordAdminScreen):
    """Admin stock records; each one belongs to a supplier."""

    RECORD_NAME = "stock"
    COLUMNS = ("Product", "Category", "Quantity", "Supplier", "Company", "Contact")
    FIELDS = (
        ("product-name", "Product Name", "text"),
        ("category", "Category", "text"),
        ("quantity", "Quantity", "integer"),
    )

    def __init__(self) -> None:
        super().__init__()
        self.records = StockViewModel(
            self.app.api, on_change=lambda _: self.render_records()
        )
        self.records.suppliers.on_change = lambda _: self.render_suppliers()
        self._supplier_id: Optional[str] = None

    def compose_extra_fields(self) -> ComposeResult:
        with Vertical():
            yield Label("Supplier")
            yield OptionList(id="optlist-suppliers")

    async def load(self) -> bool:
        return await self.records.load_all()

    def render_suppliers(self) -> None:
        opt_list = self.query_one("#optlist-suppliers", OptionList)
        opt_list.clear_options()
        opt_list.add_options(
            [
                Option(f"{s.name} ({s.company})", id=s.id)
                for s in self.records.suppliers.records
            ]
        )

    @on(OptionList.OptionHighlighted, "#optlist-suppliers")
    def handle_supplier_choice(self, message: OptionList.OptionHighlighted) -> None:
        self._supplier_id = message.option.id

    def row_for(self, record: Stock) -> List[Any]:
        supplier = record.supplier
        return [
            record.product_name or "-",
            record.category,
            record.quantity,
            supplier.name if supplier else "N/A",
            supplier.company if supplier else "N/A",
            supplier.phone if supplier else "N/A",
        ]

    def fill_form(self, record: Optional[Stock]) -> None:
        self.set_value("product-name", record.product_name if record else "")
        self.set_value("category", record.category if record else "")
        self.set_value("quantity", record.quantity if record else "")
        self._supplier_id = record.supplier.id if record and record.supplier else None
        if self._supplier_id is not None:
            ids = [s.id for s in self.records.suppliers.records]
            if self._supplier_id in ids:
                opt_list = self.query_one("#optlist-suppliers", OptionList)
                opt_list.highlighted = ids.index(self._supplier_id)
            else:
                self._supplier_id = None

    def payload(self) -> Dict[str, Any]:
        if not self.value("category"):
            raise ValueError("Category is required.")
        if not self.value("quantity").isdigit():
            raise ValueError("Quantity must be a whole number.")
        if not self._supplier_id:
            raise ValueError("Please select a supplier.")
        return StockViewModel.payload(
            self.value("category"),
            int(self.value("quantity")),
            self._supplier_id,
            self.value("product-name"),
        )
