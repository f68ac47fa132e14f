from typing import Any, Dict, List, Optional

from api.models import Supplier
from viewmodels.records import SupplierViewModel
from views.scr_records import RecordAdminScreen


class SuppliersScreen(RecordAdminScreen):
    """Admin list of suppliers with add / edit / delete."""

    RECORD_NAME = "supplier"
    COLUMNS = ("Name", "Company", "Phone", "Email", "Address")
    FIELDS = (
        ("name", "Name", "text"),
        ("company", "Company", "text"),
        ("phone", "Phone", "text"),
        ("email", "Email", "text"),
        ("address", "Address", "text"),
    )

    def __init__(self) -> None:
        super().__init__()
        self.records = SupplierViewModel(
            self.app.api, on_change=lambda _: self.render_records()
        )

    def row_for(self, record: Supplier) -> List[Any]:
        return [record.name, record.company, record.phone, record.email, record.address]

    def fill_form(self, record: Optional[Supplier]) -> None:
        for key, _, _ in self.FIELDS:
            self.set_value(key, getattr(record, key) if record else "")

    def payload(self) -> Dict[str, Any]:
        if not self.value("name"):
            raise ValueError("Supplier name is required.")
        return Supplier(
            id=self.editing_id or "",
            name=self.value("name"),
            company=self.value("company"),
            phone=self.value("phone"),
            email=self.value("email"),
            address=self.value("address"),
        ).to_json()
