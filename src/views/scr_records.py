from typing import Any, Dict, List, Optional, Sequence

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label

from api.errors import InventoryError
from viewmodels.records import RecordListViewModel
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmDeleteModal


class RecordAdminScreen(BaseScreen):
    """
    Table of records plus an add / edit form, shared by the supplier, stock
    and product screens. Highlighting a row loads it into the form; the
    Save button creates or updates depending on that.

    Subclasses provide COLUMNS, FIELDS, `records`, `row_for`, `fill_form`
    and `payload`.
    """

    RECORD_NAME = "record"
    COLUMNS: Sequence[str] = ()
    # (input id suffix, label, input type)
    FIELDS: Sequence[tuple] = ()

    records: RecordListViewModel

    def __init__(self) -> None:
        super().__init__()
        self.editing_id: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield DataTable(id="table-records")
            with Horizontal(id="div-form"):
                for key, label, kind in self.FIELDS:
                    with Vertical():
                        yield Label(label)
                        yield Input(id=f"input-{key}", type=kind)
                yield from self.compose_extra_fields()
            with Horizontal(id="hort-controls"):
                yield Button("Save", id="btn-save", variant="success")
                yield Button("New", id="btn-new")
                yield Button("Delete", id="btn-delete", variant="error")
                yield Button("Refresh", id="btn-refresh")
                yield Label("", id="label-editing")

    def compose_extra_fields(self) -> ComposeResult:
        yield from ()

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*self.COLUMNS)

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load")
    async def handle_refresh(self) -> None:
        if not await self.load() and self.records.last_error:
            self.report_error(self.records.last_error)

    async def load(self) -> bool:
        return await self.records.load()

    def render_records(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for record in self.records.records:
            table.add_row(*self.row_for(record))

    def row_for(self, record: Any) -> List[Any]:
        raise NotImplementedError

    def fill_form(self, record: Optional[Any]) -> None:
        raise NotImplementedError

    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def value(self, key: str) -> str:
        return self.query_one(f"#input-{key}", Input).value.strip()

    def set_value(self, key: str, value: Any) -> None:
        self.query_one(f"#input-{key}", Input).value = "" if value is None else str(value)

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        row = event.cursor_row
        if row is None or row >= len(self.records.records):
            return
        record = self.records.records[row]
        self.editing_id = record.id
        self.fill_form(record)
        self.query_one("#label-editing", Label).update(f"Editing {record.id}")

    @on(Button.Pressed, "#btn-new")
    def handle_new(self) -> None:
        self.editing_id = None
        self.fill_form(None)
        self.query_one("#label-editing", Label).update(f"New {self.RECORD_NAME}")

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True, group="write")
    async def handle_save(self) -> None:
        try:
            payload = self.payload()
            if self.editing_id is None:
                await self.records.create(payload)
                self.notify(f"{self.RECORD_NAME.capitalize()} added successfully!")
            else:
                await self.records.update(self.editing_id, payload)
                self.notify(f"{self.RECORD_NAME.capitalize()} updated successfully!")
        except (InventoryError, ValueError) as exc:
            self.report_error(exc)

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="write")
    async def handle_delete(self) -> None:
        if self.editing_id is None:
            self.notify(f"Select a {self.RECORD_NAME} first.", severity="warning")
            return

        async def confirm() -> bool:
            return bool(
                await self.app.push_screen_wait(ConfirmDeleteModal(self.RECORD_NAME))
            )

        try:
            deleted = await self.records.delete(self.editing_id, confirm)
        except InventoryError as exc:
            self.report_error(exc)
            return
        if deleted:
            self.handle_new()
            self.notify(f"{self.RECORD_NAME.capitalize()} deleted successfully!")
