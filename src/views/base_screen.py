from typing import Dict, Optional, Tuple

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from api.errors import InventoryError
from utils.messages import UserLogoutMessage
from utils.pure import format_money, generate_markdown_table
from utils.state import Session
from views.modal_dialog import DialogModal, QuitDialogModal

MENU_PREFIX = "list-menu-item-"


class Sidebar(Container):
    """Who is logged in, the role's menu and the logout button."""

    def __init__(self, session: Session, modes: Dict[str, str]) -> None:
        super().__init__()
        self.session = session
        self.modes = modes
        self.shown = self._identity()

    def _identity(self) -> Tuple[Optional[str], Optional[str]]:
        return self.session.name, self.session.role

    def compose(self) -> ComposeResult:
        role_label = (self.session.role or "-").capitalize()
        yield Label("User Info", id="label-info-1")
        yield Markdown(
            generate_markdown_table(
                None, [["Name", self.session.name or "-"], ["Role", role_label]]
            ),
            id="md-userinfo",
        )
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(
            *(ListItem(Label(v), id=MENU_PREFIX + k) for k, v in self.modes.items()),
            id="list-menu",
        )

    def on_mount(self) -> None:
        self.mark_current(self.app.current_mode)

    async def sync(self, modes: Dict[str, str]) -> None:
        """Recompose if someone else logged in since this was last shown."""
        if self._identity() == self.shown and modes == self.modes:
            return
        self.modes = modes
        self.shown = self._identity()
        await self.recompose()
        self.mark_current(self.app.current_mode)

    async def on_list_view_selected(self, event: ListView.Selected):
        target = event.item.id.removeprefix(MENU_PREFIX)
        current = self.app.current_mode
        self.mark_current(current)
        if target != current:
            await self.app.switch_mode(target)

    def mark_current(self, mode: str) -> None:
        for item in self.query_one("#list-menu", ListView).children:
            item.highlighted = item.id == MENU_PREFIX + mode

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        confirmed = await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        )
        if confirmed:
            self.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens: header, footer, the role sidebar and the
    quit binding. Also the money formatting and error reporting every
    screen shares.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.configure()

    def menu(self) -> Dict[str, str]:
        if self.app.session.role == "admin":
            return self.app.ADMIN_MODES
        return self.app.CUSTOMER_MODES

    def configure(
        self,
        header_sub_title: str = "Inventory",
        show_sidebar: bool = True,
    ) -> None:
        """
        Title the screen after its menu entry, when it has one.
        """
        self.app.title = "Inventory Dashboard"
        labels = {**self.app.ADMIN_MODES, **self.app.CUSTOMER_MODES}
        self.sub_title = next(
            (
                labels[mode]
                for mode, screen in self.app.MODES.items()
                if isinstance(self, screen) and mode in labels
            ),
            header_sub_title,
        )
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar(self.app.session, self.menu())
        yield Header()
        yield Footer(show_command_palette=False)

    def money(self, amount: float) -> str:
        return format_money(amount, self.app.settings.currency)

    def report_error(self, exc: Exception) -> None:
        """Transient notification for a failed action."""
        if isinstance(exc, (InventoryError, ValueError)):
            self.notify(str(exc), title="Error", severity="error")
        else:
            raise exc

    async def on_screen_resume(self) -> None:
        # mode screens outlive a logout
        for sidebar in self.query(Sidebar):
            await sidebar.sync(self.menu())

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
