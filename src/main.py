from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from api.client import ApiClient
from utils.config import Settings
from utils.logger import get_logger
from utils.messages import QuitRequestedMessage, UserLogoutMessage
from utils.state import Session
from views.scr_admin_orders import AdminOrdersScreen
from views.scr_catalog import CatalogScreen
from views.scr_customer_orders import CustomerOrdersScreen
from views.scr_dashboard import DashboardScreen
from views.scr_login import LoginScreen
from views.scr_manage_products import ManageProductsScreen
from views.scr_stock import StockScreen
from views.scr_suppliers import SuppliersScreen

_logger = get_logger(__name__)


class InvDashApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "dashboard": DashboardScreen,
        "orders": AdminOrdersScreen,
        "products": ManageProductsScreen,
        "stock": StockScreen,
        "suppliers": SuppliersScreen,
        "catalog": CatalogScreen,
        "my_orders": CustomerOrdersScreen,
    }

    ADMIN_MODES = {
        "dashboard": "Dashboard",
        "suppliers": "Suppliers",
        "stock": "Stock",
        "products": "Products",
        "orders": "Orders",
    }
    CUSTOMER_MODES = {
        "catalog": "Products",
        "my_orders": "My Orders",
    }
    HOME_MODES = {"admin": "dashboard", "customer": "catalog"}

    CSS = """
    Sidebar {
        dock: left;
        width: 28;
        padding: 0 1;
        border-right: vkey $primary;
    }
    #div-dialog {
        width: 64;
        height: auto;
        padding: 1 2;
        border: thick $primary;
        background: $surface;
    }
    DialogModal, ChoiceModal {
        align: center middle;
    }
    #dialog, #hort-table-control, #hort-controls, #hort-order-form {
        height: auto;
    }
    #div-form {
        height: auto;
        max-height: 14;
    }
    #input-order-qty {
        width: 12;
    }
    """

    settings: Settings
    session: Session
    api: ApiClient

    def __init__(self, settings: Settings = None):
        super().__init__()
        self.settings = settings or Settings()
        self.session = Session()
        self.api = ApiClient(self.session, self.settings)

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.session.end()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.api.aclose()
        self.exit()

    @work(exclusive=True, group="main-flow")
    async def main_flow(self):
        if not self.session.is_authenticated and not await self.session.restore():
            await self.push_screen_wait(LoginScreen())
        else:
            _logger.info(f"Resumed stored {self.session.role} session")

        home = self.HOME_MODES[self.session.role]
        await self.switch_mode(home)


def run() -> None:
    InvDashApp().run()


if __name__ == "__main__":
    run()
