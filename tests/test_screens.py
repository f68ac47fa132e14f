import unittest

from textual.app import App
from textual.screen import Screen
from textual.widgets import ListView

from fake_api import FakeInventoryApi
from utils.config import Settings
from utils.state import Session
from views.base_screen import BaseScreen, Sidebar
from views.scr_dashboard import DashboardScreen


class HostApp(App):
    """Just enough of the main app for the screens under test to compose."""

    MODES = {}
    ADMIN_MODES = {"dashboard": "Dashboard", "orders": "Orders"}
    CUSTOMER_MODES = {"catalog": "Products"}

    def __init__(self, screen_type, api=None, session: Session = None):
        super().__init__()
        self.screen_type = screen_type
        self.api = api
        self.session = session or api.session
        self.settings = Settings(api_url="http://inventory.test")

    def on_mount(self) -> None:
        self.push_screen(self.screen_type())


async def settle(app: App, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class SidebarTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_next_login_is_shown_on_resume(self):
        session = Session(token="t1", role="admin", name="Ada")
        app = HostApp(BaseScreen, session=session)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            screen = app.screen
            self.assertEqual(screen.query_one(Sidebar).shown, ("Ada", "admin"))

            # logout, then someone else with the same role logs in
            await app.push_screen(Screen())
            session.name = "Bea"
            await app.pop_screen()
            await settle(app, pilot)

            sidebar = screen.query_one(Sidebar)
            self.assertEqual(sidebar.shown, ("Bea", "admin"))
            self.assertEqual(len(sidebar.query_one("#list-menu", ListView).children), 2)

    async def test_same_user_keeps_sidebar(self):
        session = Session(token="t1", role="customer", name="Cora")
        app = HostApp(BaseScreen, session=session)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            screen = app.screen
            before = screen.query_one(Sidebar).query_one("#md-userinfo")

            await app.push_screen(Screen())
            await app.pop_screen()
            await settle(app, pilot)

            self.assertIs(screen.query_one(Sidebar).query_one("#md-userinfo"), before)


class DashboardScreenTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_reloads_when_shown_again(self):
        fake = FakeInventoryApi()
        api = fake.admin_client()
        app = HostApp(DashboardScreen, api=api)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            screen = app.screen
            self.assertEqual(screen.aggregator.stats.order_count, 0)

            await app.push_screen(Screen())
            fake.add_order("u-cust")
            await app.pop_screen()
            await settle(app, pilot)

            self.assertEqual(fake.count("GET", "/api/orders"), 2)
            self.assertEqual(screen.aggregator.stats.order_count, 1)
        await api.aclose()


if __name__ == "__main__":
    unittest.main()
