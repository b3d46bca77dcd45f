from typing import Callable, Dict, Optional

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

import db.crud as crud
from engine.store import StoreEngine
from utils.logger import get_logger
from utils.messages import (
    ModeSwitchedMessage,
    QuitRequestedMessage,
    StateChangedMessage,
    UserLogoutMessage,
)
from utils.state import GlobalState
from views.scr_checkout import CheckoutScreen
from views.scr_dashboard import DashboardScreen
from views.scr_inventory import InventoryScreen
from views.scr_login import LoginScreen
from views.scr_orders import OrdersScreen
from views.scr_reports import ReportsScreen
from views.scr_suppliers import SuppliersScreen

_logger = get_logger(__name__)


class StoreApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "dashboard": DashboardScreen,
        "reports": ReportsScreen,
        "inventory": InventoryScreen,
        "checkout": CheckoutScreen,
        "orders": OrdersScreen,
        "suppliers": SuppliersScreen,
    }

    MODE_LABELS = {
        "dashboard": "Dashboard",
        "reports": "Reports",
        "inventory": "Inventory",
        "checkout": "Checkout",
        "orders": "Orders",
        "suppliers": "Suppliers",
    }

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/screens.tcss",
    ]

    state: GlobalState

    def __init__(self):
        super().__init__()
        self.state = GlobalState(StoreEngine.seeded())
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def modes_for(self, state: GlobalState) -> Dict[str, str]:
        """Menu entries the signed-in role may open, in display order."""
        allowed = {
            "dashboard": True,
            "reports": True,
            "inventory": state.can_manage_inventory,
            "checkout": state.can_checkout,
            "orders": True,
            "suppliers": state.can_manage_suppliers,
        }
        return {mode: label for mode, label in self.MODE_LABELS.items() if allowed[mode]}

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    # ---------------------------
    # Engine wiring
    # ---------------------------

    async def load_engine(self) -> None:
        data = await crud.load_state()
        engine = StoreEngine.from_snapshot(data)
        if self._unsubscribe:
            self._unsubscribe()
        self.state.rebind(engine)
        self._unsubscribe = engine.subscribe(self.handle_state_changed)
        if data is None:
            self.persist_state(engine.snapshot())

    def handle_state_changed(self, event: str) -> None:
        # snapshot now, write later: the worker only ever sees whole transactions
        self.persist_state(self.state.engine.snapshot())
        self.screen.post_message(StateChangedMessage(event))

    @work(exclusive=True, group="persist")
    async def persist_state(self, snapshot: dict) -> None:
        await crud.save_state(snapshot)

    # ---------------------------
    # Session flow
    # ---------------------------

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work
    async def main_flow(self):
        if self._unsubscribe is None:
            await self.load_engine()
        if not self.state.signed_in and not await self.state.restore():
            await self.push_screen_wait(LoginScreen())
        _logger.info(f"Signed in as {self.state.username} ({self.state.role})")
        self.post_message(ModeSwitchedMessage(self.current_mode, "dashboard"))
        await self.switch_mode("dashboard")


def run() -> None:
    StoreApp().run()


if __name__ == "__main__":
    run()
