from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Rule

from engine.errors import EngineError
from utils.messages import CartChangedMessage, ModeSwitchedMessage, StateChangedMessage
from utils.pure import money
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal


class CheckoutScreen(BaseScreen):
    """
    Point of sale: pick products (enter adds one unit), adjust cart lines
    and commit the sale.
    """

    selected_cart_pid: Optional[int] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-pos"):
            with Vertical(id="div-pick"):
                yield Input(placeholder="Find a product...", id="input-search")
                yield DataTable(id="table-pick")
            with Vertical(id="div-cart"):
                yield DataTable(id="table-cart")
                with Horizontal(id="hort-cart-line"):
                    yield Input(placeholder="Qty", id="input-qty", type="integer")
                    yield Button("Set Qty", id="btn-set-qty")
                    yield Button("Remove", id="btn-remove", variant="warning")
                yield Rule(line_style="dashed")
                yield Label("Total: $0.00", id="label-cart-total")
                with Horizontal(id="hort-buttons"):
                    yield Button("Clear Cart", id="btn-clear-cart")
                    yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self) -> None:
        for table in self.query(DataTable):
            table.cursor_type = "row"
            table.zebra_stripes = True
        self.handle_reload()
        self.query_one("#input-search", Input).focus()

    @property
    def cart(self):
        return self.app.state.cart

    @on(StateChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    @on(Input.Changed, "#input-search")
    def handle_reload(self) -> None:
        search = self.query_one("#input-search", Input).value
        table = self.query_one("#table-pick", DataTable)
        if not table.columns:
            table.add_columns("ID", "Product", "Price", "Stock")
        table.clear()
        for p in self.engine.filter_products(search):
            table.add_row(p.id, p.name, money(p.price), p.stock, key=str(p.id))
        self.handle_cart_change()

    @on(CartChangedMessage)
    def handle_cart_change(self) -> None:
        table = self.query_one("#table-cart", DataTable)
        if not table.columns:
            table.add_columns("Product", "Qty", "Unit", "Line Total")
        table.clear()
        for line in self.cart.lines:
            table.add_row(
                line.name,
                line.quantity,
                money(line.unit_price),
                money(line.line_total),
                key=str(line.product_id),
            )
        if self.cart.quantity_of(self.selected_cart_pid) == 0:
            self.selected_cart_pid = None
        self.query_one("#label-cart-total", Label).update(
            f"Total: {money(self.cart.total())}  ({self.cart.item_count} item(s))"
        )

    @on(DataTable.RowSelected, "#table-pick")
    def handle_pick(self, event: DataTable.RowSelected) -> None:
        product = self.engine.find_product(int(event.row_key.value))
        if product is None:
            return
        before = self.cart.quantity_of(product.id)
        line = self.cart.add_line(product)
        if line is None:
            self.notify(f"{product.name} is out of stock.", severity="warning")
        elif line.quantity == before:
            self.notify(f"Only {product.stock} {product.name} in stock.", severity="warning")
        self.post_message(CartChangedMessage())

    @on(DataTable.RowHighlighted, "#table-cart")
    def handle_cart_highlight(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is not None and event.row_key.value is not None:
            self.selected_cart_pid = int(event.row_key.value)
            self.query_one("#input-qty", Input).value = str(
                self.cart.quantity_of(self.selected_cart_pid)
            )

    @on(Input.Submitted, "#input-qty")
    @on(Button.Pressed, "#btn-set-qty")
    def handle_set_qty(self) -> None:
        if self.selected_cart_pid is None:
            self.notify("Select a cart line first.", severity="warning")
            return
        self.cart.set_line_quantity(
            self.selected_cart_pid, self.query_one("#input-qty", Input).value
        )
        self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-remove")
    def handle_remove(self) -> None:
        if self.selected_cart_pid is not None:
            self.cart.remove_line(self.selected_cart_pid)
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if self.cart.is_empty:
            self.notify("Cart is empty.", severity="warning")
            return
        if await self.app.push_screen_wait(
            DialogModal(
                "Remove all items from the cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            self.cart.clear()
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-checkout")
    @work(exclusive=True)
    async def handle_checkout(self) -> None:
        if not self.app.state.can_checkout:
            self.notify("Your role cannot check out.", severity="error")
            return
        if self.cart.is_empty:
            self.notify("Cart is empty.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Charge {money(self.cart.total())}? This cannot be undone.",
                primary_text="Checkout",
                secondary_text="Back",
                tone="positive",
            )
        ):
            return

        try:
            order = self.engine.checkout(self.cart, self.app.state.username)
        except EngineError as e:
            self.report_error(e)
            return
        self.notify(f"Order {order.id} recorded: {money(order.total)}.")
        self.post_message(CartChangedMessage())
