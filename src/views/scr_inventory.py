from typing import List, Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Select

from engine.errors import EngineError
from engine.models import CATEGORIES
from utils.messages import ModeSwitchedMessage, StateChangedMessage
from utils.pure import money
from views.base_screen import BaseScreen


class InventoryScreen(BaseScreen):
    """
    Browse the catalog, add products and restock or write off units.
    """

    selected_pid: Optional[int] = None

    def __init__(self) -> None:
        super().__init__()
        self._categories: List[str] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            with Horizontal(id="hort-filter"):
                yield Input(placeholder="Search by name...", id="input-search")
                yield Select([], prompt="All categories", id="select-filter-category")
            yield DataTable(id="table-products")
            with Horizontal(id="hort-restock"):
                yield Label("No product selected", id="label-selected")
                yield Input(
                    placeholder="+/- units", id="input-restock", type="integer"
                )
                yield Button("Adjust Stock", id="btn-restock", variant="warning")
            with Horizontal(id="hort-add-product"):
                yield Input(placeholder="Product name", id="input-name")
                yield Select(
                    [(c, c) for c in CATEGORIES],
                    value=CATEGORIES[0],
                    allow_blank=False,
                    id="select-category",
                )
                yield Input(placeholder="Price", id="input-price", type="number")
                yield Input(placeholder="Stock", id="input-stock", type="integer")
                yield Button("Add Product", id="btn-add", variant="success")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        self.handle_reload()
        self.query_one("#input-search", Input).focus()

    @on(StateChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    @on(Input.Changed, "#input-search")
    @on(Select.Changed, "#select-filter-category")
    def handle_reload(self) -> None:
        engine = self.engine

        select = self.query_one("#select-filter-category", Select)
        current = select.value
        categories = [c for c in engine.categories() if c != "All"]
        if categories != self._categories:
            self._categories = categories
            select.set_options([(c, c) for c in categories])
            if current in categories:
                select.value = current
        category = "All" if select.value is Select.BLANK else select.value

        search = self.query_one("#input-search", Input).value
        table = self.query_one(DataTable)
        if not table.columns:
            table.add_columns("ID", "Name", "Category", "Price", "Stock", "Value", "")
        table.clear()
        for p in engine.filter_products(search, category):
            table.add_row(
                p.id,
                p.name,
                p.category,
                money(p.price),
                p.stock,
                money(p.stock_value),
                "LOW" if p.is_low_stock else "",
                key=str(p.id),
            )
        self._render_selected()

    @on(DataTable.RowHighlighted, "#table-products")
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is not None and event.row_key.value is not None:
            self.selected_pid = int(event.row_key.value)
        self._render_selected()

    def _render_selected(self) -> None:
        product = self.engine.find_product(self.selected_pid)
        label = self.query_one("#label-selected", Label)
        if product is None:
            label.update("No product selected")
        else:
            label.update(f"{product.name}: {product.stock} in stock")

    @on(Input.Submitted, "#input-restock")
    @on(Button.Pressed, "#btn-restock")
    def handle_restock(self) -> None:
        if not self.app.state.can_manage_inventory:
            self.notify("Your role cannot change stock.", severity="error")
            return
        if self.selected_pid is None:
            self.notify("Select a product first.", severity="warning")
            return

        input_restock = self.query_one("#input-restock", Input)
        product = self.engine.adjust_stock(self.selected_pid, input_restock.value)
        if product is None:
            self.notify("Enter a non-zero whole number.", severity="warning")
            input_restock.focus()
            return
        input_restock.value = ""
        self.notify(f"{product.name} now has {product.stock} in stock.")

    @on(Button.Pressed, "#btn-add")
    def handle_add_product(self) -> None:
        if not self.app.state.can_manage_inventory:
            self.notify("Your role cannot add products.", severity="error")
            return

        input_name = self.query_one("#input-name", Input)
        input_price = self.query_one("#input-price", Input)
        input_stock = self.query_one("#input-stock", Input)
        category = self.query_one("#select-category", Select).value

        try:
            product = self.engine.add_product(
                input_name.value, category, input_price.value, input_stock.value
            )
        except EngineError as e:
            self.report_error(e)
            return

        for widget in (input_name, input_price, input_stock):
            widget.value = ""
        input_name.focus()
        self.notify(f"Added {product.name}.")
