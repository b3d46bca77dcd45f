from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import DataTable, Markdown

from engine.models import Order
from utils.messages import ModeSwitchedMessage, StateChangedMessage
from utils.pure import markdown_table, money
from views.base_screen import BaseScreen


class OrdersScreen(BaseScreen):
    """
    Sales ledger, newest first, with the highlighted order's lines on top.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Markdown(id="md-order-detail")
            yield DataTable(id="table-orders")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        self.handle_reload()

    @on(StateChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    def handle_reload(self) -> None:
        table = self.query_one(DataTable)
        if not table.columns:
            table.add_columns("Order", "Date", "Cashier", "Units", "Total")
        table.clear()
        orders = self.engine.orders
        for o in orders:
            table.add_row(
                o.id,
                o.timestamp.strftime("%Y-%m-%d %H:%M"),
                o.cashier,
                o.quantity,
                money(o.total),
                key=o.id,
            )
        self._render_detail(orders[0] if orders else None)

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is not None and event.row_key.value is not None:
            self._render_detail(self.engine.find_order(event.row_key.value))

    def _render_detail(self, order: Optional[Order]) -> None:
        md = self.query_one("#md-order-detail", Markdown)
        if order is None:
            md.update("### No orders yet.")
            return

        lines = markdown_table(
            ["Product", "Qty", "Unit Price", "Line Total"],
            [
                [item.name, item.quantity, money(item.unit_price), money(item.line_total)]
                for item in order.items
            ],
            ["l", "r", "r", "r"],
        )
        md.update(
            f"### Order {order.id}\n"
            f"{order.timestamp:%Y-%m-%d %H:%M:%S}, cashier **{order.cashier}**\n\n"
            + lines
            + f"\n\n**Total:** {money(order.total)}"
        )
