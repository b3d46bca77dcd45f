from textual import on
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.events import ScreenResume
from textual.widgets import Markdown

from utils.messages import ModeSwitchedMessage, StateChangedMessage
from utils.pure import bar, markdown_table, money
from views.base_screen import BaseScreen


class DashboardScreen(BaseScreen):
    """
    Headline numbers, the low-stock list and the last seven days of sales.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll():
            yield Markdown(id="md-dashboard")

    def on_mount(self) -> None:
        self.handle_reload()

    @on(StateChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    def handle_reload(self) -> None:
        engine = self.engine
        summary = engine.dashboard()

        metrics = markdown_table(
            ["Metric", "Value"],
            [
                ["Inventory value", money(summary.inventory_value)],
                ["Products", summary.total_products],
                ["Low-stock items", summary.low_stock_items],
                ["Today's sales", money(summary.todays_sales)],
                ["Today's orders", summary.todays_orders],
                ["Suppliers", summary.suppliers],
                ["Pending purchase orders", summary.pending_purchase_orders],
            ],
            ["l", "r"],
        )

        low = markdown_table(
            ["ID", "Product", "Category", "Stock"],
            [[p.id, p.name, p.category, p.stock] for p in engine.low_stock()],
            ["r", "l", "l", "r"],
            empty="_Every product is above the low-stock threshold._",
        )

        trend = engine.seven_day_trend()
        peak = max(point.total for point in trend)
        trend_rows = [
            [point.label, point.day.isoformat(), f"`{bar(point.total, peak)}`", money(point.total)]
            for point in trend
        ]
        trend_md = markdown_table(["Day", "Date", "", "Sales"], trend_rows, ["l", "l", "l", "r"])

        self.query_one("#md-dashboard", Markdown).update(
            "### Store at a glance\n\n"
            + metrics
            + "\n\n### Low stock (10 or fewer)\n\n"
            + low
            + "\n\n### Sales, last 7 days\n\n"
            + trend_md
        )
