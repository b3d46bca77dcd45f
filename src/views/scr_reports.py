import os
from pathlib import Path

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.events import ScreenResume
from textual.widgets import Button, Markdown

from engine import export
from utils.messages import ModeSwitchedMessage, StateChangedMessage
from utils.pure import markdown_table, money
from views.base_screen import BaseScreen

EXPORT_DIR = os.getenv("STORE_EXPORT_DIR", "exports")


class ReportsScreen(BaseScreen):
    """
    Sales by category, best sellers, and CSV exports of the store data.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll():
            yield Markdown(id="md-reports")
        with Horizontal(id="hort-export"):
            yield Button("Export CSV files", id="btn-export", variant="primary")

    def on_mount(self) -> None:
        self.handle_reload()

    @on(StateChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    def handle_reload(self) -> None:
        engine = self.engine

        by_category = markdown_table(
            ["Category", "Revenue"],
            [[row.category, money(row.total)] for row in engine.sales_by_category()],
            ["l", "r"],
            empty="_No sales yet._",
        )
        top = markdown_table(
            ["#", "Product", "Units", "Revenue"],
            [
                [rank, row.name, row.quantity, money(row.revenue)]
                for rank, row in enumerate(engine.top_products(), start=1)
            ],
            ["r", "l", "r", "r"],
            empty="_No sales yet._",
        )

        self.query_one("#md-reports", Markdown).update(
            "### Sales by category\n\n"
            "_Past sales follow each product's current category._\n\n"
            + by_category
            + "\n\n### Top products\n\n"
            + top
            + f"\n\nExports are written to `{Path(EXPORT_DIR).resolve()}`."
        )

    @on(Button.Pressed, "#btn-export")
    def handle_export(self) -> None:
        try:
            written = export.write_exports(self.engine, Path(EXPORT_DIR))
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify("Exported " + ", ".join(p.name for p in written))
