from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Select

from engine.errors import EngineError
from utils.messages import ModeSwitchedMessage, StateChangedMessage
from utils.pure import money
from views.base_screen import BaseScreen


class SuppliersScreen(BaseScreen):
    """
    Suppliers and purchase orders: register suppliers, raise orders by hand
    or from low-stock suggestions, and receive deliveries into stock.
    """

    selected_po_id: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll():
            yield Label("Suppliers", classes="section-title")
            yield DataTable(id="table-suppliers")
            with Horizontal(id="hort-add-supplier"):
                yield Input(placeholder="Supplier name", id="input-sup-name")
                yield Input(placeholder="Contact", id="input-sup-contact")
                yield Input(placeholder="Email", id="input-sup-email")
                yield Input(placeholder="Phone", id="input-sup-phone")
                yield Button("Add Supplier", id="btn-add-supplier", variant="success")

            yield Label("Purchase Orders", classes="section-title", id="label-pos")
            with Horizontal(id="hort-po-form"):
                yield Select([], prompt="Supplier", id="select-po-supplier")
                yield Select([], prompt="Product", id="select-po-product")
                yield Input(placeholder="Qty", id="input-po-qty", type="integer")
                yield Input(placeholder="Unit cost", id="input-po-cost", type="number")
                yield Button("Create PO", id="btn-create-po", variant="primary")
            yield DataTable(id="table-pos")
            with Horizontal(id="hort-po-actions"):
                yield Button("Suggest Reorders", id="btn-suggest")
                yield Button("Receive Selected", id="btn-receive", variant="success")

    def on_mount(self) -> None:
        for table in self.query(DataTable):
            table.cursor_type = "row"
            table.zebra_stripes = True
        self.handle_reload()

    @on(StateChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    def handle_reload(self) -> None:
        engine = self.engine

        suppliers = self.query_one("#table-suppliers", DataTable)
        if not suppliers.columns:
            suppliers.add_columns("ID", "Name", "Contact", "Email", "Phone")
        suppliers.clear()
        for s in engine.suppliers:
            suppliers.add_row(s.id, s.name, s.contact, s.email, s.phone, key=s.id)

        pos = self.query_one("#table-pos", DataTable)
        if not pos.columns:
            pos.add_columns(
                "PO", "Supplier", "Product", "Qty", "Unit Cost", "Total", "Status", "Source", "Created"
            )
        pending = len(engine.pending_purchase_orders())
        self.query_one("#label-pos", Label).update(f"Purchase Orders ({pending} pending)")
        pos.clear()
        for po in engine.purchase_orders:
            pos.add_row(
                po.id,
                engine.supplier_name(po.supplier_id),
                engine.product_name(po.product_id),
                po.quantity,
                money(po.unit_cost),
                money(po.total_cost),
                po.status,
                po.source,
                po.created_at.strftime("%Y-%m-%d %H:%M"),
                key=po.id,
            )

        self._refill_select(
            "#select-po-supplier", [(s.name, s.id) for s in engine.suppliers]
        )
        self._refill_select(
            "#select-po-product",
            [(f"{p.name} ({p.stock} in stock)", p.id) for p in engine.products],
        )

    def _refill_select(self, selector: str, options) -> None:
        select = self.query_one(selector, Select)
        current = select.value
        select.set_options(options)
        if any(value == current for _, value in options):
            select.value = current

    @on(DataTable.RowHighlighted, "#table-pos")
    def handle_po_highlight(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is not None:
            self.selected_po_id = event.row_key.value

    def _allowed(self) -> bool:
        if not self.app.state.can_manage_suppliers:
            self.notify("Your role cannot manage suppliers.", severity="error")
            return False
        return True

    @on(Button.Pressed, "#btn-add-supplier")
    def handle_add_supplier(self) -> None:
        if not self._allowed():
            return
        inputs = [
            self.query_one(f"#input-sup-{field}", Input)
            for field in ("name", "contact", "email", "phone")
        ]
        try:
            supplier = self.engine.add_supplier(*(i.value for i in inputs))
        except EngineError as e:
            self.report_error(e)
            return
        for i in inputs:
            i.value = ""
        self.notify(f"Added supplier {supplier.name}.")

    @on(Button.Pressed, "#btn-create-po")
    def handle_create_po(self) -> None:
        if not self._allowed():
            return
        supplier_id = self.query_one("#select-po-supplier", Select).value
        product_id = self.query_one("#select-po-product", Select).value
        input_qty = self.query_one("#input-po-qty", Input)
        input_cost = self.query_one("#input-po-cost", Input)

        try:
            po = self.engine.create_purchase_order(
                None if supplier_id is Select.BLANK else supplier_id,
                None if product_id is Select.BLANK else product_id,
                input_qty.value,
                input_cost.value,
                created_by=self.app.state.username,
            )
        except EngineError as e:
            self.report_error(e)
            return
        input_qty.value = ""
        input_cost.value = ""
        self.notify(f"Created {po.id}.")

    @on(Button.Pressed, "#btn-suggest")
    def handle_suggest(self) -> None:
        if not self._allowed():
            return
        if not self.engine.suppliers:
            self.notify("Register a supplier first.", severity="warning")
            return
        suggestions = self.engine.suggest_reorders(created_by=self.app.state.username)
        if suggestions:
            self.notify(f"Drafted {len(suggestions)} purchase order(s).")
        else:
            self.notify("Every low-stock product already has a pending order.")

    @on(Button.Pressed, "#btn-receive")
    def handle_receive(self) -> None:
        if not self._allowed():
            return
        if self.selected_po_id is None:
            self.notify("Select a purchase order first.", severity="warning")
            return
        current = self.engine.find_purchase_order(self.selected_po_id)
        if current is not None and not current.is_pending:
            self.notify(f"{current.id} was already received.", severity="warning")
            return
        try:
            po = self.engine.receive_purchase_order(self.selected_po_id)
        except EngineError as e:
            self.report_error(e)
            return
        if po is None:
            self.notify("That purchase order no longer exists.", severity="warning")
        else:
            self.notify(
                f"Received {po.id}: +{po.quantity} {self.engine.product_name(po.product_id)}."
            )
