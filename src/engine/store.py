"""
The store's state owner.

``StoreEngine`` holds the catalog, supplier registry, sales ledger and
purchase orders, and is the only way to change them. After every
committed change it calls its subscribers with the name of the event,
which is how the app knows to persist a fresh snapshot.

Checkout and purchase-order receipt touch more than one collection.
Both validate everything first and only then apply their changes, with
no await or callback in between, so a snapshot never shows one half of
either transaction.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from engine import ids, reporting
from engine.cart import Cart
from engine.catalog import Catalog
from engine.errors import StockConflictError, ValidationError
from engine.ledger import SalesLedger
from engine.models import Order, OrderItem, Product, PurchaseOrder, Supplier
from engine.procurement import ProcurementEngine
from engine.snapshot import dump_state, load_state
from engine.suppliers import SupplierRegistry
from utils.logger import get_logger

_logger = get_logger(__name__)

Listener = Callable[[str], None]

EVENT_PRODUCT_ADDED = "product-added"
EVENT_STOCK_ADJUSTED = "stock-adjusted"
EVENT_SUPPLIER_ADDED = "supplier-added"
EVENT_CHECKOUT = "checkout"
EVENT_PO_CREATED = "purchase-order-created"
EVENT_PO_RECEIVED = "purchase-order-received"
EVENT_REORDERS_SUGGESTED = "reorders-suggested"


class StoreEngine:
    def __init__(
        self,
        products: Sequence[Product] = (),
        orders: Sequence[Order] = (),
        suppliers: Sequence[Supplier] = (),
        purchase_orders: Sequence[PurchaseOrder] = (),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._clock = clock
        self._catalog = Catalog(products)
        self._suppliers = SupplierRegistry(suppliers)
        self._ledger = SalesLedger(orders)
        self._procurement = ProcurementEngine(
            self._catalog, self._suppliers, purchase_orders, clock=clock
        )
        self._listeners: List[Listener] = []

    @classmethod
    def from_snapshot(
        cls,
        data: Optional[Dict[str, Any]],
        clock: Callable[[], datetime] = datetime.now,
    ) -> "StoreEngine":
        """Rehydrate from a snapshot record, falling back to seed data."""
        state = load_state(data)
        return cls(
            state.products,
            state.orders,
            state.suppliers,
            state.purchase_orders,
            clock=clock,
        )

    @classmethod
    def seeded(cls, clock: Callable[[], datetime] = datetime.now) -> "StoreEngine":
        return cls.from_snapshot(None, clock=clock)

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        return dump_state(
            self.products, self.orders, self.suppliers, self.purchase_orders
        )

    # ---------------------------
    # Notifications
    # ---------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(event)`` after each committed change. Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: str) -> None:
        _logger.debug(f"State changed: {event}")
        for listener in list(self._listeners):
            listener(event)

    # ---------------------------
    # Read access
    # ---------------------------

    @property
    def today(self) -> date:
        return self._clock().date()

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._catalog.products

    @property
    def orders(self) -> Tuple[Order, ...]:
        return self._ledger.orders

    @property
    def suppliers(self) -> Tuple[Supplier, ...]:
        return self._suppliers.suppliers

    @property
    def purchase_orders(self) -> Tuple[PurchaseOrder, ...]:
        return self._procurement.purchase_orders

    def find_product(self, product_id) -> Optional[Product]:
        return self._catalog.find(product_id)

    def find_supplier(self, supplier_id) -> Optional[Supplier]:
        return self._suppliers.find(supplier_id)

    def find_order(self, order_id: str) -> Optional[Order]:
        return self._ledger.find(order_id)

    def find_purchase_order(self, purchase_order_id: str) -> Optional[PurchaseOrder]:
        return self._procurement.find(purchase_order_id)

    def category_of(self, product_id) -> Optional[str]:
        product = self._catalog.find(product_id)
        return product.category if product else None

    def product_name(self, product_id) -> str:
        product = self._catalog.find(product_id)
        return product.name if product else str(product_id)

    def supplier_name(self, supplier_id) -> str:
        supplier = self._suppliers.find(supplier_id)
        return supplier.name if supplier else str(supplier_id)

    def categories(self) -> List[str]:
        return self._catalog.categories()

    def filter_products(self, search: str = "", category: str = "All") -> List[Product]:
        return self._catalog.filter(search, category)

    def pending_purchase_orders(self) -> List[PurchaseOrder]:
        return self._procurement.pending()

    # ---------------------------
    # Catalog & suppliers
    # ---------------------------

    def add_product(self, name: str, category: str, price, stock) -> Product:
        product = self._catalog.add_product(name, category, price, stock)
        self._emit(EVENT_PRODUCT_ADDED)
        return product

    def adjust_stock(self, product_id, delta) -> Optional[Product]:
        product = self._catalog.adjust_stock(product_id, delta)
        if product is not None:
            self._emit(EVENT_STOCK_ADJUSTED)
        return product

    def add_supplier(
        self, name: str, contact: str = "", email: str = "", phone: str = ""
    ) -> Supplier:
        supplier = self._suppliers.add_supplier(name, contact, email, phone)
        self._emit(EVENT_SUPPLIER_ADDED)
        return supplier

    # ---------------------------
    # Sales
    # ---------------------------

    def new_cart(self) -> Cart:
        return Cart(self._catalog.find)

    def checkout(self, cart: Cart, cashier: str = "system") -> Order:
        """
        Turn the cart into an order, taking its quantities out of stock.

        Every line is checked against live stock first. If any line asks for
        more than is available (or its product is gone) StockConflictError is
        raised and neither stock, ledger nor cart change.
        """
        if cart.is_empty:
            raise ValidationError("Cart is empty.")

        requested: Dict[int, int] = {}
        for line in cart.lines:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        short = []
        for product_id, qty in requested.items():
            product = self._catalog.find(product_id)
            if product is None or qty > product.stock:
                short.append(product_id)
        if short:
            _logger.warning(f"Checkout rejected, not enough stock for {short}")
            raise StockConflictError(
                "Not enough stock for: "
                + ", ".join(self.product_name(pid) for pid in short),
                short,
            )

        order = Order(
            id=ids.new_order_id({o.id for o in self._ledger.orders}),
            timestamp=self._clock(),
            total=cart.total(),
            cashier=cashier or "system",
            items=tuple(
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
                for line in cart.lines
            ),
        )

        # a duplicate order id is refused before any stock moves
        self._ledger.record(order)
        self._catalog.commit_stock({pid: -qty for pid, qty in requested.items()})
        cart.clear()
        _logger.info(
            f"Checkout {order.id} by {order.cashier}: {order.quantity} unit(s), ${order.total:.2f}"
        )
        self._emit(EVENT_CHECKOUT)
        return order

    # ---------------------------
    # Procurement
    # ---------------------------

    def create_purchase_order(
        self, supplier_id, product_id, quantity, unit_cost, created_by: str = "system"
    ) -> PurchaseOrder:
        po = self._procurement.create_manual(
            supplier_id, product_id, quantity, unit_cost, created_by
        )
        self._emit(EVENT_PO_CREATED)
        return po

    def receive_purchase_order(self, purchase_order_id: str) -> Optional[PurchaseOrder]:
        po = self._procurement.receive(purchase_order_id)
        if po is not None:
            self._emit(EVENT_PO_RECEIVED)
        return po

    def suggest_reorders(self, created_by: str = "system") -> Tuple[PurchaseOrder, ...]:
        suggestions = self._procurement.suggest_reorders(created_by)
        if suggestions:
            self._emit(EVENT_REORDERS_SUGGESTED)
        return suggestions

    # ---------------------------
    # Reports
    # ---------------------------

    def inventory_valuation(self) -> float:
        return reporting.inventory_valuation(self.products)

    def low_stock(self) -> List[Product]:
        return reporting.low_stock(self.products)

    def daily_sales(self, day: Optional[date] = None) -> float:
        return reporting.daily_sales(self.orders, day or self.today)

    def seven_day_trend(self) -> List[reporting.TrendPoint]:
        return reporting.seven_day_trend(self.orders, self.today)

    def sales_by_category(self) -> List[reporting.CategorySales]:
        return reporting.sales_by_category(self.orders, self.category_of)

    def top_products(self, limit: int = 8) -> List[reporting.ProductSales]:
        return reporting.top_products(self.orders, limit)

    def dashboard(self) -> reporting.DashboardSummary:
        return reporting.dashboard_summary(
            self.products,
            self.orders,
            self.purchase_orders,
            len(self._suppliers),
            self.today,
        )
