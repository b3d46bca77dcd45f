# purchase orders: lifecycle and reorder suggestions
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Set, Tuple

from engine import ids
from engine.catalog import Catalog
from engine.errors import NotFoundError, ValidationError
from engine.models import (
    LOW_STOCK_THRESHOLD,
    PO_PENDING,
    PO_RECEIVED,
    SOURCE_AUTO,
    SOURCE_MANUAL,
    PurchaseOrder,
)
from engine.parse import to_float, to_int
from engine.suppliers import SupplierRegistry
from utils.logger import get_logger

_logger = get_logger(__name__)

REORDER_TARGET = 30
REORDER_MINIMUM = 12
SUGGESTED_COST_RATIO = 0.62


def reorder_quantity(stock: int) -> int:
    """Units to order so stock climbs back to the target level."""
    return max(REORDER_MINIMUM, REORDER_TARGET - stock)


def suggested_unit_cost(price: float) -> float:
    return round(price * SUGGESTED_COST_RATIO, 2)


class ProcurementEngine:
    """
    Owns purchase orders. Each order moves Pending -> Received exactly
    once, and receiving credits the product's stock.
    """

    def __init__(
        self,
        catalog: Catalog,
        suppliers: SupplierRegistry,
        purchase_orders: Sequence[PurchaseOrder] = (),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._catalog = catalog
        self._suppliers = suppliers
        self._orders: List[PurchaseOrder] = list(purchase_orders)
        self._clock = clock

    def __len__(self) -> int:
        return len(self._orders)

    @property
    def purchase_orders(self) -> Tuple[PurchaseOrder, ...]:
        return tuple(self._orders)

    def find(self, purchase_order_id: str) -> Optional[PurchaseOrder]:
        for po in self._orders:
            if po.id == purchase_order_id:
                return po
        return None

    def pending(self) -> List[PurchaseOrder]:
        return [po for po in self._orders if po.is_pending]

    def pending_product_ids(self) -> Set[int]:
        return {po.product_id for po in self._orders if po.is_pending}

    def create_manual(
        self,
        supplier_id,
        product_id,
        quantity,
        unit_cost,
        created_by: str = "system",
    ) -> PurchaseOrder:
        """
        Record a manually entered purchase order as Pending.

        A negative or unparseable unit cost becomes 0. Raises
        ValidationError for a missing supplier/product or a quantity that
        is not a positive whole number, NotFoundError for unknown ids.
        """
        qty = to_int(quantity)
        if not supplier_id or product_id in (None, ""):
            raise ValidationError("Choose a supplier and a product.")
        if qty is None or qty <= 0:
            raise ValidationError("Quantity must be a positive whole number.")

        supplier = self._suppliers.get(supplier_id)
        product = self._catalog.get(to_int(product_id))

        cost = to_float(unit_cost)
        if cost is None or cost < 0:
            cost = 0.0

        po = self._new_order(supplier.id, product.id, qty, cost, SOURCE_MANUAL, created_by)
        self._orders.insert(0, po)
        _logger.info(
            f"Created purchase order {po.id}: {qty} x '{product.name}' from {supplier.name}"
        )
        return po

    def receive(self, purchase_order_id: str) -> Optional[PurchaseOrder]:
        """
        Mark a Pending order Received and add its quantity to stock.

        Unknown or already received orders are left alone (returns None).
        The stock credit is staged before either collection changes, so
        the status flip and the credit land together.
        """
        po = self.find(purchase_order_id)
        if po is None or not po.is_pending:
            _logger.debug(f"Nothing to receive for purchase order {purchase_order_id}")
            return None
        if self._catalog.find(po.product_id) is None:
            raise NotFoundError(
                f"Product {po.product_id} for purchase order {po.id} not found."
            )

        received = replace(po, status=PO_RECEIVED, received_at=self._clock())
        self._catalog.commit_stock({po.product_id: po.quantity})
        self._orders = [received if o.id == po.id else o for o in self._orders]
        _logger.info(f"Received purchase order {po.id} (+{po.quantity} stock)")
        return received

    def suggest_reorders(self, created_by: str = "system") -> Tuple[PurchaseOrder, ...]:
        """
        Draft one Pending order for every low-stock product that has none yet.

        Suggestions go to the first registered supplier, sized to bring stock
        back to the target, at the suggested unit cost. Does nothing when no
        supplier is registered or no product qualifies.
        """
        supplier = self._suppliers.first()
        if supplier is None:
            _logger.debug("No suppliers registered; skipping reorder suggestions")
            return ()

        covered = self.pending_product_ids()
        eligible = [
            p
            for p in self._catalog
            if p.stock <= LOW_STOCK_THRESHOLD and p.id not in covered
        ]
        if not eligible:
            return ()

        suggestions: List[PurchaseOrder] = []
        for product in eligible:
            po = self._new_order(
                supplier.id,
                product.id,
                reorder_quantity(product.stock),
                suggested_unit_cost(product.price),
                SOURCE_AUTO,
                created_by,
                taken={s.id for s in suggestions},
            )
            suggestions.append(po)

        self._orders = suggestions + self._orders
        _logger.info(f"Suggested {len(suggestions)} purchase order(s)")
        return tuple(suggestions)

    def _new_order(
        self,
        supplier_id: str,
        product_id: int,
        quantity: int,
        unit_cost: float,
        source: str,
        created_by: str,
        taken: Set[str] = frozenset(),
    ) -> PurchaseOrder:
        return PurchaseOrder(
            id=ids.new_purchase_order_id({po.id for po in self._orders} | set(taken)),
            supplier_id=supplier_id,
            product_id=product_id,
            quantity=quantity,
            unit_cost=unit_cost,
            status=PO_PENDING,
            source=source,
            created_at=self._clock(),
            received_at=None,
            created_by=created_by or "system",
        )
