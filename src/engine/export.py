# delimited-text exports of the catalog, the ledger and purchase orders
from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, List, Sequence

from engine.models import Order, Product, PurchaseOrder
from utils.logger import get_logger

if TYPE_CHECKING:
    from engine.store import StoreEngine

_logger = get_logger(__name__)

INVENTORY_HEADER = ["id", "name", "category", "price", "stock", "stock_value"]
ORDERS_HEADER = [
    "order_id",
    "date",
    "cashier",
    "product",
    "quantity",
    "unit_price",
    "line_total",
    "order_total",
]
PURCHASE_ORDERS_HEADER = [
    "po_id",
    "supplier",
    "product",
    "quantity",
    "unit_cost",
    "total_cost",
    "status",
    "source",
    "created_at",
    "received_at",
    "created_by",
]

EXPORT_FILES = {
    "inventory": "inventory.csv",
    "orders": "orders.csv",
    "purchase_orders": "purchase-orders.csv",
}


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_csv(header: Sequence[str], rows: Iterable[Sequence]) -> str:
    """
    Render a header and rows as CSV text. Fields holding a comma, quote or
    line break are quoted with inner quotes doubled; lines end with '\\n'.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return buf.getvalue()


def inventory_csv(products: Iterable[Product]) -> str:
    rows = [
        [p.id, p.name, p.category, p.price, p.stock, p.stock_value] for p in products
    ]
    return to_csv(INVENTORY_HEADER, rows)


def orders_csv(orders: Iterable[Order]) -> str:
    """One row per order line, with the order's fields repeated."""
    rows = [
        [
            o.id,
            o.timestamp.isoformat(),
            o.cashier,
            item.name,
            item.quantity,
            item.unit_price,
            round(item.line_total, 2),
            o.total,
        ]
        for o in orders
        for item in o.items
    ]
    return to_csv(ORDERS_HEADER, rows)


def purchase_orders_csv(
    purchase_orders: Iterable[PurchaseOrder],
    supplier_name_of: Callable[[str], str],
    product_name_of: Callable[[int], str],
) -> str:
    rows = [
        [
            po.id,
            supplier_name_of(po.supplier_id),
            product_name_of(po.product_id),
            po.quantity,
            po.unit_cost,
            po.total_cost,
            po.status,
            po.source,
            po.created_at.isoformat(),
            po.received_at.isoformat() if po.received_at else None,
            po.created_by,
        ]
        for po in purchase_orders
    ]
    return to_csv(PURCHASE_ORDERS_HEADER, rows)


def write_exports(engine: "StoreEngine", directory: Path) -> List[Path]:
    """Write all three exports into ``directory``, returning the file paths."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    contents = {
        "inventory": inventory_csv(engine.products),
        "orders": orders_csv(engine.orders),
        "purchase_orders": purchase_orders_csv(
            engine.purchase_orders, engine.supplier_name, engine.product_name
        ),
    }
    written = []
    for key, text in contents.items():
        path = directory / EXPORT_FILES[key]
        path.write_text(text, encoding="utf-8")
        written.append(path)
    _logger.info(f"Exported {len(written)} file(s) to {directory}")
    return written
