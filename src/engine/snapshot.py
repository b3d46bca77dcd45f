"""
Conversion between engine state and the persisted snapshot record.

The record is a plain dict with four collections (``products``,
``orders``, ``suppliers``, ``purchaseOrders``) whose entries use
camelCase keys and ISO-8601 timestamps, so it can go straight through
``json``. Loading is forgiving: unusable collections fall back to the
seed data instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engine.models import (
    PO_PENDING,
    PO_RECEIVED,
    SOURCE_AUTO,
    SOURCE_MANUAL,
    Order,
    OrderItem,
    Product,
    PurchaseOrder,
    Supplier,
)
from engine.parse import to_int
from engine.seed import SEED_PRODUCTS, SEED_SUPPLIERS
from utils.logger import get_logger

_logger = get_logger(__name__)

_MALFORMED = (KeyError, TypeError, ValueError, AttributeError)


@dataclass(frozen=True)
class LoadedState:
    products: Tuple[Product, ...]
    orders: Tuple[Order, ...]
    suppliers: Tuple[Supplier, ...]
    purchase_orders: Tuple[PurchaseOrder, ...]


# ---------------------------
# Entity -> record
# ---------------------------


def product_to_dict(p: Product) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "category": p.category,
        "price": p.price,
        "stock": p.stock,
    }


def supplier_to_dict(s: Supplier) -> Dict[str, Any]:
    return {
        "id": s.id,
        "name": s.name,
        "contact": s.contact,
        "email": s.email,
        "phone": s.phone,
    }


def order_to_dict(o: Order) -> Dict[str, Any]:
    return {
        "id": o.id,
        "date": o.timestamp.isoformat(),
        "total": o.total,
        "cashier": o.cashier,
        "items": [
            {
                "productId": i.product_id,
                "name": i.name,
                "unitPrice": i.unit_price,
                "quantity": i.quantity,
            }
            for i in o.items
        ],
    }


def purchase_order_to_dict(po: PurchaseOrder) -> Dict[str, Any]:
    return {
        "id": po.id,
        "supplierId": po.supplier_id,
        "productId": po.product_id,
        "quantity": po.quantity,
        "unitCost": po.unit_cost,
        "status": po.status,
        "source": po.source,
        "createdAt": po.created_at.isoformat(),
        "receivedAt": po.received_at.isoformat() if po.received_at else None,
        "createdBy": po.created_by,
    }


def dump_state(
    products: Sequence[Product],
    orders: Sequence[Order],
    suppliers: Sequence[Supplier],
    purchase_orders: Sequence[PurchaseOrder],
) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "products": [product_to_dict(p) for p in products],
        "orders": [order_to_dict(o) for o in orders],
        "suppliers": [supplier_to_dict(s) for s in suppliers],
        "purchaseOrders": [purchase_order_to_dict(po) for po in purchase_orders],
    }


# ---------------------------
# Record -> entity
# ---------------------------


def _whole(value, field: str, minimum: int) -> int:
    number = to_int(value)
    if number is None or number < minimum:
        raise ValueError(f"{field} must be a whole number >= {minimum}, got {value!r}")
    return number


def _one_of(value, field: str, allowed: Tuple[str, ...]) -> str:
    if value not in allowed:
        raise ValueError(f"{field} must be one of {allowed}, got {value!r}")
    return value


def _local_time(text: str) -> datetime:
    """Parse an ISO-8601 stamp; offset-aware stamps become naive local time."""
    stamp = datetime.fromisoformat(text)
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone().replace(tzinfo=None)
    return stamp


def product_from_dict(d: Dict[str, Any]) -> Product:
    return Product(
        id=_whole(d["id"], "product id", 0),
        name=str(d["name"]),
        category=str(d["category"]),
        price=float(d["price"]),
        stock=_whole(d["stock"], "stock", 0),
    )


def supplier_from_dict(d: Dict[str, Any]) -> Supplier:
    return Supplier(
        id=str(d["id"]),
        name=str(d["name"]),
        contact=str(d.get("contact") or ""),
        email=str(d.get("email") or ""),
        phone=str(d.get("phone") or ""),
    )


def order_from_dict(d: Dict[str, Any]) -> Order:
    return Order(
        id=str(d["id"]),
        timestamp=_local_time(d["date"]),
        total=float(d["total"]),
        cashier=str(d.get("cashier") or "system"),
        items=tuple(
            OrderItem(
                product_id=_whole(i["productId"], "product id", 0),
                name=str(i["name"]),
                unit_price=float(i["unitPrice"]),
                quantity=_whole(i["quantity"], "quantity", 1),
            )
            for i in d["items"]
        ),
    )


def purchase_order_from_dict(d: Dict[str, Any]) -> PurchaseOrder:
    received_at = d.get("receivedAt")
    return PurchaseOrder(
        id=str(d["id"]),
        supplier_id=str(d["supplierId"]),
        product_id=_whole(d["productId"], "product id", 0),
        quantity=_whole(d["quantity"], "quantity", 1),
        unit_cost=float(d["unitCost"]),
        status=_one_of(d["status"], "status", (PO_PENDING, PO_RECEIVED)),
        source=_one_of(d["source"], "source", (SOURCE_MANUAL, SOURCE_AUTO)),
        created_at=_local_time(d["createdAt"]),
        received_at=_local_time(received_at) if received_at else None,
        created_by=str(d.get("createdBy") or "system"),
    )


def _parse_list(data: Dict[str, Any], key: str, parse) -> Optional[list]:
    """Parse ``data[key]`` entry by entry; None if absent or any entry is unusable."""
    entries = data.get(key)
    if not isinstance(entries, list):
        return None
    try:
        return [parse(entry) for entry in entries]
    except _MALFORMED as e:
        _logger.warning(f"Discarding saved {key}: {e!r}")
        return None


def load_state(data: Optional[Dict[str, Any]]) -> LoadedState:
    """
    Rebuild engine collections from a snapshot record.

    Products and orders must both be usable or both are replaced with the
    seed catalog and an empty ledger. Suppliers fall back to the seed
    suppliers and purchase orders to an empty list, each on its own.
    """
    if not isinstance(data, dict):
        if data is not None:
            _logger.warning("Saved state is not a record; using seed data")
        data = {}

    products = _parse_list(data, "products", product_from_dict)
    orders = _parse_list(data, "orders", order_from_dict)
    if products is None or orders is None:
        _logger.info("Starting from the seed catalog")
        products, orders = list(SEED_PRODUCTS), []

    suppliers = _parse_list(data, "suppliers", supplier_from_dict)
    if suppliers is None:
        suppliers = list(SEED_SUPPLIERS)

    purchase_orders = _parse_list(data, "purchaseOrders", purchase_order_from_dict)
    if purchase_orders is None:
        purchase_orders = []

    return LoadedState(
        products=tuple(products),
        orders=tuple(orders),
        suppliers=tuple(suppliers),
        purchase_orders=tuple(purchase_orders),
    )
