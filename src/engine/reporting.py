# read-side rollups, recomputed from snapshots on every call
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from engine.models import LOW_STOCK_THRESHOLD, Order, Product, PurchaseOrder

CategoryLookup = Callable[[int], Optional[str]]

UNKNOWN_CATEGORY = "Unknown"


@dataclass(frozen=True)
class TrendPoint:
    day: date
    label: str  # short weekday name, e.g. "Mon"
    total: float


@dataclass(frozen=True)
class CategorySales:
    category: str
    total: float


@dataclass(frozen=True)
class ProductSales:
    product_id: int
    name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class DashboardSummary:
    inventory_value: float
    low_stock_items: int
    total_products: int
    todays_sales: float
    todays_orders: int
    suppliers: int
    pending_purchase_orders: int


def inventory_valuation(products: Iterable[Product]) -> float:
    return round(sum(p.price * p.stock for p in products), 2)


def low_stock(products: Iterable[Product]) -> List[Product]:
    """Products at or below the low-stock threshold, in catalog order."""
    return [p for p in products if p.stock <= LOW_STOCK_THRESHOLD]


def daily_sales(orders: Iterable[Order], day: date) -> float:
    """Sum of order totals on a local calendar day."""
    return round(sum(o.total for o in orders if o.timestamp.date() == day), 2)


def seven_day_trend(orders: Sequence[Order], today: date) -> List[TrendPoint]:
    """Daily totals for the 7 calendar days ending ``today``, oldest first."""
    points = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        points.append(
            TrendPoint(day=day, label=day.strftime("%a"), total=daily_sales(orders, day))
        )
    return points


def sales_by_category(
    orders: Iterable[Order], category_of: CategoryLookup
) -> List[CategorySales]:
    """
    Revenue per category, largest first.

    Lines are attributed through ``category_of``, i.e. the product's
    current category. Recategorising a product moves its past sales too.
    Lines for products no longer in the catalog land in "Unknown".
    """
    totals: Dict[str, float] = {}
    for order in orders:
        for item in order.items:
            category = category_of(item.product_id) or UNKNOWN_CATEGORY
            totals[category] = totals.get(category, 0.0) + item.line_total

    rows = [CategorySales(c, round(t, 2)) for c, t in totals.items()]
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows


def top_products(orders: Iterable[Order], limit: int = 8) -> List[ProductSales]:
    """
    Best sellers by units sold. Each product keeps the name from its first
    line seen; ties keep first-seen order.
    """
    if limit < 1:
        return []

    names: Dict[int, str] = {}
    quantities: Dict[int, int] = {}
    revenue: Dict[int, float] = {}
    for order in orders:
        for item in order.items:
            pid = item.product_id
            names.setdefault(pid, item.name)
            quantities[pid] = quantities.get(pid, 0) + item.quantity
            revenue[pid] = revenue.get(pid, 0.0) + item.line_total

    rows = [
        ProductSales(pid, names[pid], quantities[pid], round(revenue[pid], 2))
        for pid in names
    ]
    rows.sort(key=lambda r: r.quantity, reverse=True)
    return rows[:limit]


def dashboard_summary(
    products: Sequence[Product],
    orders: Sequence[Order],
    purchase_orders: Sequence[PurchaseOrder],
    supplier_count: int,
    today: date,
) -> DashboardSummary:
    todays = [o for o in orders if o.timestamp.date() == today]
    return DashboardSummary(
        inventory_value=inventory_valuation(products),
        low_stock_items=len(low_stock(products)),
        total_products=len(products),
        todays_sales=round(sum(o.total for o in todays), 2),
        todays_orders=len(todays),
        suppliers=supplier_count,
        pending_purchase_orders=sum(1 for po in purchase_orders if po.is_pending),
    )
