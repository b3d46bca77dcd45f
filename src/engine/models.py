# dataclass models for the store state
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

LOW_STOCK_THRESHOLD = 10

PO_PENDING = "Pending"
PO_RECEIVED = "Received"

SOURCE_MANUAL = "manual"
SOURCE_AUTO = "auto-suggested"

CATEGORIES = (
    "Produce",
    "Dairy",
    "Bakery",
    "Pantry",
    "Meat",
    "Beverages",
    "Frozen",
)


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    category: str
    price: float
    stock: int

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= LOW_STOCK_THRESHOLD

    @property
    def stock_value(self) -> float:
        return round(self.price * self.stock, 2)


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    contact: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class CartLine:
    product_id: int
    name: str  # snapshot at add time
    unit_price: float  # snapshot at add time
    quantity: int

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class OrderItem:
    product_id: int
    name: str
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Order:
    id: str
    timestamp: datetime
    total: float
    cashier: str
    items: Tuple[OrderItem, ...] = field(default_factory=tuple)

    @property
    def quantity(self) -> int:
        return sum(item.quantity for item in self.items)


@dataclass(frozen=True)
class PurchaseOrder:
    id: str
    supplier_id: str
    product_id: int
    quantity: int
    unit_cost: float
    status: str  # PO_PENDING or PO_RECEIVED
    source: str  # SOURCE_MANUAL or SOURCE_AUTO
    created_at: datetime
    received_at: Optional[datetime] = None
    created_by: str = "system"

    @property
    def is_pending(self) -> bool:
        return self.status == PO_PENDING

    @property
    def total_cost(self) -> float:
        return round(self.quantity * self.unit_cost, 2)
