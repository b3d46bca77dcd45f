# append-only ledger of completed sales
from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple

from engine.models import Order


class SalesLedger:
    """Completed orders, most recent first. Orders are never edited or removed."""

    def __init__(self, orders: Sequence[Order] = ()):
        self._orders: List[Order] = list(orders)

    def __len__(self) -> int:
        return len(self._orders)

    @property
    def orders(self) -> Tuple[Order, ...]:
        return tuple(self._orders)

    def find(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def record(self, order: Order) -> None:
        if self.find(order.id) is not None:
            raise ValueError(f"Order {order.id} already recorded.")
        self._orders.insert(0, order)

    def orders_on(self, day: date) -> List[Order]:
        """Orders whose timestamp falls on the given local calendar day."""
        return [o for o in self._orders if o.timestamp.date() == day]
