# per-session staging area for a sale
from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from engine.models import CartLine, Product
from engine.parse import to_int

ProductLookup = Callable[[int], Optional[Product]]


class Cart:
    """
    Line items waiting to be checked out.

    Quantities are capped at the live stock of each product, read through
    the injected ``lookup``. Nothing here touches stock; only a checkout
    through the engine does.
    """

    def __init__(self, lookup: ProductLookup):
        self._lookup = lookup
        self._lines: List[CartLine] = []

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def quantity_of(self, product_id) -> int:
        line = self._line_for(product_id)
        return line.quantity if line else 0

    def add_line(self, product: Product) -> Optional[CartLine]:
        """
        Stage one more unit of ``product``.

        Out-of-stock products are ignored and an existing line stops growing
        once it reaches the product's stock. Returns the line, or None if
        the product could not be added at all.
        """
        live = self._lookup(product.id) or product
        if live.stock <= 0:
            return None

        existing = self._line_for(live.id)
        if existing is None:
            line = CartLine(
                product_id=live.id,
                name=live.name,
                unit_price=live.price,
                quantity=1,
            )
            self._lines.append(line)
            return line

        if existing.quantity >= live.stock:
            return existing
        line = replace(existing, quantity=existing.quantity + 1)
        self._put(line)
        return line

    def set_line_quantity(self, product_id, qty) -> Optional[CartLine]:
        """
        Set a staged line's quantity. Zero or less removes the line, as does
        a product that has since sold out or left the catalog; anything above
        the product's current stock is clamped to it.
        """
        value = to_int(qty)
        if value is None:
            return None
        existing = self._line_for(product_id)
        if existing is None:
            return None
        if value <= 0:
            self.remove_line(product_id)
            return None

        product = self._lookup(product_id)
        if product is None or product.stock <= 0:
            self.remove_line(product_id)
            return None
        line = replace(existing, quantity=min(value, product.stock))
        self._put(line)
        return line

    def remove_line(self, product_id) -> None:
        self._lines = [l for l in self._lines if l.product_id != product_id]

    def clear(self) -> None:
        self._lines = []

    def total(self) -> float:
        # summed unrounded, rounded once on read
        return round(sum(l.quantity * l.unit_price for l in self._lines), 2)

    def _line_for(self, product_id) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def _put(self, line: CartLine) -> None:
        self._lines = [
            line if l.product_id == line.product_id else l for l in self._lines
        ]
