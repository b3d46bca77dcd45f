# product catalog: owns products and their stock levels
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from engine import ids
from engine.errors import NotFoundError, ValidationError
from engine.models import Product
from engine.parse import to_float, to_int
from utils.logger import get_logger

_logger = get_logger(__name__)


class Catalog:
    """
    Ordered set of products, most recently added first.

    Products are frozen; every stock change swaps in a replacement
    built with ``dataclasses.replace``.
    """

    def __init__(self, products: Sequence[Product] = ()):
        self._products: List[Product] = list(products)

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(tuple(self._products))

    @property
    def products(self) -> Tuple[Product, ...]:
        return tuple(self._products)

    def find(self, product_id) -> Optional[Product]:
        """Return the product with the given id, or None."""
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def get(self, product_id) -> Product:
        product = self.find(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found.")
        return product

    def add_product(self, name: str, category: str, price, stock) -> Product:
        """
        Create a product with a fresh id and put it at the front of the catalog.

        Raises ValidationError if the name is blank, the price is not a
        positive number, or the stock is not a whole number >= 0.
        """
        name = (name or "").strip()
        price_val = to_float(price)
        stock_val = to_int(stock)

        if not name:
            raise ValidationError("Product name is required.")
        if price_val is None or price_val <= 0:
            raise ValidationError("Price must be a number greater than 0.")
        if stock_val is None or stock_val < 0:
            raise ValidationError("Stock must be a whole number of at least 0.")

        product = Product(
            id=ids.new_product_id({p.id for p in self._products}),
            name=name,
            category=(category or "").strip() or "Uncategorized",
            price=price_val,
            stock=stock_val,
        )
        self._products.insert(0, product)
        _logger.info(f"Added product {product.id} '{product.name}'")
        return product

    def adjust_stock(self, product_id, delta) -> Optional[Product]:
        """
        Add ``delta`` to a product's stock, clamping at zero.

        Zero, non-numeric and non-whole deltas are ignored, as are unknown
        ids. Returns the updated product, or None when nothing changed.
        """
        amount = to_int(delta)
        if not amount:
            _logger.debug(f"Ignoring stock adjustment {delta!r} for {product_id}")
            return None
        product = self.find(product_id)
        if product is None:
            _logger.debug(f"Stock adjustment for unknown product {product_id}")
            return None

        updated = replace(product, stock=max(0, product.stock + amount))
        self._swap(updated)
        return updated

    def commit_stock(self, deltas: Mapping[int, int]) -> List[Product]:
        """
        Apply several stock changes as one unit.

        Every resulting stock level is checked before any product is
        replaced; a change that would go below zero raises ValidationError
        and leaves the catalog untouched.
        """
        updated: Dict[int, Product] = {}
        for product_id, delta in deltas.items():
            product = self.get(product_id)
            new_stock = product.stock + delta
            if new_stock < 0:
                raise ValidationError(
                    f"Stock for {product.name} cannot drop below zero."
                )
            updated[product_id] = replace(product, stock=new_stock)

        self._products = [updated.get(p.id, p) for p in self._products]
        return list(updated.values())

    def categories(self) -> List[str]:
        """'All' followed by every category in catalog order, without repeats."""
        seen: List[str] = []
        for product in self._products:
            if product.category not in seen:
                seen.append(product.category)
        return ["All", *seen]

    def filter(self, search: str = "", category: str = "All") -> List[Product]:
        """Case-insensitive name search combined with a category filter."""
        needle = (search or "").strip().lower()
        return [
            p
            for p in self._products
            if needle in p.name.lower() and (category == "All" or p.category == category)
        ]

    def _swap(self, product: Product) -> None:
        self._products = [product if p.id == product.id else p for p in self._products]
