# fresh identifiers for new entities
import random
from typing import Container


def _unused(draw, taken: Container) -> object:
    while True:
        candidate = draw()
        if candidate not in taken:
            return candidate


def new_product_id(taken: Container[int]) -> int:
    """Generate a product id that isn't already in the catalog."""
    return _unused(lambda: random.randint(1000, 999999), taken)


def new_order_id(taken: Container[str]) -> str:
    return _unused(lambda: f"ORD-{random.randint(100000, 999999)}", taken)


def new_purchase_order_id(taken: Container[str]) -> str:
    return _unused(lambda: f"PO-{random.randint(100000, 999999)}", taken)


def new_supplier_id(taken: Container[str]) -> str:
    return _unused(lambda: f"SUP-{random.randint(1000, 99999)}", taken)
