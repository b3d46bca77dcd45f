# shared helpers for the test suite
import os
import sys
from datetime import datetime, timedelta

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from engine.models import Product, Supplier  # noqa: E402
from engine.store import StoreEngine  # noqa: E402

NOW = datetime(2025, 11, 5, 14, 30, 0)


class FixedClock:
    """Callable clock the tests can move forward by hand."""

    def __init__(self, when: datetime = NOW):
        self.now = when

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_product(pid, price, stock, name=None, category="Pantry") -> Product:
    return Product(
        id=pid, name=name or f"Product {pid}", category=category, price=price, stock=stock
    )


S1 = Supplier(id="SUP-1", name="Acme Wholesale", contact="Jo", email="jo@acme.example", phone="555")
S2 = Supplier(id="SUP-2", name="Backup Foods")


def make_engine(products=(), suppliers=(), orders=(), purchase_orders=(), clock=None):
    return StoreEngine(
        products, orders, suppliers, purchase_orders, clock=clock or FixedClock()
    )
