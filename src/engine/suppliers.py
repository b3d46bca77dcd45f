# supplier registry
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from engine import ids
from engine.errors import NotFoundError, ValidationError
from engine.models import Supplier
from utils.logger import get_logger

_logger = get_logger(__name__)


class SupplierRegistry:
    def __init__(self, suppliers: Sequence[Supplier] = ()):
        self._suppliers: List[Supplier] = list(suppliers)

    def __len__(self) -> int:
        return len(self._suppliers)

    @property
    def suppliers(self) -> Tuple[Supplier, ...]:
        return tuple(self._suppliers)

    def find(self, supplier_id) -> Optional[Supplier]:
        for supplier in self._suppliers:
            if supplier.id == supplier_id:
                return supplier
        return None

    def get(self, supplier_id) -> Supplier:
        supplier = self.find(supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier {supplier_id} not found.")
        return supplier

    def first(self) -> Optional[Supplier]:
        """The supplier reorder suggestions are assigned to."""
        return self._suppliers[0] if self._suppliers else None

    def add_supplier(
        self, name: str, contact: str = "", email: str = "", phone: str = ""
    ) -> Supplier:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Supplier name is required.")
        supplier = Supplier(
            id=ids.new_supplier_id({s.id for s in self._suppliers}),
            name=name,
            contact=(contact or "").strip(),
            email=(email or "").strip(),
            phone=(phone or "").strip(),
        )
        self._suppliers.insert(0, supplier)
        _logger.info(f"Registered supplier {supplier.id} '{supplier.name}'")
        return supplier
