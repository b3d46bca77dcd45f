from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional

import db.crud as crud
from engine.cart import Cart
from engine.store import StoreEngine

Role = Literal["admin", "cashier", "inventory"]

DEMO_USERS = (
    {"username": "owner", "password": "owner123", "name": "Store Owner", "role": "admin"},
    {"username": "cashier", "password": "cashier123", "name": "Front Cashier", "role": "cashier"},
    {"username": "stock", "password": "stock123", "name": "Inventory Staff", "role": "inventory"},
)

ROLE_LABELS = {"admin": "Admin", "cashier": "Cashier", "inventory": "Inventory"}


def authenticate(username: str, password: str) -> Optional[Dict[str, str]]:
    """Match against the fixed credential list; returns the user without password."""
    username = (username or "").strip().lower()
    for user in DEMO_USERS:
        if user["username"] == username and user["password"] == password:
            return {k: v for k, v in user.items() if k != "password"}
    return None


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - engine: the store's state owner
      - username / name / role: signed-in user, None when signed out
      - cart: the session's checkout staging area
    """

    engine: StoreEngine
    username: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    cart: Optional[Cart] = field(default=None)

    def __post_init__(self):
        if self.cart is None:
            self.cart = self.engine.new_cart()

    @property
    def signed_in(self) -> bool:
        return self.username is not None

    @property
    def role_label(self) -> str:
        return ROLE_LABELS.get(self.role, "Inventory")

    @property
    def can_manage_inventory(self) -> bool:
        return self.role in ("admin", "inventory")

    @property
    def can_checkout(self) -> bool:
        return self.role in ("admin", "cashier")

    @property
    def can_manage_suppliers(self) -> bool:
        return self.role in ("admin", "inventory")

    def _apply(self, user: Dict[str, str]) -> None:
        self.username = user["username"]
        self.name = user.get("name") or user["username"]
        self.role = user["role"]

    async def login(self, username: str, password: str) -> bool:
        """Sign in against the demo users and remember the session."""
        user = authenticate(username, password)
        if user is None:
            return False
        self._apply(user)
        await crud.save_session(user)
        return True

    async def restore(self) -> bool:
        """Resume the remembered session, if any."""
        user = await crud.load_session()
        if user is None or user.get("role") not in ROLE_LABELS:
            return False
        self._apply(user)
        return True

    async def logout(self) -> None:
        """Sign out and drop anything left in the cart."""
        self.username = None
        self.name = None
        self.role = None
        self.cart.clear()
        await crud.clear_session()

    def rebind(self, engine: StoreEngine) -> None:
        """Point at a freshly loaded engine; the old cart is discarded."""
        self.engine = engine
        self.cart = engine.new_cart()
