import os
import tempfile
import unittest

from store_fixtures import S1, FixedClock, make_engine, make_product

from db import crud
from db import database as db_database
from engine.store import StoreEngine
from utils.state import GlobalState, authenticate


class AuthenticateTestCase(unittest.TestCase):
    def test_demo_users(self):
        cases = [
            ("owner", "owner123", "admin"),
            ("  Cashier ", "cashier123", "cashier"),
            ("STOCK", "stock123", "inventory"),
        ]
        for username, password, role in cases:
            with self.subTest(username=username):
                user = authenticate(username, password)
                self.assertEqual(user["role"], role)
                self.assertNotIn("password", user)

    def test_rejects_bad_credentials(self):
        for username, password in [("owner", "nope"), ("ghost", "owner123"), ("", ""), (None, None)]:
            with self.subTest(username=username):
                self.assertIsNone(authenticate(username, password))


class GlobalStateTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        db_database.DB_PATH = os.path.join(self.temp_dir.name, "state.sqlite")
        db_database._initialized = False
        self.engine = make_engine([make_product(1, 2.0, 5)], suppliers=[S1])
        self.state = GlobalState(self.engine)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_permissions_follow_role(self):
        expected = {
            "admin": (True, True, True),
            "cashier": (False, True, False),
            "inventory": (True, False, True),
        }
        for role, (inventory, checkout, suppliers) in expected.items():
            with self.subTest(role=role):
                self.state.role = role
                self.assertEqual(self.state.can_manage_inventory, inventory)
                self.assertEqual(self.state.can_checkout, checkout)
                self.assertEqual(self.state.can_manage_suppliers, suppliers)

    async def test_login_remembers_session(self):
        self.assertFalse(self.state.signed_in)
        self.assertFalse(await self.state.login("owner", "wrong"))
        self.assertIsNone(await crud.load_session())

        self.assertTrue(await self.state.login("owner", "owner123"))
        self.assertEqual(
            (self.state.username, self.state.name, self.state.role_label),
            ("owner", "Store Owner", "Admin"),
        )

        other = GlobalState(self.engine)
        self.assertTrue(await other.restore())
        self.assertEqual((other.username, other.role), ("owner", "admin"))

    async def test_logout_clears_cart_and_session(self):
        await self.state.login("cashier", "cashier123")
        self.state.cart.add_line(self.engine.find_product(1))
        await self.state.logout()

        self.assertFalse(self.state.signed_in)
        self.assertTrue(self.state.cart.is_empty)
        self.assertIsNone(await crud.load_session())
        self.assertFalse(await GlobalState(self.engine).restore())

    async def test_restore_rejects_unknown_role(self):
        await crud.save_session({"username": "mallory", "role": "root"})
        self.assertFalse(await self.state.restore())
        self.assertFalse(self.state.signed_in)

    def test_rebind_swaps_engine_and_cart(self):
        self.state.cart.add_line(self.engine.find_product(1))
        fresh = StoreEngine.seeded(clock=FixedClock())
        self.state.rebind(fresh)
        self.assertIs(self.state.engine, fresh)
        self.assertTrue(self.state.cart.is_empty)
        self.state.cart.add_line(fresh.find_product(1))
        self.assertEqual(self.state.cart.lines[0].name, "Bananas (1 lb)")
