import unittest

from store_fixtures import NOW, S1, S2, FixedClock, make_engine, make_product

from engine.errors import NotFoundError, ValidationError
from engine.models import PO_PENDING, PO_RECEIVED, SOURCE_AUTO, SOURCE_MANUAL, PurchaseOrder
from engine.procurement import reorder_quantity, suggested_unit_cost


class ProcurementTestCase(unittest.TestCase):
    def setUp(self):
        self.clock = FixedClock()
        self.engine = make_engine(
            [
                make_product(1, 10.0, 3, name="B"),
                make_product(2, 0.69, 0, name="Bananas"),
                make_product(3, 5.0, 10, name="Edge"),
                make_product(4, 2.0, 11, name="Plenty"),
            ],
            suppliers=[S1, S2],
            clock=self.clock,
        )
        self.events = []
        self.engine.subscribe(self.events.append)

    # ---------- manual orders ----------

    def test_create_manual_purchase_order(self):
        po = self.engine.create_purchase_order("SUP-2", 4, "24", "1.10", created_by="stock")
        self.assertEqual(self.engine.purchase_orders, (po,))
        self.assertEqual(
            (po.supplier_id, po.product_id, po.quantity, po.unit_cost),
            ("SUP-2", 4, 24, 1.1),
        )
        self.assertEqual((po.status, po.source), (PO_PENDING, SOURCE_MANUAL))
        self.assertEqual((po.created_at, po.received_at, po.created_by), (NOW, None, "stock"))
        self.assertEqual(po.total_cost, 26.4)
        self.assertEqual(self.events, ["purchase-order-created"])

    def test_create_manual_coerces_bad_unit_cost_to_zero(self):
        for cost in ("-3", "n/a", None, -0.5):
            with self.subTest(cost=cost):
                po = self.engine.create_purchase_order("SUP-1", 1, 5, cost)
                self.assertEqual(po.unit_cost, 0.0)

    def test_create_manual_rejects_missing_fields_and_bad_quantity(self):
        bad = [
            ("", 1, 5),
            (None, 1, 5),
            ("SUP-1", None, 5),
            ("SUP-1", "", 5),
            ("SUP-1", 1, 0),
            ("SUP-1", 1, -4),
            ("SUP-1", 1, "some"),
        ]
        for supplier_id, product_id, qty in bad:
            with self.subTest(args=(supplier_id, product_id, qty)):
                with self.assertRaises(ValidationError):
                    self.engine.create_purchase_order(supplier_id, product_id, qty, 1.0)
        self.assertEqual(self.engine.purchase_orders, ())
        self.assertEqual(self.events, [])

    def test_create_manual_rejects_unknown_references(self):
        with self.assertRaises(NotFoundError):
            self.engine.create_purchase_order("SUP-404", 1, 5, 1.0)
        with self.assertRaises(NotFoundError):
            self.engine.create_purchase_order("SUP-1", 404, 5, 1.0)
        self.assertEqual(self.engine.purchase_orders, ())

    def test_product_id_may_arrive_as_text(self):
        po = self.engine.create_purchase_order("SUP-1", "4", 5, 1.0)
        self.assertEqual(po.product_id, 4)

    # ---------- receiving ----------

    def test_receive_credits_stock_once(self):
        po = self.engine.create_purchase_order("SUP-1", 4, 24, 1.0)
        self.clock.advance(days=2)
        received = self.engine.receive_purchase_order(po.id)

        self.assertEqual(received.status, PO_RECEIVED)
        self.assertEqual(received.received_at, self.clock.now)
        self.assertEqual(self.engine.find_product(4).stock, 35)
        self.assertEqual(self.engine.find_purchase_order(po.id), received)

        self.clock.advance(days=1)
        self.assertIsNone(self.engine.receive_purchase_order(po.id))
        again = self.engine.find_purchase_order(po.id)
        self.assertEqual(again.status, PO_RECEIVED)
        self.assertEqual(again.received_at, received.received_at)
        self.assertEqual(self.engine.find_product(4).stock, 35)
        self.assertEqual(
            self.events, ["purchase-order-created", "purchase-order-received"]
        )

    def test_receive_for_product_no_longer_in_catalog(self):
        orphan = PurchaseOrder(
            id="PO-000777",
            supplier_id="SUP-1",
            product_id=99,
            quantity=12,
            unit_cost=1.0,
            status=PO_PENDING,
            source=SOURCE_MANUAL,
            created_at=NOW,
        )
        engine = make_engine(
            [make_product(1, 10.0, 3)], suppliers=[S1], purchase_orders=[orphan], clock=self.clock
        )
        events = []
        engine.subscribe(events.append)

        self.clock.advance(days=1)
        with self.assertRaises(NotFoundError):
            engine.receive_purchase_order(orphan.id)

        kept = engine.find_purchase_order(orphan.id)
        self.assertEqual(kept.status, PO_PENDING)
        self.assertIsNone(kept.received_at)
        self.assertEqual(engine.find_product(1).stock, 3)
        self.assertEqual(events, [])

    def test_receive_unknown_order_is_noop(self):
        self.assertIsNone(self.engine.receive_purchase_order("PO-000000"))
        self.assertEqual(self.events, [])

    # ---------- suggestions ----------

    def test_suggest_reorders_example(self):
        suggestions = self.engine.suggest_reorders(created_by="owner")
        by_product = {po.product_id: po for po in suggestions}

        b = by_product[1]
        self.assertEqual(b.quantity, 27)
        self.assertEqual(b.unit_cost, 6.2)
        self.assertEqual((b.status, b.source), (PO_PENDING, SOURCE_AUTO))
        self.assertEqual(b.supplier_id, "SUP-1")
        self.assertEqual(b.created_by, "owner")

        self.assertEqual(by_product[2].quantity, 30)
        self.assertEqual(by_product[2].unit_cost, 0.43)
        self.assertEqual(by_product[3].quantity, 20)
        self.assertNotIn(4, by_product)
        # catalog order among suggestions, all ahead of older orders
        self.assertEqual([po.product_id for po in suggestions], [1, 2, 3])
        self.assertEqual(self.engine.purchase_orders, suggestions)
        self.assertEqual(self.events, ["reorders-suggested"])

    def test_suggest_reorders_is_idempotent(self):
        first = self.engine.suggest_reorders()
        self.assertEqual(len(first), 3)
        self.assertEqual(self.engine.suggest_reorders(), ())
        self.assertEqual(len(self.engine.purchase_orders), 3)
        self.assertEqual(self.events, ["reorders-suggested"])

    def test_suggest_skips_products_with_pending_orders(self):
        manual = self.engine.create_purchase_order("SUP-2", 1, 50, 5.0)
        suggestions = self.engine.suggest_reorders()
        self.assertEqual([po.product_id for po in suggestions], [2, 3])
        pending_for_b = [
            po for po in self.engine.pending_purchase_orders() if po.product_id == 1
        ]
        self.assertEqual(pending_for_b, [manual])

    def test_received_orders_do_not_block_new_suggestions(self):
        po = self.engine.create_purchase_order("SUP-1", 2, 5, 0.4)
        self.engine.receive_purchase_order(po.id)  # bananas now at 5, still low
        suggestions = self.engine.suggest_reorders()
        self.assertIn(2, [s.product_id for s in suggestions])
        self.assertEqual(
            [s.quantity for s in suggestions if s.product_id == 2], [25]
        )

    def test_suggest_requires_a_supplier(self):
        engine = make_engine([make_product(1, 10.0, 3)])
        self.assertEqual(engine.suggest_reorders(), ())
        self.assertEqual(engine.purchase_orders, ())

    def test_suggest_with_nothing_low(self):
        engine = make_engine([make_product(1, 10.0, 50)], suppliers=[S1])
        self.assertEqual(engine.suggest_reorders(), ())

    def test_suggestions_go_to_first_supplier_in_registry_order(self):
        newest = self.engine.add_supplier("Newest Co")
        suggestions = self.engine.suggest_reorders()
        self.assertTrue(all(po.supplier_id == newest.id for po in suggestions))

    def test_sizing_helpers(self):
        self.assertEqual(reorder_quantity(3), 27)
        self.assertEqual(reorder_quantity(0), 30)
        self.assertEqual(reorder_quantity(25), 12)
        self.assertEqual(suggested_unit_cost(10.0), 6.2)
        self.assertEqual(suggested_unit_cost(4.99), 3.09)


class SupplierRegistryTestCase(unittest.TestCase):
    def test_add_supplier_trims_and_prepends(self):
        engine = make_engine(suppliers=[S1])
        events = []
        engine.subscribe(events.append)

        supplier = engine.add_supplier("  Green Valley ", " Sam ", "sam@gv.example", "")
        self.assertEqual((supplier.name, supplier.contact), ("Green Valley", "Sam"))
        self.assertTrue(supplier.id.startswith("SUP-"))
        self.assertEqual(engine.suppliers, (supplier, S1))
        self.assertEqual(engine.find_supplier(supplier.id), supplier)
        self.assertEqual(engine.supplier_name("SUP-404"), "SUP-404")
        self.assertEqual(events, ["supplier-added"])

    def test_add_supplier_requires_a_name(self):
        engine = make_engine()
        for name in ("", "   ", None):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    engine.add_supplier(name)
        self.assertEqual(engine.suppliers, ())
        self.assertIsNone(engine.find_supplier("SUP-1"))
