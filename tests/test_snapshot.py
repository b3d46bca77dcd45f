import json
import unittest
from datetime import datetime, timedelta, timezone

from store_fixtures import NOW, S1, FixedClock, make_engine, make_product

from engine.seed import SEED_PRODUCTS, SEED_SUPPLIERS
from engine.snapshot import load_state
from engine.store import StoreEngine


class SnapshotTestCase(unittest.TestCase):
    def busy_engine(self):
        clock = FixedClock()
        engine = make_engine(
            [
                make_product(1, 2.5, 40, name='Milk, "Whole"', category="Dairy"),
                make_product(2, 0.69, 4, name="Bananas", category="Produce"),
            ],
            suppliers=[S1],
            clock=clock,
        )
        cart = engine.new_cart()
        cart.add_line(engine.find_product(1))
        cart.add_line(engine.find_product(1))
        engine.checkout(cart, cashier="cashier")
        clock.advance(hours=1, microseconds=250)
        engine.suggest_reorders(created_by="owner")
        clock.advance(minutes=5)
        po = engine.create_purchase_order("SUP-1", 1, 6, 1.55, created_by="stock")
        engine.receive_purchase_order(po.id)
        return engine

    def test_round_trip_through_json_is_stable(self):
        engine = self.busy_engine()
        first = engine.snapshot()
        text = json.dumps(first)

        restored = StoreEngine.from_snapshot(json.loads(text), clock=FixedClock())
        self.assertEqual(restored.products, engine.products)
        self.assertEqual(restored.orders, engine.orders)
        self.assertEqual(restored.suppliers, engine.suppliers)
        self.assertEqual(restored.purchase_orders, engine.purchase_orders)
        self.assertEqual(json.dumps(restored.snapshot()), text)

    def test_snapshot_record_shape(self):
        record = self.busy_engine().snapshot()
        self.assertEqual(
            sorted(record), ["orders", "products", "purchaseOrders", "suppliers"]
        )
        order = record["orders"][0]
        self.assertEqual(order["date"], NOW.isoformat())
        self.assertEqual(order["items"][0]["productId"], 1)
        received = [po for po in record["purchaseOrders"] if po["receivedAt"]]
        pending = [po for po in record["purchaseOrders"] if not po["receivedAt"]]
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0]["status"], "Received")
        self.assertEqual(
            received[0]["receivedAt"],
            (NOW + timedelta(hours=1, minutes=5, microseconds=250)).isoformat(),
        )
        self.assertTrue(all(po["receivedAt"] is None for po in pending))

    def test_missing_or_unusable_data_falls_back_to_seed(self):
        for data in (None, [], "junk", 42, {}):
            with self.subTest(data=data):
                state = load_state(data)
                self.assertEqual(state.products, SEED_PRODUCTS)
                self.assertEqual(state.orders, ())
                self.assertEqual(state.suppliers, SEED_SUPPLIERS)
                self.assertEqual(state.purchase_orders, ())

    def test_products_and_orders_fall_back_together(self):
        record = self.busy_engine().snapshot()

        no_products = dict(record, products="nope")
        state = load_state(no_products)
        self.assertEqual(state.products, SEED_PRODUCTS)
        self.assertEqual(state.orders, ())

        bad_order = json.loads(json.dumps(record))
        del bad_order["orders"][0]["items"][0]["unitPrice"]
        state = load_state(bad_order)
        self.assertEqual(state.products, SEED_PRODUCTS)
        self.assertEqual(state.orders, ())
        # the other collections are judged on their own
        self.assertEqual([s.id for s in state.suppliers], ["SUP-1"])
        self.assertEqual(len(state.purchase_orders), len(record["purchaseOrders"]))

    def test_suppliers_and_purchase_orders_fall_back_independently(self):
        record = self.busy_engine().snapshot()

        state = load_state(dict(record, suppliers=None))
        self.assertEqual(state.suppliers, SEED_SUPPLIERS)
        self.assertEqual(len(state.products), 2)
        self.assertEqual(len(state.orders), 1)

        broken_po = json.loads(json.dumps(record))
        broken_po["purchaseOrders"][0]["createdAt"] = "not a date"
        state = load_state(broken_po)
        self.assertEqual(state.purchase_orders, ())
        self.assertEqual(len(state.products), 2)
        self.assertEqual([s.id for s in state.suppliers], ["SUP-1"])

    def test_seeded_engine(self):
        engine = StoreEngine.seeded(clock=FixedClock())
        self.assertEqual(engine.products, SEED_PRODUCTS)
        self.assertEqual(engine.suppliers, SEED_SUPPLIERS)
        self.assertEqual(engine.orders, ())
        self.assertTrue(engine.low_stock())

    def test_entities_breaking_stock_rules_are_discarded(self):
        record = self.busy_engine().snapshot()

        negative = json.loads(json.dumps(record))
        negative["products"][0]["stock"] = -3
        state = load_state(negative)
        self.assertEqual(state.products, SEED_PRODUCTS)
        self.assertEqual(state.orders, ())

        bad_purchase_orders = [
            ("quantity", -5),
            ("quantity", 0),
            ("quantity", 2.5),
            ("status", "Cancelled"),
            ("source", "import"),
        ]
        for field, value in bad_purchase_orders:
            with self.subTest(field=field, value=value):
                broken = json.loads(json.dumps(record))
                broken["purchaseOrders"][-1][field] = value
                state = load_state(broken)
                self.assertEqual(state.purchase_orders, ())
                self.assertEqual(len(state.products), 2)

    def test_pending_order_with_negative_quantity_cannot_lower_stock(self):
        record = self.busy_engine().snapshot()
        broken = json.loads(json.dumps(record))
        pending = [po for po in broken["purchaseOrders"] if po["status"] == "Pending"][0]
        pending["quantity"] = -5

        engine = StoreEngine.from_snapshot(broken, clock=FixedClock())
        self.assertEqual(engine.purchase_orders, ())
        self.assertIsNone(engine.receive_purchase_order(pending["id"]))
        self.assertEqual(engine.find_product(pending["productId"]).stock, 4)

    def test_numeric_text_ids_become_ints(self):
        record = self.busy_engine().snapshot()
        record["products"][0]["id"] = "1"
        record["orders"][0]["items"][0]["productId"] = "1"
        record["purchaseOrders"][0]["productId"] = 1.0

        engine = StoreEngine.from_snapshot(record, clock=FixedClock())
        self.assertEqual(engine.find_product(1).id, 1)
        self.assertEqual(engine.orders[0].items[0].product_id, 1)
        self.assertEqual(engine.purchase_orders[0].product_id, 1)
        self.assertEqual(engine.top_products()[0].name, 'Milk, "Whole"')

    def test_utc_stamps_are_read_as_local_time(self):
        utc = datetime(2025, 11, 6, 2, 0, tzinfo=timezone.utc)
        local = utc.astimezone().replace(tzinfo=None)
        record = {
            "products": [{"id": 1, "name": "A", "category": "Pantry", "price": 2.0, "stock": 9}],
            "orders": [
                {
                    "id": "ORD-000001",
                    "date": "2025-11-06T02:00:00Z",
                    "total": 8.0,
                    "cashier": "cashier",
                    "items": [{"productId": 1, "name": "A", "unitPrice": 2.0, "quantity": 4}],
                }
            ],
            "suppliers": [],
            "purchaseOrders": [
                {
                    "id": "PO-000001",
                    "supplierId": "SUP-1",
                    "productId": 1,
                    "quantity": 6,
                    "unitCost": 1.0,
                    "status": "Received",
                    "source": "manual",
                    "createdAt": "2025-11-06T02:00:00+00:00",
                    "receivedAt": "2025-11-06T02:00:00.000Z",
                    "createdBy": "stock",
                }
            ],
        }

        engine = StoreEngine.from_snapshot(record, clock=FixedClock(local))
        order = engine.orders[0]
        self.assertEqual(order.timestamp, local)
        self.assertIsNone(order.timestamp.tzinfo)
        self.assertEqual(engine.daily_sales(), 8.0)
        self.assertEqual(engine.dashboard().todays_orders, 1)

        po = engine.purchase_orders[0]
        self.assertEqual((po.created_at, po.received_at), (local, local))
