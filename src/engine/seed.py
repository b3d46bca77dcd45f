# built-in catalog and suppliers used when no saved state is usable
from engine.models import Product, Supplier

SEED_PRODUCTS = (
    Product(id=1, name="Bananas (1 lb)", category="Produce", price=0.69, stock=120),
    Product(id=2, name="Gala Apples (3 lb bag)", category="Produce", price=4.49, stock=45),
    Product(id=3, name="Baby Spinach 5 oz", category="Produce", price=3.29, stock=8),
    Product(id=4, name="Whole Milk 1 gal", category="Dairy", price=3.99, stock=36),
    Product(id=5, name="Greek Yogurt 32 oz", category="Dairy", price=5.49, stock=9),
    Product(id=6, name="Cheddar Cheese Block", category="Dairy", price=4.79, stock=22),
    Product(id=7, name="Sourdough Loaf", category="Bakery", price=5.25, stock=14),
    Product(id=8, name="Butter Croissants 4 pk", category="Bakery", price=6.49, stock=6),
    Product(id=9, name="Spaghetti 16 oz", category="Pantry", price=1.59, stock=80),
    Product(id=10, name="Extra Virgin Olive Oil", category="Pantry", price=9.99, stock=18),
    Product(id=11, name="Chicken Breast (1 lb)", category="Meat", price=4.99, stock=25),
    Product(id=12, name="Ground Beef 80/20 (1 lb)", category="Meat", price=5.89, stock=4),
    Product(id=13, name="Orange Juice 52 oz", category="Beverages", price=4.29, stock=30),
    Product(id=14, name="Sparkling Water 12 pk", category="Beverages", price=5.99, stock=11),
    Product(id=15, name="Frozen Peas 12 oz", category="Frozen", price=1.99, stock=40),
    Product(id=16, name="Vanilla Ice Cream 1.5 qt", category="Frozen", price=4.99, stock=7),
)

SEED_SUPPLIERS = (
    Supplier(
        id="SUP-1001",
        name="FreshFields Produce Co.",
        contact="Ava Turner",
        email="orders@freshfields.example",
        phone="+1-555-0112",
    ),
    Supplier(
        id="SUP-1002",
        name="Daily Dairy Distributors",
        contact="Noah Reed",
        email="supply@dailydairy.example",
        phone="+1-555-0147",
    ),
)
