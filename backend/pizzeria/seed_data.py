# Overview: Starter menu and coupons loaded by `flask storefront seed`.

# (name, description, category, price_cents, image, is_veg)
_IMG = "https://images.unsplash.com/photo-{}?w=400&h=400&fit=crop"

PRODUCTS = [
    # Pizzas
    ("Margherita", "Classic delight with 100% real mozzarella cheese", "pizza", 19900, _IMG.format("1574071318508-1cdbab80d002"), True),
    ("Farmhouse", "Delightful combination of onion, capsicum, tomato & grilled mushroom", "pizza", 29900, _IMG.format("1565299624946-b28f40a0ae38"), True),
    ("Peppy Paneer", "Chunky paneer with crisp capsicum and spicy red pepper", "pizza", 34900, _IMG.format("1628840042765-356cda07504e"), True),
    ("Mexican Green Wave", "Mexican herbs sprinkled on onion, capsicum, tomato & jalapeno", "pizza", 32900, _IMG.format("1571997478779-2adcbbe9ab2f"), True),
    ("Chicken Dominator", "Double pepper barbecue chicken, peri-peri chicken, chicken tikka & grilled chicken rashers", "pizza", 49900, _IMG.format("1628840042765-356cda07504e"), False),
    ("Chicken Golden Delight", "Double golden chicken topping with extra cheese", "pizza", 44900, _IMG.format("1590947132387-155cc02f3212"), False),
    ("Pepper Barbecue Chicken", "Pepper barbecue chicken, cheese and capsicum", "pizza", 42900, _IMG.format("1534308983496-4fabb1a015ee"), False),
    ("Non Veg Supreme", "Black olives, onions, grilled mushrooms, pepper barbecue chicken, peri-peri chicken & grilled chicken rashers", "pizza", 47900, _IMG.format("1595708684082-a173bb3a06c5"), False),

    # Beverages
    ("Coca Cola (750ml)", "The chilled refreshing taste of Coca Cola", "beverages", 5700, _IMG.format("1554866585-cd94860890b7"), True),
    ("Pepsi (750ml)", "Refresh yourself with chilled Pepsi", "beverages", 5700, _IMG.format("1629203851122-3726ecdf080e"), True),
    ("Sprite (750ml)", "Lime flavored sparkling drink", "beverages", 5700, _IMG.format("1625772299848-391b6a87d7b3"), True),
    ("Fanta (750ml)", "Orange flavored refreshing drink", "beverages", 5700, _IMG.format("1624517452488-04869289c4ca"), True),
    ("Thums Up (750ml)", "Strong fizzy refreshment with bold taste", "beverages", 5700, _IMG.format("1581006852262-e4307cf6283a"), True),
    ("Mountain Dew (750ml)", "Electrifying citrus blast", "beverages", 5700, _IMG.format("1622483767028-3f66f32aef97"), True),
    ("Mirinda (750ml)", "Delicious orange flavored drink", "beverages", 5700, _IMG.format("1621939514649-280e2ee25f60"), True),
    ("Minute Maid (1L)", "Refreshing pulpy orange juice", "beverages", 9000, _IMG.format("1600271886742-f049cd451bba"), True),

    # Desserts
    ("Choco Lava Cake", "Chocolate cake with gooey molten lava inside", "desserts", 9900, _IMG.format("1606313564200-e75d5e30476c"), True),
    ("Brownie Fantasy", "Rich chocolate brownie topped with chocolate sauce", "desserts", 11900, _IMG.format("1607920591413-4ec007e70023"), True),
    ("Red Velvet Lava Cake", "Soft red velvet cake with creamy white chocolate lava", "desserts", 10900, _IMG.format("1614707267537-b85aaf00c4b7"), True),
    ("Butterscotch Mousse Cake", "Creamy butterscotch mousse layered with cake", "desserts", 9900, _IMG.format("1578985545062-69928b1d9587"), True),
    ("Chocolate Chip Cookie", "Freshly baked chocolate chip cookie", "desserts", 5900, _IMG.format("1499636136210-6f4ee915583e"), True),
    ("Vanilla Ice Cream Tub", "Creamy vanilla ice cream tub", "desserts", 7900, _IMG.format("1563805042-7684c019e1cb"), True),
    ("Chocolate Ice Cream Tub", "Rich chocolate ice cream tub", "desserts", 7900, _IMG.format("1570197788417-0e82375c9371"), True),
    ("Strawberry Ice Cream Tub", "Delicious strawberry ice cream tub", "desserts", 7900, _IMG.format("1501443762994-82bd5dace89a"), True),

    # Sides
    ("Garlic Breadsticks", "Freshly baked breadsticks with garlic seasoning", "sides", 9900, _IMG.format("1619985652734-d3d60c7e8815"), True),
    ("Cheesy Garlic Bread", "Garlic bread topped with melted cheese", "sides", 12900, _IMG.format("1573140401552-388e3d2c1fc7"), True),
    ("Stuffed Garlic Bread", "Garlic bread stuffed with cheese and spices", "sides", 14900, _IMG.format("1619985652734-d3d60c7e8815"), True),
    ("Potato Cheese Shots", "Crispy potato bites filled with cheese", "sides", 11900, _IMG.format("1541745537411-b8046dc6d66c"), True),
    ("Chicken Wings", "Spicy chicken wings with dipping sauce", "sides", 19900, _IMG.format("1608039829572-78524f79c4c7"), False),
    ("Chicken Nuggets", "Crispy golden chicken nuggets", "sides", 14900, _IMG.format("1562967914-608f82629710"), False),
    ("French Fries", "Crispy golden french fries", "sides", 8900, _IMG.format("1573080496219-bb080dd4f877"), True),
    ("Onion Rings", "Crispy fried onion rings", "sides", 9900, _IMG.format("1639024471283-03518883512d"), True),
]

# (code, description, discount_type, discount_value, min_order_amount_cents, max_discount_cents)
COUPONS = [
    ("MEGA50", "Get 50% off on orders above 500", "percentage", 50, 50000, 50000),
    ("WELCOME50", "Welcome offer - 50% off on your first order", "percentage", 50, 30000, 30000),
    ("SUPER50", "Super saver - 50% off on orders above 1000", "percentage", 50, 100000, 100000),
    ("FLAT250", "Flat 250 off on orders above 800", "flat", 25000, 80000, 25000),
]
