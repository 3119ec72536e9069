"""Built-in catalog used when CATALOG_SOURCE=static."""

from decimal import Decimal

from messmeal.services.catalog.models import CatalogCategory, SelectableItem
from messmeal.services.selection.meal_times import MealTimes

# (id, name, price, unit, morning, afternoon, night, editable)
_RAW_CATEGORIES = {
    "Oil & Spices": [
        (1, "Soybean oil", 100, "litre", True, False, True, False),
        (2, "Mustard oil", 80, "litre", False, True, False, True),
        (3, "Palm oil", 90, "litre", True, True, False, False),
        (4, "Coconut oil", 120, "litre", False, False, True, True),
        (5, "Ghee", 200, "litre", True, False, False, True),
        (6, "Butter", 150, "litre", False, True, True, False),
        (7, "Sugar", 50, "kg", True, True, True, True),
        (8, "Salt", 20, "kg", False, False, False, False),
    ],
    "Leafy greens": [
        (9, "Spinach", 20, "kg", False, True, True, True),
        (10, "Red amaranth", 25, "kg", True, False, False, True),
        (11, "Water spinach", 18, "kg", False, True, False, True),
        (12, "Malabar spinach", 22, "kg", True, False, True, True),
        (13, "Ridge gourd leaves", 28, "kg", True, True, False, True),
        (14, "Amaranth", 19, "kg", False, False, True, True),
        (15, "Green amaranth", 30, "kg", True, True, True, True),
        (16, "Mustard greens", 26, "kg", False, True, False, True),
    ],
    "Vegetables": [
        (17, "Potato", 30, "kg", True, True, True, True),
        (18, "Eggplant", 35, "kg", False, True, False, True),
        (19, "Tomato", 40, "kg", True, True, True, True),
        (20, "Cucumber", 25, "kg", True, False, False, True),
        (21, "Bitter gourd", 32, "kg", False, True, True, True),
        (22, "Pumpkin", 27, "kg", False, False, True, True),
        (23, "Pointed gourd", 34, "kg", True, False, False, True),
        (24, "Green chilli", 80, "kg", False, False, False, False),
    ],
    "Fish": [
        (25, "Rohu", 250, "kg", False, True, True, True),
        (26, "Hilsa", 800, "kg", True, False, False, False),
        (27, "Catla", 300, "kg", True, True, False, True),
        (28, "Pabda", 350, "kg", False, True, True, True),
        (29, "Tengra", 400, "kg", True, False, False, True),
        (30, "Prawn", 600, "kg", False, True, True, True),
        (31, "Magur", 450, "kg", True, True, False, True),
        (32, "Silver carp", 220, "kg", False, False, True, True),
    ],
    "Meat": [
        (33, "Beef", 700, "kg", False, False, True, True),
        (34, "Chicken", 180, "kg", True, True, True, True),
        (35, "Mutton", 850, "kg", False, True, False, True),
        (36, "Duck", 400, "kg", True, False, True, True),
        (37, "Chicken leg", 200, "kg", False, True, False, True),
        (38, "Chicken wings", 210, "kg", False, False, True, True),
        (39, "Chicken breast", 220, "kg", True, True, True, True),
        (40, "Boneless meat", 260, "kg", False, True, True, True),
    ],
    "Staples": [
        (41, "Rice", 60, "kg", True, True, True, False),
        (42, "Lentils", 90, "kg", False, False, True, True),
        (43, "Sugar (fine)", 55, "kg", True, False, True, False),
        (44, "Atta flour", 45, "kg", False, True, True, True),
        (45, "Maida flour", 50, "kg", True, True, False, True),
        (46, "Flattened rice", 35, "kg", True, False, False, True),
        (47, "Semolina", 40, "kg", False, True, False, True),
        (48, "Puffed rice", 30, "kg", True, False, False, True),
    ],
}


def _build() -> tuple[CatalogCategory, ...]:
    categories = []
    for title, rows in _RAW_CATEGORIES.items():
        items = tuple(
            SelectableItem(
                id=item_id,
                name=name,
                price=Decimal(price),
                unit=unit,
                allowed_meal_times=MealTimes(morning=morning, afternoon=afternoon, night=night),
                editable_meal_times=editable,
                category=title,
            )
            for item_id, name, price, unit, morning, afternoon, night, editable in rows
        )
        categories.append(CatalogCategory(title=title, items=items))
    return tuple(categories)


DEFAULT_CATEGORIES = _build()
