from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from messmeal.services.selection.meal_times import MealTimes


@dataclass(frozen=True)
class SelectableItem:
    id: int
    name: str
    price: Decimal
    unit: str
    allowed_meal_times: MealTimes
    editable_meal_times: bool = True
    category: str = ""

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "unit": self.unit,
            "allowed_meal_times": self.allowed_meal_times.as_dict(),
            "editable_meal_times": self.editable_meal_times,
            "category": self.category,
        }


@dataclass(frozen=True)
class CatalogCategory:
    title: str
    items: tuple[SelectableItem, ...] = field(default_factory=tuple)


class Catalog:
    """Read-only index of selectable items grouped by category."""

    def __init__(self, categories: Iterable[CatalogCategory]):
        self._categories = tuple(categories)
        self._items: dict[int, SelectableItem] = {}
        for category in self._categories:
            for item in category.items:
                self._items[item.id] = item

    @property
    def categories(self) -> tuple[CatalogCategory, ...]:
        return self._categories

    def items(self) -> list[SelectableItem]:
        return list(self._items.values())

    def get(self, item_id: int) -> Optional[SelectableItem]:
        return self._items.get(item_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def as_dict(self) -> list[dict]:
        return [
            {"title": c.title, "items": [item.as_dict() for item in c.items]}
            for c in self._categories
        ]
