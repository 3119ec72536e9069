"""Selected catalog items and their per-item meal-time flags.

The selected-ID set is always the key set of the selections map, so an item
is selected exactly when it has a MealTimes entry.
"""

from typing import Optional

from messmeal.errors import ItemNotSelectedError
from messmeal.services.catalog.models import SelectableItem
from messmeal.services.selection.meal_times import MealTimes


class SelectionStore:
    def __init__(
        self,
        selections: Optional[dict[int, MealTimes]] = None,
        snapshot: Optional[dict[int, MealTimes]] = None,
    ) -> None:
        self._selections: dict[int, MealTimes] = dict(selections or {})
        self._snapshot: dict[int, MealTimes] = dict(snapshot or {})

    @property
    def selected_item_ids(self) -> set[int]:
        return set(self._selections)

    @property
    def selections(self) -> dict[int, MealTimes]:
        return dict(self._selections)

    @property
    def initial_snapshot(self) -> dict[int, MealTimes]:
        return dict(self._snapshot)

    @property
    def has_changes(self) -> bool:
        return self._selections != self._snapshot

    def is_selected(self, item_id: int) -> bool:
        return item_id in self._selections

    def toggle_item(self, item: SelectableItem) -> bool:
        """Select or deselect an item. Returns True when the item ends up selected."""
        if item.id in self._selections:
            del self._selections[item.id]
            return False
        self._selections[item.id] = item.allowed_meal_times
        self._snapshot[item.id] = item.allowed_meal_times
        return True

    def set_meal_time(self, item_id: int, meal_time: str, value: bool) -> MealTimes:
        current = self._selections.get(item_id)
        if current is None:
            raise ItemNotSelectedError(item_id)
        updated = current.with_value(meal_time, value)
        self._selections[item_id] = updated
        return updated

    def clear(self) -> None:
        self._selections = {}
        self._snapshot = {}

    def cancel(self) -> None:
        self._selections = dict(self._snapshot)

    def mark_saved(self, saved: Optional[dict[int, MealTimes]] = None) -> None:
        """Re-base the snapshot on what was saved, by default the current selections."""
        self._snapshot = dict(self._selections if saved is None else saved)
