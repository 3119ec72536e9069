"""Meal-time flags shared by catalog defaults, selections and mess-day settings.

Canonical names are morning/afternoon/night. Screens that speak in
breakfast/lunch/dinner are accepted through MEAL_TIME_ALIASES.
"""

from dataclasses import asdict, dataclass, replace
from typing import Mapping

from messmeal.errors import UnknownMealTimeError

MEAL_TIMES = ("morning", "afternoon", "night")

MEAL_TIME_ALIASES = {
    "breakfast": "morning",
    "lunch": "afternoon",
    "dinner": "night",
}


def normalize_meal_time(name: str) -> str:
    key = (name or "").strip().lower()
    key = MEAL_TIME_ALIASES.get(key, key)
    if key not in MEAL_TIMES:
        raise UnknownMealTimeError(name)
    return key


@dataclass(frozen=True)
class MealTimes:
    morning: bool = False
    afternoon: bool = False
    night: bool = False

    @classmethod
    def all_on(cls) -> "MealTimes":
        return cls(morning=True, afternoon=True, night=True)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "MealTimes":
        """Build from a dict using either naming. Unknown keys such as 'editable' are ignored."""
        values: dict[str, bool] = {}
        for key, value in (data or {}).items():
            canonical = MEAL_TIME_ALIASES.get(str(key).lower(), str(key).lower())
            if canonical in MEAL_TIMES:
                values[canonical] = bool(value)
        return cls(**values)

    def with_value(self, meal_time: str, value: bool) -> "MealTimes":
        return replace(self, **{normalize_meal_time(meal_time): bool(value)})

    def active(self) -> list[str]:
        return [name for name in MEAL_TIMES if getattr(self, name)]

    def active_count(self) -> int:
        return len(self.active())

    def any_active(self) -> bool:
        return self.active_count() > 0

    def overlaps(self, other: "MealTimes") -> bool:
        return any(getattr(self, name) and getattr(other, name) for name in MEAL_TIMES)

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)
