from decimal import Decimal
from typing import Mapping

from messmeal.services.budget.calculator import PricingRule, line_price
from messmeal.services.catalog.models import Catalog
from messmeal.services.selection.meal_times import MEAL_TIMES, MealTimes


def cost_by_category(
    selections: Mapping[int, MealTimes],
    catalog: Catalog,
    rule: PricingRule = PricingRule.FLAT,
) -> dict[str, Decimal]:
    """Category title -> cost of its selected items. Categories with nothing selected are left out."""
    breakdown: dict[str, Decimal] = {}
    for category in catalog.categories:
        total = sum(
            (
                line_price(item.price, selections[item.id], rule)
                for item in category.items
                if item.id in selections
            ),
            Decimal("0"),
        )
        if total > 0:
            breakdown[category.title] = total
    return breakdown


def meal_time_distribution(selections: Mapping[int, MealTimes]) -> dict[str, int]:
    distribution = {name: 0 for name in MEAL_TIMES}
    for meal_times in selections.values():
        for name in meal_times.active():
            distribution[name] += 1
    return distribution
