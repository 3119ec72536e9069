from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional

from messmeal.services.catalog.models import Catalog
from messmeal.services.selection.meal_times import MealTimes

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class BudgetStatus(str, Enum):
    NO_BUDGET = "no-budget"
    OVER_BUDGET = "over-budget"
    HIGH_UTILIZATION = "high-utilization"
    LOW_REMAINING = "low-remaining"
    NORMAL = "normal"


class PricingRule(str, Enum):
    FLAT = "flat"  # one portion per selected item
    PER_MEAL = "per_meal"  # one portion per selected item and active meal time


@dataclass(frozen=True)
class BudgetThresholds:
    high_utilization: Decimal = Decimal("0.8")
    low_remaining: Decimal = Decimal("0.2")

    @classmethod
    def from_floats(cls, high_utilization: float, low_remaining: float) -> "BudgetThresholds":
        return cls(Decimal(str(high_utilization)), Decimal(str(low_remaining)))


@dataclass(frozen=True)
class BudgetInputs:
    budget_per_student: Decimal = ZERO
    total_students: int = 0


@dataclass(frozen=True)
class BudgetDerived:
    total_budget: Decimal
    total_selection_price: Decimal
    remaining_budget: Decimal
    budget_status: BudgetStatus
    utilization_percent: Decimal

    @property
    def is_over_budget(self) -> bool:
        return self.budget_status is BudgetStatus.OVER_BUDGET


def compute_total_budget(inputs: BudgetInputs) -> Decimal:
    if not inputs.budget_per_student or not inputs.total_students:
        return ZERO
    return Decimal(inputs.budget_per_student) * inputs.total_students


def line_price(price: Decimal, meal_times: MealTimes, rule: PricingRule) -> Decimal:
    if rule is PricingRule.PER_MEAL:
        return price * meal_times.active_count()
    return price


def compute_selection_price(
    selections: Mapping[int, MealTimes],
    catalog: Catalog,
    rule: PricingRule = PricingRule.FLAT,
) -> Decimal:
    total = ZERO
    for item_id, meal_times in selections.items():
        item = catalog.get(item_id)
        if item is None:
            continue
        total += line_price(item.price, meal_times, rule)
    return total


def classify_budget(
    total_budget: Decimal,
    total_selection_price: Decimal,
    thresholds: BudgetThresholds = BudgetThresholds(),
) -> BudgetStatus:
    if total_budget == 0:
        return BudgetStatus.NO_BUDGET
    if total_selection_price > total_budget:
        return BudgetStatus.OVER_BUDGET
    if total_selection_price / total_budget > thresholds.high_utilization:
        return BudgetStatus.HIGH_UTILIZATION
    remaining = total_budget - total_selection_price
    if remaining < total_budget * thresholds.low_remaining:
        return BudgetStatus.LOW_REMAINING
    return BudgetStatus.NORMAL


def compute_budget(
    inputs: BudgetInputs,
    selections: Mapping[int, MealTimes],
    catalog: Catalog,
    rule: PricingRule = PricingRule.FLAT,
    thresholds: Optional[BudgetThresholds] = None,
) -> BudgetDerived:
    thresholds = thresholds or BudgetThresholds()
    total_budget = compute_total_budget(inputs)
    price = compute_selection_price(selections, catalog, rule)
    utilization = price / total_budget * HUNDRED if total_budget > 0 else ZERO
    return BudgetDerived(
        total_budget=total_budget,
        total_selection_price=price,
        remaining_budget=total_budget - price,
        budget_status=classify_budget(total_budget, price, thresholds),
        utilization_percent=utilization,
    )
