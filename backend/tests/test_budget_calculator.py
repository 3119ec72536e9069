from decimal import Decimal

import pytest

from messmeal.services.budget.breakdown import cost_by_category, meal_time_distribution
from messmeal.services.budget.calculator import (
    BudgetInputs,
    BudgetStatus,
    BudgetThresholds,
    PricingRule,
    classify_budget,
    compute_budget,
    compute_total_budget,
)
from messmeal.services.catalog.models import Catalog, CatalogCategory, SelectableItem
from messmeal.services.selection.meal_times import MealTimes


def _catalog(*prices):
    items = tuple(
        SelectableItem(
            id=index,
            name=f"item {index}",
            price=Decimal(price),
            unit="kg",
            allowed_meal_times=MealTimes.all_on(),
        )
        for index, price in enumerate(prices, start=1)
    )
    return Catalog([CatalogCategory(title="Test", items=items)])


def _select_all(catalog):
    return {item.id: item.allowed_meal_times for item in catalog.items()}


FIFTY_BY_TEN = BudgetInputs(Decimal("50"), 10)


@pytest.mark.parametrize(
    "per_student,students,expected",
    [(50, 10, 500), (0, 10, 0), (50, 0, 0), (0, 0, 0), (Decimal("12.5"), 4, 50)],
)
def test_total_budget(per_student, students, expected):
    assert compute_total_budget(BudgetInputs(Decimal(per_student), students)) == Decimal(expected)


def test_normal_at_half_utilization():
    catalog = _catalog(100, 150)
    derived = compute_budget(FIFTY_BY_TEN, _select_all(catalog), catalog)
    assert derived.total_budget == 500
    assert derived.total_selection_price == 250
    assert derived.remaining_budget == 250
    assert derived.budget_status is BudgetStatus.NORMAL
    assert derived.utilization_percent == 50


def test_high_utilization_above_eighty_percent():
    catalog = _catalog(200, 250)
    derived = compute_budget(FIFTY_BY_TEN, _select_all(catalog), catalog)
    assert derived.total_selection_price == 450
    assert derived.budget_status is BudgetStatus.HIGH_UTILIZATION


def test_over_budget_goes_negative():
    catalog = _catalog(300, 300)
    derived = compute_budget(FIFTY_BY_TEN, _select_all(catalog), catalog)
    assert derived.remaining_budget == -100
    assert derived.budget_status is BudgetStatus.OVER_BUDGET
    assert derived.is_over_budget


def test_no_budget_regardless_of_selection():
    catalog = _catalog(10_000)
    derived = compute_budget(BudgetInputs(Decimal("0"), 10), _select_all(catalog), catalog)
    assert derived.budget_status is BudgetStatus.NO_BUDGET
    assert derived.utilization_percent == 0


def test_classification_order_and_boundaries():
    # Exactly 80% is not "high"; 20% remaining is not "low"
    assert classify_budget(Decimal(500), Decimal(400)) is BudgetStatus.NORMAL
    assert classify_budget(Decimal(500), Decimal(500)) is BudgetStatus.HIGH_UTILIZATION
    assert classify_budget(Decimal(0), Decimal(0)) is BudgetStatus.NO_BUDGET


def test_low_remaining_with_custom_thresholds():
    thresholds = BudgetThresholds.from_floats(0.95, 0.3)
    assert classify_budget(Decimal(100), Decimal(75), thresholds) is BudgetStatus.LOW_REMAINING


def test_unknown_item_ids_are_skipped():
    catalog = _catalog(100)
    selections = {1: MealTimes.all_on(), 999: MealTimes.all_on()}
    assert compute_budget(FIFTY_BY_TEN, selections, catalog).total_selection_price == 100


def test_per_meal_rule_counts_active_meal_times():
    catalog = _catalog(100, 50)
    selections = {1: MealTimes(morning=True, night=True), 2: MealTimes()}
    derived = compute_budget(FIFTY_BY_TEN, selections, catalog, rule=PricingRule.PER_MEAL)
    assert derived.total_selection_price == 200
    flat = compute_budget(FIFTY_BY_TEN, selections, catalog, rule=PricingRule.FLAT)
    assert flat.total_selection_price == 150


def test_breakdown_by_category_and_meal_time(catalog):
    selections = {7: catalog.get(7).allowed_meal_times, 17: MealTimes(morning=True)}
    costs = cost_by_category(selections, catalog)
    assert costs == {"Oil & Spices": Decimal(50), "Vegetables": Decimal(30)}
    assert meal_time_distribution(selections) == {"morning": 2, "afternoon": 1, "night": 1}
