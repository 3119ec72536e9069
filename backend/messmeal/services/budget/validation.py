"""Inline validation. Problems come back as message lists, never as exceptions."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from messmeal.services.selection.meal_times import MealTimes


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(self.errors + other.errors)


def validate_budget_inputs(budget_per_student: Decimal, total_students: int) -> ValidationResult:
    errors = []
    if budget_per_student < 0:
        errors.append("Budget per student cannot be negative")
    if total_students < 0:
        errors.append("Total students cannot be negative")
    if budget_per_student > 0 and total_students == 0:
        errors.append("Please specify the number of students")
    if budget_per_student == 0 and total_students > 0:
        errors.append("Please specify budget per student")
    return ValidationResult(errors)


def validate_mess_days(mess_days: MealTimes) -> ValidationResult:
    if mess_days.any_active():
        return ValidationResult()
    return ValidationResult(["At least one meal time must be active"])


def validate_meal_selections(
    selections: Mapping[int, MealTimes], mess_days: MealTimes
) -> ValidationResult:
    if not selections:
        return ValidationResult(["Please select at least one food item"])
    errors = [
        f"Item {item_id} has no valid meal times selected"
        for item_id, meal_times in selections.items()
        if not meal_times.overlaps(mess_days)
    ]
    return ValidationResult(errors)
