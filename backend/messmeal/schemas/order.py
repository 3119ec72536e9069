from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from messmeal.schemas.mess import MessRead

NOTE_MEALS = ("breakfast", "lunch", "dinner")


class NoteMealIn(BaseModel):
    total_meal: int | None = None
    menu: str | None = None


class NoteOrderCreate(BaseModel):
    """A meal note: head counts and a free-text menu per active meal time.

    A meal is active when present (not null). Single-meal notes carry exactly
    one active meal, multi-meal notes at least one.
    """

    breakfast: NoteMealIn | None = None
    lunch: NoteMealIn | None = None
    dinner: NoteMealIn | None = None
    budget: float = 0
    meal_type: Literal["single", "multi"] = "single"
    mess_id: int | None = None

    def active_meals(self) -> dict[str, NoteMealIn]:
        return {name: getattr(self, name) for name in NOTE_MEALS if getattr(self, name) is not None}

    @model_validator(mode="after")
    def _check(self) -> "NoteOrderCreate":
        errors = []
        active = self.active_meals()
        if self.meal_type == "single" and len(active) != 1:
            errors.append("A single meal note needs exactly one active meal")
        if self.meal_type == "multi" and not active:
            errors.append("At least one meal time must be active")
        for name, meal in active.items():
            if not meal.total_meal or meal.total_meal <= 0:
                errors.append(f"{name}: total meal is required and must be > 0")
            if not meal.menu or not meal.menu.strip():
                errors.append(f"{name}: menu is required")
        if not self.budget or self.budget <= 0:
            errors.append("budget is required and must be > 0")
        if errors:
            raise ValueError("; ".join(errors))
        return self


class NoteOrderItemRead(BaseModel):
    id: int
    meal_time: str
    total_meal: int
    menu: str


class NoteOrderRead(BaseModel):
    id: int
    status: str
    meal_type: str
    budget: float
    user_id: str | None
    mess: MessRead | None
    items: list[NoteOrderItemRead]
    created_at: datetime


class NoteOrderPage(BaseModel):
    orders: list[NoteOrderRead]
    total: int
    limit: int
    skip: int


class SelectionSummaryIn(BaseModel):
    totalItems: int = Field(ge=0)
    totalPrice: float = Field(ge=0)
    selectedItemIds: list[int]


class SelectionSubmissionIn(BaseModel):
    selections: dict[str, dict[str, bool]]
    summary: SelectionSummaryIn
    budgetInfo: dict[str, Any] = {}
    messSettings: dict[str, Any] = {}
    metadata: dict[str, Any] = {}

    @model_validator(mode="after")
    def _check_summary(self) -> "SelectionSubmissionIn":
        ids = sorted(int(k) for k in self.selections)
        if ids != sorted(self.summary.selectedItemIds):
            raise ValueError("summary.selectedItemIds must match the selections")
        if self.summary.totalItems != len(ids):
            raise ValueError("summary.totalItems must match the selections")
        return self


class SelectionOrderRead(BaseModel):
    id: int
    total_items: int
    total_price: float
    total_budget: float
    budget_status: str
    created_at: datetime
