from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MealTimesModel(BaseModel):
    """Accepts morning/afternoon/night or breakfast/lunch/dinner; always answers with the former."""

    model_config = ConfigDict(populate_by_name=True)

    morning: bool = Field(default=False, validation_alias=AliasChoices("morning", "breakfast"))
    afternoon: bool = Field(default=False, validation_alias=AliasChoices("afternoon", "lunch"))
    night: bool = Field(default=False, validation_alias=AliasChoices("night", "dinner"))


class MealTimeUpdate(BaseModel):
    value: bool


class BudgetUpdate(BaseModel):
    # Negative values are reported inline rather than rejected by the schema
    budget_per_student: Decimal = Field(
        default=Decimal("0"), validation_alias=AliasChoices("budget_per_student", "budgetPerStudent")
    )
    total_students: int = Field(default=0, validation_alias=AliasChoices("total_students", "totalStudents"))


class NoteUpdate(BaseModel):
    note: str = ""


class BudgetInputsView(BaseModel):
    budget_per_student: float
    total_students: int


class BudgetView(BaseModel):
    total_budget: float
    total_selection_price: float
    remaining_budget: float
    budget_status: str
    utilization_percent: float
    is_over_budget: bool


class SelectionView(BaseModel):
    id: str
    state: str
    error: str | None = None
    selected_item_ids: list[int]
    selections: dict[str, MealTimesModel]
    initial_snapshot: dict[str, MealTimesModel]
    has_changes: bool
    budget_inputs: BudgetInputsView
    mess_days: MealTimesModel
    note: str
    pricing_rule: str
    budget: BudgetView
    last_saved_at: datetime | None = None


class SelectionActionResponse(BaseModel):
    ok: bool = True
    errors: list[str] = []
    session: SelectionView


class BreakdownView(BaseModel):
    cost_by_category: dict[str, float]
    meal_time_distribution: dict[str, int]
