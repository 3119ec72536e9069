"""Selection sessions: the customer's food selection page backed by the selection core."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from messmeal.api.deps import require_user, session_cookie
from messmeal.context import AppContext, get_context
from messmeal.schemas.selection import (
    BreakdownView,
    BudgetInputsView,
    BudgetUpdate,
    BudgetView,
    MealTimesModel,
    MealTimeUpdate,
    NoteUpdate,
    SelectionActionResponse,
    SelectionView,
)
from messmeal.services.auth import AuthUser
from messmeal.services.budget.breakdown import cost_by_category, meal_time_distribution
from messmeal.services.selection.meal_times import MealTimes
from messmeal.services.selection.session import SelectionSession

router = APIRouter(prefix="/selection")


def _meal_map(selections: dict[int, MealTimes]) -> dict[str, MealTimesModel]:
    return {str(item_id): MealTimesModel(**flags.as_dict()) for item_id, flags in sorted(selections.items())}


def session_view(session: SelectionSession) -> SelectionView:
    derived = session.derived()
    return SelectionView(
        id=session.id,
        state=session.state.value,
        error=session.error,
        selected_item_ids=sorted(session.store.selected_item_ids),
        selections=_meal_map(session.store.selections),
        initial_snapshot=_meal_map(session.store.initial_snapshot),
        has_changes=session.store.has_changes,
        budget_inputs=BudgetInputsView(
            budget_per_student=float(session.budget.budget_per_student),
            total_students=session.budget.total_students,
        ),
        mess_days=MealTimesModel(**session.mess_days.as_dict()),
        note=session.note,
        pricing_rule=session.pricing_rule.value,
        budget=BudgetView(
            total_budget=float(derived.total_budget),
            total_selection_price=float(derived.total_selection_price),
            remaining_budget=float(derived.remaining_budget),
            budget_status=derived.budget_status.value,
            utilization_percent=round(float(derived.utilization_percent), 2),
            is_over_budget=derived.is_over_budget,
        ),
        last_saved_at=session.last_saved_at,
    )


def _respond(session: SelectionSession, errors: Optional[list[str]] = None) -> SelectionActionResponse:
    return SelectionActionResponse(ok=not errors, errors=errors or [], session=session_view(session))


def load_session(
    session_id: str,
    user: AuthUser = Depends(require_user),
    context: AppContext = Depends(get_context),
) -> SelectionSession:
    session = context.sessions.get(session_id, user.id)
    if session is None:
        raise HTTPException(status_code=404, detail="Selection session not found")
    return session


@router.post("/sessions", response_model=SelectionActionResponse, status_code=201)
def create_session(
    user: AuthUser = Depends(require_user),
    context: AppContext = Depends(get_context),
) -> SelectionActionResponse:
    session = context.sessions.create(context.catalog, user.id)
    # A cache miss or a Redis outage both come back as None and leave the defaults
    session.apply_preferences(
        budget=context.preferences.load_budget(user.id),
        mess_days=context.preferences.load_mess_days(user.id),
    )
    return _respond(session)


@router.get("/sessions/{session_id}", response_model=SelectionView)
def get_session_view(session: SelectionSession = Depends(load_session)) -> SelectionView:
    return session_view(session)


@router.delete("/sessions/{session_id}")
def delete_session(
    session: SelectionSession = Depends(load_session),
    context: AppContext = Depends(get_context),
) -> dict:
    context.sessions.discard(session.id)
    return {"ok": True}


@router.post("/sessions/{session_id}/items/{item_id}/toggle", response_model=SelectionActionResponse)
def toggle_item(item_id: int, session: SelectionSession = Depends(load_session)) -> SelectionActionResponse:
    session.toggle_item(item_id)
    return _respond(session)


@router.put(
    "/sessions/{session_id}/items/{item_id}/meal-times/{meal_time}",
    response_model=SelectionActionResponse,
)
def set_meal_time(
    item_id: int,
    meal_time: str,
    body: MealTimeUpdate,
    session: SelectionSession = Depends(load_session),
) -> SelectionActionResponse:
    session.set_meal_time(item_id, meal_time, body.value)
    return _respond(session)


@router.put("/sessions/{session_id}/budget", response_model=SelectionActionResponse)
def set_budget(
    body: BudgetUpdate,
    session: SelectionSession = Depends(load_session),
    user: AuthUser = Depends(require_user),
    context: AppContext = Depends(get_context),
) -> SelectionActionResponse:
    result = session.set_budget(body.budget_per_student, body.total_students)
    if body.budget_per_student >= 0 and body.total_students >= 0:
        context.preferences.save_budget(user.id, session.budget)
    return _respond(session, result.errors)


@router.put("/sessions/{session_id}/mess-days", response_model=SelectionActionResponse)
def set_mess_days(
    body: MealTimesModel,
    session: SelectionSession = Depends(load_session),
    user: AuthUser = Depends(require_user),
    context: AppContext = Depends(get_context),
) -> SelectionActionResponse:
    result = session.set_mess_days(MealTimes(**body.model_dump()))
    if result.is_valid:
        context.preferences.save_mess_days(user.id, session.mess_days)
    return _respond(session, result.errors)


@router.put("/sessions/{session_id}/note", response_model=SelectionActionResponse)
def set_note(body: NoteUpdate, session: SelectionSession = Depends(load_session)) -> SelectionActionResponse:
    session.set_note(body.note)
    return _respond(session)


@router.post("/sessions/{session_id}/clear", response_model=SelectionActionResponse)
def clear_selection(session: SelectionSession = Depends(load_session)) -> SelectionActionResponse:
    session.clear()
    return _respond(session)


@router.post("/sessions/{session_id}/cancel", response_model=SelectionActionResponse)
def cancel_selection(session: SelectionSession = Depends(load_session)) -> SelectionActionResponse:
    session.cancel()
    return _respond(session)


@router.post("/sessions/{session_id}/save", response_model=SelectionActionResponse)
def save_selection(
    session: SelectionSession = Depends(load_session),
    cookie: Optional[str] = Depends(session_cookie),
    context: AppContext = Depends(get_context),
) -> SelectionActionResponse:
    result = session.save(context.submission, session_cookie=cookie)
    return _respond(session, result.errors)


@router.get("/sessions/{session_id}/breakdown", response_model=BreakdownView)
def breakdown(session: SelectionSession = Depends(load_session)) -> BreakdownView:
    selections = session.store.selections
    costs = cost_by_category(selections, session.catalog, session.pricing_rule)
    return BreakdownView(
        cost_by_category={title: float(total) for title, total in costs.items()},
        meal_time_distribution=meal_time_distribution(selections),
    )
