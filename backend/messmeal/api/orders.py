from fastapi import APIRouter, Depends, HTTPException

from messmeal.api.deps import page_params, require_admin, require_user
from messmeal.api.messes import mess_read
from messmeal.schemas.order import (
    NoteOrderCreate,
    NoteOrderItemRead,
    NoteOrderPage,
    NoteOrderRead,
    SelectionOrderRead,
    SelectionSubmissionIn,
)
from messmeal.services.auth import AuthUser
from messmeal.storage.db import get_session
from messmeal.storage.models import NoteOrder, NoteOrderItem, SelectionOrder
from messmeal.storage.repositories import (
    create_note_order,
    create_selection_order,
    get_mess,
    get_note_order_items,
    list_note_orders,
)

router = APIRouter(prefix="/order")


def _note_order_read(order: NoteOrder, items: list[NoteOrderItem], mess) -> NoteOrderRead:
    return NoteOrderRead(
        id=order.id,
        status=order.status,
        meal_type=order.meal_type,
        budget=order.budget,
        user_id=order.user_id,
        mess=mess_read(mess) if mess else None,
        items=[
            NoteOrderItemRead(id=i.id, meal_time=i.meal_time, total_meal=i.total_meal, menu=i.menu)
            for i in items
        ],
        created_at=order.created_at,
    )


@router.post("/add/note_order", response_model=NoteOrderRead, status_code=201)
def add_note_order(body: NoteOrderCreate, user: AuthUser = Depends(require_user)) -> NoteOrderRead:
    with get_session() as session:
        mess = None
        if body.mess_id is not None:
            mess = get_mess(session, body.mess_id)
            if mess is None:
                raise HTTPException(status_code=404, detail="Mess not found")
        order = NoteOrder(user_id=user.id, mess_id=body.mess_id, meal_type=body.meal_type, budget=body.budget)
        items = [
            NoteOrderItem(order_id=0, meal_time=name.upper(), total_meal=meal.total_meal, menu=meal.menu.strip())
            for name, meal in body.active_meals().items()
        ]
        order = create_note_order(session, order, items)
        return _note_order_read(order, items, mess)


@router.get("/get/note/all", response_model=NoteOrderPage)
def list_all_note_orders(paging: dict = Depends(page_params), _admin=Depends(require_admin)) -> NoteOrderPage:
    with get_session() as session:
        orders, total = list_note_orders(session, **paging)
        items = get_note_order_items(session, [o.id for o in orders])
        return NoteOrderPage(
            orders=[
                _note_order_read(o, items.get(o.id, []), get_mess(session, o.mess_id) if o.mess_id else None)
                for o in orders
            ],
            total=total,
            limit=paging["limit"],
            skip=paging["skip"],
        )


@router.post("/add/selection", response_model=SelectionOrderRead, status_code=201)
def add_selection(body: SelectionSubmissionIn, user: AuthUser = Depends(require_user)) -> SelectionOrderRead:
    """Store a submitted selection payload as an order."""
    budget_info = body.budgetInfo
    with get_session() as session:
        order = create_selection_order(
            session,
            SelectionOrder(
                user_id=user.id,
                session_id=body.metadata.get("sessionId"),
                total_items=body.summary.totalItems,
                total_price=body.summary.totalPrice,
                total_budget=float(budget_info.get("totalBudget") or 0),
                budget_status=str(budget_info.get("budgetStatus") or "no-budget"),
                payload=body.model_dump(),
            ),
        )
        return SelectionOrderRead(
            id=order.id,
            total_items=order.total_items,
            total_price=order.total_price,
            total_budget=order.total_budget,
            budget_status=order.budget_status,
            created_at=order.created_at,
        )
