from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import func, or_
from sqlmodel import Session, SQLModel, select

from messmeal.logging import get_logger
from messmeal.storage.models import (
    Category,
    Mess,
    NoteOrder,
    NoteOrderItem,
    Product,
    ProductUnit,
    SelectionOrder,
    Unit,
    User,
    utcnow,
)

logger = get_logger(__name__)

DEFAULT_SORT_FIELD = "created_at"


def paginate(
    session: Session,
    model: type[SQLModel],
    *,
    skip: int = 0,
    limit: int = 10,
    sort_by: str = DEFAULT_SORT_FIELD,
    sort_order: str = "desc",
    search: str = "",
    search_columns: Sequence[Any] = (),
    sortable: Sequence[str] = (),
    statement=None,
) -> tuple[list, int]:
    """Slice of rows plus the total matching count. Unknown sort fields fall back to created_at."""
    stmt = statement if statement is not None else select(model)
    term = (search or "").strip()
    if term and search_columns:
        stmt = stmt.where(or_(*[column.ilike(f"%{term}%") for column in search_columns]))

    total = session.exec(select(func.count()).select_from(stmt.subquery())).one()

    field = sort_by if sort_by in sortable else DEFAULT_SORT_FIELD
    column = getattr(model, field)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    rows = list(session.exec(stmt.order_by(ordering, model.id).offset(skip).limit(limit)))
    return rows, int(total)


# -------------------- users --------------------

USER_SORTABLE = ("created_at", "name", "username", "email", "role", "status")


def list_users(session: Session, **paging) -> tuple[list[User], int]:
    return paginate(
        session,
        User,
        search_columns=(User.name, User.username, User.email),
        sortable=USER_SORTABLE,
        **paging,
    )


def get_user(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)


def update_user(session: Session, user: User, changes: dict[str, Any]) -> User:
    for key, value in changes.items():
        setattr(user, key, value)
    user.updated_at = utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("user.updated id=%s fields=%s", user.id, ",".join(sorted(changes)))
    return user


# -------------------- messes --------------------

MESS_SORTABLE = ("created_at", "name", "type", "city", "status")


def list_messes(session: Session, **paging) -> tuple[list[Mess], int]:
    return paginate(
        session,
        Mess,
        search_columns=(Mess.name, Mess.city, Mess.area, Mess.owner_name),
        sortable=MESS_SORTABLE,
        **paging,
    )


def search_messes(session: Session, term: str, limit: int = 10) -> list[Mess]:
    rows, _ = paginate(
        session,
        Mess,
        limit=limit,
        sort_by="name",
        sort_order="asc",
        search=term,
        search_columns=(Mess.name, Mess.city),
        sortable=MESS_SORTABLE,
    )
    return rows


def get_mess(session: Session, mess_id: int) -> Optional[Mess]:
    return session.get(Mess, mess_id)


def save_mess(session: Session, mess: Mess) -> Mess:
    mess.updated_at = utcnow()
    session.add(mess)
    session.commit()
    session.refresh(mess)
    logger.info("mess.saved id=%s name=%s city=%s", mess.id, mess.name, mess.city)
    return mess


# -------------------- categories & units --------------------


def list_categories(session: Session) -> list[Category]:
    return list(session.exec(select(Category).order_by(Category.name)))


def get_category(session: Session, category_id: int) -> Optional[Category]:
    return session.get(Category, category_id)


def create_category(session: Session, category: Category) -> Category:
    session.add(category)
    session.commit()
    session.refresh(category)
    logger.info("category.created id=%s name=%s", category.id, category.name)
    return category


def list_units(session: Session) -> list[Unit]:
    return list(session.exec(select(Unit).order_by(Unit.label)))


def get_units(session: Session, unit_ids: Iterable[int]) -> dict[int, Unit]:
    ids = list(set(unit_ids))
    if not ids:
        return {}
    return {u.id: u for u in session.exec(select(Unit).where(Unit.id.in_(ids)))}


def create_unit(session: Session, unit: Unit) -> Unit:
    session.add(unit)
    session.commit()
    session.refresh(unit)
    logger.info("unit.created id=%s label=%s", unit.id, unit.label)
    return unit


# -------------------- products --------------------

PRODUCT_SORTABLE = ("created_at", "name", "category_id")


def list_products(session: Session, **paging) -> tuple[list[Product], int]:
    return paginate(
        session,
        Product,
        search_columns=(Product.name, Product.description),
        sortable=PRODUCT_SORTABLE,
        **paging,
    )


def products_by_category(session: Session) -> dict[int, list[Product]]:
    grouped: dict[int, list[Product]] = {}
    for product in session.exec(select(Product).order_by(Product.id)):
        grouped.setdefault(product.category_id, []).append(product)
    return grouped


def get_product(session: Session, product_id: int) -> Optional[Product]:
    return session.get(Product, product_id)


def get_product_units(session: Session, product_ids: Iterable[int]) -> dict[int, list[tuple[ProductUnit, Unit]]]:
    ids = list(set(product_ids))
    if not ids:
        return {}
    rows = session.exec(
        select(ProductUnit, Unit)
        .join(Unit, Unit.id == ProductUnit.unit_id)
        .where(ProductUnit.product_id.in_(ids))
        .order_by(ProductUnit.id)
    )
    grouped: dict[int, list[tuple[ProductUnit, Unit]]] = {}
    for product_unit, unit in rows:
        grouped.setdefault(product_unit.product_id, []).append((product_unit, unit))
    return grouped


def save_product(session: Session, product: Product, units: list[ProductUnit]) -> Product:
    """Insert or update a product and replace its unit prices."""
    product.updated_at = utcnow()
    session.add(product)
    session.flush()
    for existing in list(session.exec(select(ProductUnit).where(ProductUnit.product_id == product.id))):
        session.delete(existing)
    for unit in units:
        unit.product_id = product.id
        session.add(unit)
    session.commit()
    session.refresh(product)
    logger.info("product.saved id=%s name=%s units=%s", product.id, product.name, len(units))
    return product


def delete_product(session: Session, product: Product) -> None:
    product_id, name = product.id, product.name
    for unit in list(session.exec(select(ProductUnit).where(ProductUnit.product_id == product.id))):
        session.delete(unit)
    session.delete(product)
    session.commit()
    logger.info("product.deleted id=%s name=%s", product_id, name)


# -------------------- orders --------------------

NOTE_ORDER_SORTABLE = ("created_at", "budget", "status", "meal_type")


def create_note_order(session: Session, order: NoteOrder, items: list[NoteOrderItem]) -> NoteOrder:
    session.add(order)
    session.flush()
    for item in items:
        item.order_id = order.id
        session.add(item)
    session.commit()
    session.refresh(order)
    logger.info(
        "note_order.created id=%s meal_type=%s items=%s budget=%s",
        order.id,
        order.meal_type,
        len(items),
        order.budget,
    )
    return order


def list_note_orders(session: Session, **paging) -> tuple[list[NoteOrder], int]:
    statement = select(NoteOrder).join(Mess, Mess.id == NoteOrder.mess_id, isouter=True)
    return paginate(
        session,
        NoteOrder,
        search_columns=(NoteOrder.status, NoteOrder.meal_type, Mess.name),
        sortable=NOTE_ORDER_SORTABLE,
        statement=statement,
        **paging,
    )


def get_note_order_items(session: Session, order_ids: Iterable[int]) -> dict[int, list[NoteOrderItem]]:
    ids = list(set(order_ids))
    if not ids:
        return {}
    grouped: dict[int, list[NoteOrderItem]] = {}
    for item in session.exec(select(NoteOrderItem).where(NoteOrderItem.order_id.in_(ids)).order_by(NoteOrderItem.id)):
        grouped.setdefault(item.order_id, []).append(item)
    return grouped


def create_selection_order(session: Session, order: SelectionOrder) -> SelectionOrder:
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info(
        "selection_order.created id=%s user=%s items=%s total=%s status=%s",
        order.id,
        order.user_id,
        order.total_items,
        order.total_price,
        order.budget_status,
    )
    return order
