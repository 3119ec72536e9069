from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


MESS_TYPES = ("BOYS_MESS", "GIRLS_MESS", "FAMILY_MESS", "OTHER")
RAND_SELECT_MODES = ("NONE", "STATIC", "DYNAMIC")
NOTE_MEAL_TIMES = ("BREAKFAST", "LUNCH", "DINNER")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True)
    role: str = "user"  # user | admin
    status: str = "active"  # active | inactive | banned
    dob: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Mess(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    type: str = "BOYS_MESS"
    phone: str = ""
    status: str = "active"
    street: str = ""
    area: str = ""
    city: str = ""
    postal_code: Optional[int] = None
    owner_name: str = ""
    owner_phone: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    # How a menu planner picks products from this category: NONE | STATIC | DYNAMIC
    rand_select: str = "NONE"
    min_select: int = 0
    max_select: int = 0
    created_at: datetime = Field(default_factory=utcnow)


class Unit(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    label: str = Field(index=True, unique=True)
    icon: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str = ""
    category_id: int = Field(foreign_key="category.id")
    # Default meal times for a fresh selection of this product
    morning: bool = False
    afternoon: bool = False
    night: bool = False
    editable_meal_times: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProductUnit(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="product.id", index=True)
    unit_id: int = Field(foreign_key="unit.id")
    price: float
    is_generic: bool = False


class NoteOrder(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[str] = Field(default=None, index=True)
    mess_id: Optional[int] = Field(default=None, foreign_key="mess.id")
    meal_type: str = "single"  # single | multi
    budget: float
    status: str = "PENDING"
    created_at: datetime = Field(default_factory=utcnow)


class NoteOrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="noteorder.id", index=True)
    meal_time: str  # BREAKFAST | LUNCH | DINNER
    total_meal: int
    menu: str


class SelectionOrder(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[str] = Field(default=None, index=True)
    session_id: Optional[str] = None
    total_items: int
    total_price: float
    total_budget: float = 0.0
    budget_status: str = "no-budget"
    payload: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow)
