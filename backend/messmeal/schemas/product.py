from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from messmeal.schemas.selection import MealTimesModel


class UnitCreate(BaseModel):
    label: str = Field(min_length=1)
    icon: str = ""

    @field_validator("label", "icon")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class UnitRead(BaseModel):
    id: int
    label: str
    icon: str


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    rand_select: Literal["NONE", "STATIC", "DYNAMIC"] = "NONE"
    min: int = Field(default=0, ge=0)
    max: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "CategoryCreate":
        if self.rand_select == "DYNAMIC" and self.max < self.min:
            raise ValueError("max must be greater than or equal to min")
        return self


class CategoryRead(BaseModel):
    id: int
    name: str
    rand_select: str
    min: int
    max: int


class ProductUnitIn(BaseModel):
    unit_id: int
    price: float = Field(gt=0)
    is_generic: bool = False


class ProductCreate(BaseModel):
    id: int | None = None
    name: str
    category_id: int
    description: str = ""
    meal_times: MealTimesModel = Field(
        default_factory=MealTimesModel, validation_alias=AliasChoices("meal_times", "mdn", "bld")
    )
    editable_meal_times: bool = True
    units: list[ProductUnitIn] = []

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Product name is required")
        if len(value) < 2:
            raise ValueError("Product name must be at least 2 characters")
        return value

    @model_validator(mode="after")
    def _check_units(self) -> "ProductCreate":
        if not self.units:
            raise ValueError("At least one unit is required")
        generic = [u for u in self.units if u.is_generic]
        if len(generic) != 1:
            raise ValueError("One unit must be marked as generic")
        if len({u.unit_id for u in self.units}) != len(self.units):
            raise ValueError("Each unit can be priced only once")
        return self


class ProductUnitRead(BaseModel):
    id: int
    label: str
    icon: str
    price: float
    is_generic: bool


class CategoryRef(BaseModel):
    id: int
    name: str


class ProductRead(BaseModel):
    id: int
    name: str
    description: str
    category: CategoryRef | None
    unit: ProductUnitRead | None
    units: list[ProductUnitRead]
    price: float
    mdn: dict[str, bool]
    created_at: datetime


class ProductPage(BaseModel):
    products: list[ProductRead]
    total: int
    limit: int
    skip: int


class CatalogProductRead(BaseModel):
    id: int
    name: str
    price: float
    unit: str
    mdn: dict[str, bool]


class CatalogCategoryRead(BaseModel):
    id: int
    name: str
    title: str
    rand_select: str
    min: int
    max: int
    products: list[CatalogProductRead]
