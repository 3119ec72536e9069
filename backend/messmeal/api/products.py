from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from messmeal.api.deps import page_params, require_admin, require_user
from messmeal.schemas.product import (
    CatalogCategoryRead,
    CatalogProductRead,
    CategoryCreate,
    CategoryRead,
    CategoryRef,
    ProductCreate,
    ProductPage,
    ProductRead,
    ProductUnitRead,
    UnitCreate,
    UnitRead,
)
from messmeal.storage.db import get_session
from messmeal.storage.models import Category, Product, ProductUnit, Unit
from messmeal.storage.repositories import (
    create_category,
    create_unit,
    delete_product,
    get_category,
    get_product,
    get_product_units,
    get_units,
    list_categories,
    list_products,
    list_units,
    products_by_category,
    save_product,
)

router = APIRouter()


def _unit_reads(pairs: list[tuple[ProductUnit, Unit]]) -> list[ProductUnitRead]:
    return [
        ProductUnitRead(id=unit.id, label=unit.label, icon=unit.icon, price=pu.price, is_generic=pu.is_generic)
        for pu, unit in pairs
    ]


def _generic(units: list[ProductUnitRead]) -> ProductUnitRead | None:
    for unit in units:
        if unit.is_generic:
            return unit
    return units[0] if units else None


def _meal_defaults(product: Product) -> dict[str, bool]:
    return {
        "morning": product.morning,
        "afternoon": product.afternoon,
        "night": product.night,
        "editable": product.editable_meal_times,
    }


def _category_read(category: Category) -> CategoryRead:
    return CategoryRead(
        id=category.id,
        name=category.name,
        rand_select=category.rand_select,
        min=category.min_select,
        max=category.max_select,
    )


def product_read(product: Product, category: Category | None, pairs: list[tuple[ProductUnit, Unit]]) -> ProductRead:
    units = _unit_reads(pairs)
    generic = _generic(units)
    return ProductRead(
        id=product.id,
        name=product.name,
        description=product.description,
        category=CategoryRef(id=category.id, name=category.name) if category else None,
        unit=generic,
        units=units,
        price=generic.price if generic else 0.0,
        mdn=_meal_defaults(product),
        created_at=product.created_at,
    )


@router.get("/product/get/all", response_model=ProductPage)
def list_all_products(paging: dict = Depends(page_params), _user=Depends(require_user)) -> ProductPage:
    with get_session() as session:
        products, total = list_products(session, **paging)
        categories = {c.id: c for c in list_categories(session)}
        units = get_product_units(session, [p.id for p in products])
        return ProductPage(
            products=[product_read(p, categories.get(p.category_id), units.get(p.id, [])) for p in products],
            total=total,
            limit=paging["limit"],
            skip=paging["skip"],
        )


@router.post("/product/add", response_model=ProductRead, status_code=201)
def add_product(body: ProductCreate, _admin=Depends(require_admin)) -> ProductRead:
    """Create a product, or update it when the body carries an existing id."""
    with get_session() as session:
        category = get_category(session, body.category_id)
        if category is None:
            raise HTTPException(status_code=404, detail="Category not found")
        known_units = get_units(session, [u.unit_id for u in body.units])
        missing = sorted({u.unit_id for u in body.units} - set(known_units))
        if missing:
            raise HTTPException(status_code=404, detail=f"Unknown unit ids: {missing}")

        if body.id is not None:
            product = get_product(session, body.id)
            if product is None:
                raise HTTPException(status_code=404, detail="Product not found")
        else:
            product = Product(name=body.name, category_id=category.id)
        product.name = body.name
        product.description = body.description.strip()
        product.category_id = category.id
        product.morning = body.meal_times.morning
        product.afternoon = body.meal_times.afternoon
        product.night = body.meal_times.night
        product.editable_meal_times = body.editable_meal_times

        product = save_product(
            session,
            product,
            [ProductUnit(product_id=0, unit_id=u.unit_id, price=u.price, is_generic=u.is_generic) for u in body.units],
        )
        pairs = get_product_units(session, [product.id]).get(product.id, [])
        return product_read(product, category, pairs)


@router.delete("/del/product/{product_id}")
def remove_product(product_id: int, _admin=Depends(require_admin)) -> dict:
    with get_session() as session:
        product = get_product(session, product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        delete_product(session, product)
    return {"ok": True, "message": "Product deleted."}


@router.get("/product/get/unite/all", response_model=list[UnitRead])
def list_all_units(_user=Depends(require_user)) -> list[UnitRead]:
    with get_session() as session:
        return [UnitRead(id=u.id, label=u.label, icon=u.icon) for u in list_units(session)]


@router.post("/product/add/unite", response_model=UnitRead, status_code=201)
def add_unit(body: UnitCreate, _admin=Depends(require_admin)) -> UnitRead:
    with get_session() as session:
        try:
            unit = create_unit(session, Unit(label=body.label, icon=body.icon))
        except IntegrityError:
            session.rollback()
            raise HTTPException(status_code=409, detail=f"Unit '{body.label}' already exists")
        return UnitRead(id=unit.id, label=unit.label, icon=unit.icon)


@router.post("/product/add/category", response_model=CategoryRead, status_code=201)
def add_category(body: CategoryCreate, _admin=Depends(require_admin)) -> CategoryRead:
    with get_session() as session:
        category = Category(
            name=body.name.strip(),
            rand_select=body.rand_select,
            min_select=body.min,
            max_select=body.max,
        )
        try:
            category = create_category(session, category)
        except IntegrityError:
            session.rollback()
            raise HTTPException(status_code=409, detail=f"Category '{body.name}' already exists")
        return _category_read(category)


@router.get("/product/get/category/all", response_model=list[CatalogCategoryRead])
def list_catalog_categories() -> list[CatalogCategoryRead]:
    """Categories with their products, in the shape the remote catalog provider reads."""
    with get_session() as session:
        categories = list_categories(session)
        grouped = products_by_category(session)
        units = get_product_units(session, [p.id for products in grouped.values() for p in products])
        out = []
        for category in categories:
            products = []
            for product in grouped.get(category.id, []):
                generic = _generic(_unit_reads(units.get(product.id, [])))
                products.append(
                    CatalogProductRead(
                        id=product.id,
                        name=product.name,
                        price=generic.price if generic else 0.0,
                        unit=generic.label if generic else "",
                        mdn=_meal_defaults(product),
                    )
                )
            base = _category_read(category)
            out.append(CatalogCategoryRead(**base.model_dump(), title=category.name, products=products))
        return out
