from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

import httpx

from messmeal.errors import CatalogUnavailableError
from messmeal.logging import get_logger
from messmeal.services.catalog.defaults import DEFAULT_CATEGORIES
from messmeal.services.catalog.models import Catalog, CatalogCategory, SelectableItem
from messmeal.services.selection.meal_times import MealTimes
from messmeal.utils.timing import time_span

logger = get_logger(__name__)

# Meal-time defaults have been published under all of these keys
_MEAL_TIME_KEYS = ("mdn", "bld", "meal_times", "mealTimeDefaults", "allowed_meal_times")


class StaticCatalogProvider:
    def __init__(self, categories: Iterable[CatalogCategory] = DEFAULT_CATEGORIES):
        self._categories = tuple(categories)

    def load(self) -> Catalog:
        return Catalog(self._categories)


def _unit_label(raw: Any) -> str:
    if isinstance(raw, dict):
        return str(raw.get("label") or raw.get("name") or "")
    return str(raw or "")


def parse_item(raw: dict, category: str = "") -> SelectableItem:
    meal_defaults: dict = {}
    for key in _MEAL_TIME_KEYS:
        if isinstance(raw.get(key), dict):
            meal_defaults = raw[key]
            break
    editable = raw.get("editable", meal_defaults.get("editable", True))
    try:
        price = Decimal(str(raw.get("price", 0)))
    except InvalidOperation as e:
        raise ValueError(f"bad price for item {raw.get('id')}: {raw.get('price')!r}") from e
    return SelectableItem(
        id=int(raw["id"]),
        name=str(raw.get("name", "")),
        price=price,
        unit=_unit_label(raw.get("unit", raw.get("unite"))),
        allowed_meal_times=MealTimes.from_mapping(meal_defaults),
        editable_meal_times=bool(editable),
        category=category,
    )


def parse_categories(payload: Any) -> list[CatalogCategory]:
    """Parse [{title|name, items|products: [...]}] into catalog categories."""
    if not isinstance(payload, list):
        raise ValueError("catalog payload must be a list of categories")
    categories = []
    for raw_category in payload:
        title = str(raw_category.get("title") or raw_category.get("name") or "")
        raw_items = raw_category.get("items")
        if raw_items is None:
            raw_items = raw_category.get("products") or []
        if isinstance(raw_items, dict):
            raw_items = list(raw_items.values())
        items = tuple(parse_item(raw, category=title) for raw in raw_items)
        categories.append(CatalogCategory(title=title, items=items))
    return categories


class RemoteCatalogProvider:
    """Loads the catalog with a GET against the product/category endpoint."""

    def __init__(self, http: httpx.Client, path: str):
        self._http = http
        self._path = path

    def load(self) -> Catalog:
        with time_span("catalog.load.remote", path=self._path):
            try:
                resp = self._http.get(self._path)
                resp.raise_for_status()
                categories = parse_categories(resp.json())
            except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("catalog.load_failed path=%s error=%s", self._path, e)
                raise CatalogUnavailableError(f"Could not load catalog: {e}") from e
        catalog = Catalog(categories)
        logger.info("catalog.loaded source=remote categories=%s items=%s", len(categories), len(catalog))
        return catalog


def build_catalog_provider(source: str, http: httpx.Client, path: str):
    if source == "remote":
        return RemoteCatalogProvider(http, path)
    if source != "static":
        logger.warning("catalog.unknown_source source=%s falling back to static", source)
    return StaticCatalogProvider()
