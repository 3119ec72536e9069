from decimal import Decimal

import httpx
import pytest
import respx
from httpx import Response

from messmeal.errors import CatalogUnavailableError
from messmeal.services.catalog import RemoteCatalogProvider, StaticCatalogProvider, build_catalog_provider
from messmeal.services.catalog.providers import parse_item
from messmeal.services.selection.meal_times import MealTimes

BASE_URL = "http://catalog.test"
PATH = "/api/product/get/category/all"


def test_static_catalog_has_the_builtin_items():
    catalog = StaticCatalogProvider().load()
    sugar = catalog.get(7)
    assert sugar.name == "Sugar"
    assert sugar.price == Decimal("50")
    assert sugar.allowed_meal_times == MealTimes.all_on()
    palm_oil = catalog.get(3)
    assert palm_oil.allowed_meal_times == MealTimes(morning=True, afternoon=True, night=False)
    assert palm_oil.editable_meal_times is False
    assert len(catalog) == 48


def test_parse_item_accepts_the_published_field_names():
    item = parse_item(
        {
            "id": "12",
            "name": "Rice",
            "price": "55.5",
            "unite": {"label": "kg"},
            "bld": {"breakfast": False, "lunch": True, "dinner": True, "editable": False},
        },
        category="Grains",
    )
    assert item.id == 12
    assert item.price == Decimal("55.5")
    assert item.unit == "kg"
    assert item.allowed_meal_times == MealTimes(afternoon=True, night=True)
    assert item.editable_meal_times is False
    assert item.category == "Grains"


@respx.mock
def test_remote_catalog_loads_categories():
    respx.get(f"{BASE_URL}{PATH}").mock(
        return_value=Response(
            200,
            json=[
                {
                    "name": "Dairy",
                    "products": [
                        {"id": 1, "name": "Milk", "price": 60, "unit": "litre", "mdn": {"morning": True}},
                    ],
                }
            ],
        )
    )
    with httpx.Client(base_url=BASE_URL) as http:
        catalog = RemoteCatalogProvider(http, PATH).load()
    assert [c.title for c in catalog.categories] == ["Dairy"]
    assert catalog.get(1).allowed_meal_times == MealTimes(morning=True)


@respx.mock
def test_remote_catalog_failure_raises():
    respx.get(f"{BASE_URL}{PATH}").mock(return_value=Response(500))
    with httpx.Client(base_url=BASE_URL) as http:
        with pytest.raises(CatalogUnavailableError):
            RemoteCatalogProvider(http, PATH).load()


@respx.mock
def test_remote_catalog_rejects_malformed_payload():
    respx.get(f"{BASE_URL}{PATH}").mock(return_value=Response(200, json={"categories": []}))
    with httpx.Client(base_url=BASE_URL) as http:
        with pytest.raises(CatalogUnavailableError):
            RemoteCatalogProvider(http, PATH).load()


def test_build_provider_picks_source():
    with httpx.Client(base_url=BASE_URL) as http:
        assert isinstance(build_catalog_provider("remote", http, PATH), RemoteCatalogProvider)
        assert isinstance(build_catalog_provider("static", http, PATH), StaticCatalogProvider)
        assert isinstance(build_catalog_provider("bogus", http, PATH), StaticCatalogProvider)
