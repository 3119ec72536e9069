import json
from decimal import Decimal

from redis.exceptions import ConnectionError as RedisConnectionError

from messmeal.services.budget.calculator import BudgetInputs
from messmeal.services.preferences import BudgetPreferenceCache
from messmeal.services.selection.meal_times import MealTimes


class DownRedis:
    def get(self, key):
        raise RedisConnectionError("down")

    def set(self, key, value, ex=None):
        raise RedisConnectionError("down")

    def close(self):
        raise RedisConnectionError("down")


def test_budget_round_trip_with_ttl(redis):
    cache = BudgetPreferenceCache(redis, ttl_s=60)
    assert cache.save_budget("u1", BudgetInputs(Decimal("45.5"), 12))
    assert redis.expiry["mess_budget_preferences:u1"] == 60
    assert "lastUpdated" in json.loads(redis.data["mess_budget_preferences:u1"])
    assert cache.load_budget("u1") == BudgetInputs(Decimal("45.5"), 12)


def test_corrupt_or_negative_budget_is_ignored(redis):
    cache = BudgetPreferenceCache(redis, ttl_s=60)
    redis.data["mess_budget_preferences:u1"] = "{not json"
    assert cache.load_budget("u1") is None
    redis.data["mess_budget_preferences:u1"] = json.dumps({"budgetPerStudent": -1, "totalStudents": 3})
    assert cache.load_budget("u1") is None


def test_mess_days_need_an_active_meal_time(redis):
    cache = BudgetPreferenceCache(redis, ttl_s=60)
    cache.save_mess_days("u1", MealTimes(night=True))
    assert cache.load_mess_days("u1") == MealTimes(night=True)
    cache.save_mess_days("u1", MealTimes())
    assert cache.load_mess_days("u1") is None
    assert cache.load_mess_days("someone-else") is None


def test_redis_outage_is_not_fatal():
    cache = BudgetPreferenceCache(DownRedis(), ttl_s=60)
    assert cache.save_budget("u1", BudgetInputs(Decimal("1"), 1)) is False
    assert cache.load_budget("u1") is None
    assert cache.load_mess_days("u1") is None
    cache.close()
