"""Best-effort Redis cache of a user's budget and mess-day preferences.

Failures are logged and ignored: save returns False, load returns None.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from redis import Redis
from redis.exceptions import RedisError

from messmeal.logging import get_logger
from messmeal.services.budget.calculator import BudgetInputs
from messmeal.services.selection.meal_times import MealTimes

logger = get_logger(__name__)

BUDGET_KEY = "mess_budget_preferences"
MESS_DAY_KEY = "mess_day_preferences"


class BudgetPreferenceCache:
    def __init__(self, redis_client: Redis, ttl_s: int) -> None:
        self._redis = redis_client
        self._ttl_s = ttl_s

    def _save(self, prefix: str, user_id: str, data: dict[str, Any]) -> bool:
        payload = dict(data, lastUpdated=datetime.now(timezone.utc).isoformat())
        try:
            self._redis.set(f"{prefix}:{user_id}", json.dumps(payload), ex=self._ttl_s)
            return True
        except (RedisError, OSError) as e:
            logger.warning("preferences.save_failed key=%s user=%s error=%s", prefix, user_id, e)
            return False

    def _load(self, prefix: str, user_id: str) -> Optional[dict]:
        try:
            raw = self._redis.get(f"{prefix}:{user_id}")
            if raw is None:
                return None
            data = json.loads(raw)
            return data if isinstance(data, dict) else None
        except (RedisError, OSError, ValueError) as e:
            logger.warning("preferences.load_failed key=%s user=%s error=%s", prefix, user_id, e)
            return None

    def save_budget(self, user_id: str, inputs: BudgetInputs) -> bool:
        return self._save(
            BUDGET_KEY,
            user_id,
            {
                "budgetPerStudent": float(inputs.budget_per_student),
                "totalStudents": inputs.total_students,
            },
        )

    def load_budget(self, user_id: str) -> Optional[BudgetInputs]:
        data = self._load(BUDGET_KEY, user_id)
        if data is None:
            return None
        try:
            budget = Decimal(str(data.get("budgetPerStudent", 0)))
            students = int(data.get("totalStudents", 0))
        except (ArithmeticError, TypeError, ValueError) as e:
            logger.warning("preferences.budget_corrupt user=%s error=%s", user_id, e)
            return None
        if budget < 0 or students < 0:
            return None
        return BudgetInputs(budget, students)

    def save_mess_days(self, user_id: str, mess_days: MealTimes) -> bool:
        return self._save(MESS_DAY_KEY, user_id, mess_days.as_dict())

    def load_mess_days(self, user_id: str) -> Optional[MealTimes]:
        data = self._load(MESS_DAY_KEY, user_id)
        if data is None:
            return None
        data.pop("lastUpdated", None)
        mess_days = MealTimes.from_mapping(data)
        return mess_days if mess_days.any_active() else None

    def close(self) -> None:
        try:
            self._redis.close()
        except (RedisError, OSError) as e:
            logger.warning("preferences.close_failed error=%s", e)
