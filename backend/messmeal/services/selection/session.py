"""A customer's selection page: store, budget inputs, mess days and the save state machine.

    idle -> editing (first mutation) -> submitting (save) -> idle | error

Only one save runs at a time. Each save takes a fresh token and only the
holder of the current token may finish it.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from messmeal.errors import (
    MealTimeLockedError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownItemError,
)
from messmeal.logging import get_logger
from messmeal.services.budget.calculator import (
    BudgetDerived,
    BudgetInputs,
    BudgetThresholds,
    PricingRule,
    compute_budget,
)
from messmeal.services.budget.validation import (
    ValidationResult,
    validate_budget_inputs,
    validate_meal_selections,
    validate_mess_days,
)
from messmeal.services.catalog.models import Catalog, SelectableItem
from messmeal.services.selection.meal_times import MealTimes
from messmeal.services.selection.store import SelectionStore
from messmeal.services.submission.client import DEFAULT_FAILURE_MESSAGE, SubmissionClient

logger = get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"
    ERROR = "error"


@dataclass
class SaveResult:
    ok: bool
    errors: list[str] = field(default_factory=list)
    response: Optional[dict] = None


class SelectionSession:
    def __init__(
        self,
        catalog: Catalog,
        *,
        user_id: Optional[str] = None,
        pricing_rule: PricingRule = PricingRule.FLAT,
        thresholds: Optional[BudgetThresholds] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.id = session_id or uuid4().hex
        self.user_id = user_id
        self.catalog = catalog
        self.pricing_rule = pricing_rule
        self.thresholds = thresholds or BudgetThresholds()
        self.store = SelectionStore()
        self.budget = BudgetInputs()
        self.mess_days = MealTimes.all_on()
        self.note = ""
        self.state = SessionState.IDLE
        self.error: Optional[str] = None
        self.last_saved_at: Optional[datetime] = None
        self._token = 0
        self._active_token: Optional[int] = None
        self._lock = threading.RLock()

    def item(self, item_id: int) -> SelectableItem:
        if item_id not in self.catalog:
            raise UnknownItemError(item_id)
        return self.catalog.get(item_id)

    def _touch(self) -> None:
        # Edits made while a save is in flight do not leave the submitting state
        if self.state is not SessionState.SUBMITTING:
            self.state = SessionState.EDITING
        self.error = None

    def _settle(self) -> None:
        if self.state is not SessionState.SUBMITTING:
            self.state = SessionState.IDLE
        self.error = None

    def toggle_item(self, item_id: int) -> bool:
        item = self.item(item_id)
        with self._lock:
            selected = self.store.toggle_item(item)
            self._touch()
        logger.info("selection.toggle session=%s item=%s selected=%s", self.id, item_id, selected)
        return selected

    def set_meal_time(self, item_id: int, meal_time: str, value: bool) -> MealTimes:
        item = self.item(item_id)
        if not item.editable_meal_times:
            raise MealTimeLockedError(item_id)
        with self._lock:
            updated = self.store.set_meal_time(item_id, meal_time, value)
            self._touch()
        return updated

    def apply_preferences(
        self, budget: Optional[BudgetInputs] = None, mess_days: Optional[MealTimes] = None
    ) -> None:
        """Seed remembered inputs without counting as an edit."""
        with self._lock:
            if budget is not None:
                self.budget = budget
            if mess_days is not None and mess_days.any_active():
                self.mess_days = mess_days

    def set_budget(self, budget_per_student: Decimal, total_students: int) -> ValidationResult:
        """Apply budget inputs unless negative. Returns every inline message for the inputs."""
        result = validate_budget_inputs(budget_per_student, total_students)
        if budget_per_student < 0 or total_students < 0:
            return result
        with self._lock:
            self.budget = BudgetInputs(Decimal(budget_per_student), int(total_students))
            self._touch()
        return result

    def set_mess_days(self, mess_days: MealTimes) -> ValidationResult:
        result = validate_mess_days(mess_days)
        if result.is_valid:
            with self._lock:
                self.mess_days = mess_days
                self._touch()
        return result

    def set_note(self, note: str) -> None:
        with self._lock:
            self.note = note.strip()
            self._touch()

    def clear(self) -> None:
        with self._lock:
            self.store.clear()
            self._settle()

    def cancel(self) -> None:
        with self._lock:
            self.store.cancel()
            self._settle()

    def derived(self) -> BudgetDerived:
        return compute_budget(
            self.budget,
            self.store.selections,
            self.catalog,
            rule=self.pricing_rule,
            thresholds=self.thresholds,
        )

    def validate(self) -> ValidationResult:
        return validate_budget_inputs(
            self.budget.budget_per_student, self.budget.total_students
        ).merge(validate_meal_selections(self.store.selections, self.mess_days))

    def build_payload(self, token: int = 0) -> dict:
        selections = self.store.selections
        derived = self.derived()
        selected_ids = sorted(selections)
        return {
            "selections": {str(item_id): selections[item_id].as_dict() for item_id in selected_ids},
            "summary": {
                "totalItems": len(selected_ids),
                "totalPrice": float(derived.total_selection_price),
                "selectedItemIds": selected_ids,
            },
            "budgetInfo": {
                "budgetPerStudent": float(self.budget.budget_per_student),
                "totalStudents": self.budget.total_students,
                "totalBudget": float(derived.total_budget),
                "remainingBudget": float(derived.remaining_budget),
                "budgetStatus": derived.budget_status.value,
                "pricingRule": self.pricing_rule.value,
            },
            "messSettings": {"activeMealTimes": self.mess_days.as_dict()},
            "metadata": {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "userId": self.user_id,
                "sessionId": self.id,
                "note": self.note,
                "submissionToken": token,
            },
        }

    def begin_save(self) -> tuple[int, dict]:
        """Enter the submitting state and package the payload. Raises if a save is in flight."""
        with self._lock:
            if self.state is SessionState.SUBMITTING:
                raise SubmissionInProgressError()
            self._token += 1
            self._active_token = self._token
            self.state = SessionState.SUBMITTING
            self.error = None
            return self._token, self.build_payload(self._token)

    def finish_save(self, token: int, submitted: dict, error: Optional[str] = None) -> bool:
        """Record the outcome of a save. Stale tokens are ignored and return False."""
        with self._lock:
            if token != self._active_token:
                logger.warning("selection.save.stale_token session=%s token=%s", self.id, token)
                return False
            self._active_token = None
            if error is not None:
                self.state = SessionState.ERROR
                self.error = error
                return True
            saved = {
                int(item_id): MealTimes.from_mapping(flags)
                for item_id, flags in submitted["selections"].items()
            }
            self.store.mark_saved(saved)
            self.last_saved_at = datetime.now(timezone.utc)
            self.state = SessionState.EDITING if self.store.has_changes else SessionState.IDLE
            self.error = None
            return True

    def save(self, client: SubmissionClient, session_cookie: Optional[str] = None) -> SaveResult:
        validation = self.validate()
        if not validation.is_valid:
            return SaveResult(ok=False, errors=validation.errors)
        token, payload = self.begin_save()
        try:
            response = client.submit(payload, session_cookie=session_cookie)
        except SubmissionError as e:
            self.finish_save(token, payload, error=str(e))
            logger.warning("selection.save.failed session=%s error=%s", self.id, e)
            return SaveResult(ok=False, errors=[str(e)])
        except Exception:
            # Anything else still has to release the in-flight token
            logger.exception("selection.save.crashed session=%s", self.id)
            self.finish_save(token, payload, error=DEFAULT_FAILURE_MESSAGE)
            return SaveResult(ok=False, errors=[DEFAULT_FAILURE_MESSAGE])
        self.finish_save(token, payload)
        logger.info(
            "selection.save.done session=%s items=%s total=%s",
            self.id,
            payload["summary"]["totalItems"],
            payload["summary"]["totalPrice"],
        )
        return SaveResult(ok=True, response=response)
